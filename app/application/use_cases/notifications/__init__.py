"""Public helpers for emitting and managing user notifications."""

from .cleanup import NotificationCleanupTask
from .events import (
    notify_analysis_completed,
    notify_analysis_started,
    notify_api_usage_anomaly,
    notify_email_not_verified,
    notify_low_credits,
    notify_missing_transcript,
    notify_model_upgrade,
    notify_monthly_quota_reached,
    notify_new_device_login,
    notify_new_feature,
    notify_password_changed,
    notify_payment_failed,
    notify_performance_optimization,
    notify_processing_failed,
    notify_subscription_expiring,
    notify_thumbnail_generated,
    notify_tier_limit_reached,
    notify_tip,
    notify_usage_threshold,
)
from .service import NotificationService

__all__ = [
    "NotificationCleanupTask",
    "NotificationService",
    "notify_analysis_completed",
    "notify_analysis_started",
    "notify_api_usage_anomaly",
    "notify_email_not_verified",
    "notify_low_credits",
    "notify_missing_transcript",
    "notify_model_upgrade",
    "notify_monthly_quota_reached",
    "notify_new_device_login",
    "notify_new_feature",
    "notify_password_changed",
    "notify_payment_failed",
    "notify_performance_optimization",
    "notify_processing_failed",
    "notify_subscription_expiring",
    "notify_thumbnail_generated",
    "notify_tier_limit_reached",
    "notify_tip",
    "notify_usage_threshold",
]
