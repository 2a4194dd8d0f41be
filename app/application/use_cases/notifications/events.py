"""Utility helpers to generate and dispatch domain notifications.

Each helper fixes the category, severity and metadata shape of one kind of
notification and delegates to :meth:`NotificationService.send`.
"""

from __future__ import annotations

from app.domain.entities import Notification, NotificationCategory, NotificationSeverity

from .service import NotificationService


# System


async def notify_subscription_expiring(
    service: NotificationService, user_id: str, *, days_left: int
) -> Notification:
    """Warn the user that their subscription ends in ``days_left`` days."""

    return await service.send(
        user_id,
        "Subscription Expiring Soon",
        f"Your subscription will expire in {days_left} days. Renew now to avoid interruption.",
        NotificationCategory.SYSTEM,
        metadata={"days_left": days_left},
        severity=NotificationSeverity.WARNING,
        action_url="/settings/subscription",
        action_button_text="Renew",
    )


async def notify_payment_failed(service: NotificationService, user_id: str) -> Notification:
    return await service.send(
        user_id,
        "Payment Failed",
        "We could not process your payment. Please update your payment method.",
        NotificationCategory.SYSTEM,
        severity=NotificationSeverity.ERROR,
        action_url="/settings/billing",
        action_button_text="Update payment method",
    )


async def notify_email_not_verified(service: NotificationService, user_id: str) -> Notification:
    return await service.send(
        user_id,
        "Email Not Verified",
        "Please verify your email address to access all features.",
        NotificationCategory.SYSTEM,
        severity=NotificationSeverity.WARNING,
        action_url="/settings/profile",
    )


async def notify_monthly_quota_reached(
    service: NotificationService, user_id: str
) -> Notification:
    return await service.send(
        user_id,
        "Monthly Quota Reached",
        "You have reached your monthly video analysis limit. Upgrade your plan to continue.",
        NotificationCategory.SYSTEM,
        severity=NotificationSeverity.WARNING,
        action_url="/settings/subscription",
        action_button_text="Upgrade",
    )


# Processing


async def notify_analysis_started(
    service: NotificationService,
    user_id: str,
    *,
    video_id: str,
    video_url: str | None = None,
) -> Notification:
    """Tell the user that the analysis of ``video_id`` is running."""

    return await service.send(
        user_id,
        "AI Analysis Started",
        "Your video is being analyzed. We'll notify you when it's complete.",
        NotificationCategory.PROCESSING,
        metadata={"video_id": video_id, "video_url": video_url},
    )


async def notify_analysis_completed(
    service: NotificationService,
    user_id: str,
    *,
    video_id: str,
    video_url: str | None = None,
) -> Notification:
    """Tell the user that the results for ``video_id`` are ready."""

    return await service.send(
        user_id,
        "AI Analysis Completed",
        "Your video analysis is ready! View the results now.",
        NotificationCategory.PROCESSING,
        metadata={"video_id": video_id, "video_url": video_url},
        severity=NotificationSeverity.SUCCESS,
        action_url=f"/results/{video_id}",
        action_button_text="View results",
    )


async def notify_thumbnail_generated(
    service: NotificationService, user_id: str, *, video_id: str
) -> Notification:
    return await service.send(
        user_id,
        "Thumbnail Generation Complete",
        "Your AI-generated thumbnail ideas are ready to view.",
        NotificationCategory.PROCESSING,
        metadata={"video_id": video_id},
        severity=NotificationSeverity.SUCCESS,
        action_url=f"/results/{video_id}",
        action_button_text="View thumbnails",
    )


async def notify_processing_failed(
    service: NotificationService, user_id: str, *, video_id: str, reason: str
) -> Notification:
    """Report that processing ``video_id`` failed because of ``reason``."""

    return await service.send(
        user_id,
        "Video Processing Failed",
        f"We encountered an error: {reason}. Please try again.",
        NotificationCategory.PROCESSING,
        metadata={"video_id": video_id, "reason": reason},
        severity=NotificationSeverity.ERROR,
        action_url="/support",
        action_button_text="Contact support",
    )


async def notify_missing_transcript(
    service: NotificationService, user_id: str, *, video_id: str
) -> Notification:
    return await service.send(
        user_id,
        "Missing Transcript",
        "This video does not have a transcript available. Try uploading the file directly.",
        NotificationCategory.PROCESSING,
        metadata={"video_id": video_id},
        severity=NotificationSeverity.WARNING,
        action_url="/upload",
    )


# Usage and limits


async def notify_usage_threshold(
    service: NotificationService, user_id: str, *, percentage: int
) -> Notification:
    """Tell the user that ``percentage`` of the monthly plan is used."""

    return await service.send(
        user_id,
        f"{percentage}% of Plan Limit Reached",
        f"You've used {percentage}% of your monthly video analysis limit.",
        NotificationCategory.USAGE,
        metadata={"percentage": percentage},
        severity=NotificationSeverity.WARNING if percentage >= 90 else NotificationSeverity.INFO,
        action_url="/settings/usage",
    )


async def notify_low_credits(
    service: NotificationService, user_id: str, *, credits_left: int
) -> Notification:
    return await service.send(
        user_id,
        "Credits Running Low",
        f"You have {credits_left} credits remaining. Consider purchasing more to continue.",
        NotificationCategory.USAGE,
        metadata={"credits_left": credits_left},
        severity=NotificationSeverity.WARNING,
        action_url="/settings/credits",
        action_button_text="Buy credits",
    )


async def notify_tier_limit_reached(
    service: NotificationService, user_id: str, *, limit: int
) -> Notification:
    return await service.send(
        user_id,
        "Plan Limit Reached",
        f"Your current plan allows only {limit} videos. Upgrade for unlimited access.",
        NotificationCategory.USAGE,
        metadata={"limit": limit},
        severity=NotificationSeverity.WARNING,
        action_url="/settings/subscription",
        action_button_text="Upgrade",
    )


# Product updates


async def notify_new_feature(
    service: NotificationService, user_id: str, *, feature_name: str, description: str
) -> Notification:
    return await service.send(
        user_id,
        f"New Feature: {feature_name}",
        description,
        NotificationCategory.UPDATE,
        metadata={"feature": feature_name},
        action_url="/whats-new",
    )


async def notify_model_upgrade(
    service: NotificationService, user_id: str, *, model_name: str
) -> Notification:
    return await service.send(
        user_id,
        "AI Model Upgraded",
        f"{model_name} is now available! Enjoy improved analysis quality.",
        NotificationCategory.UPDATE,
        metadata={"model": model_name},
    )


async def notify_performance_optimization(
    service: NotificationService, user_id: str, *, improvement: str
) -> Notification:
    return await service.send(
        user_id, "Performance Improvement", improvement, NotificationCategory.UPDATE
    )


# Tips


async def notify_tip(
    service: NotificationService, user_id: str, *, tip_title: str, tip_message: str
) -> Notification:
    return await service.send(user_id, tip_title, tip_message, NotificationCategory.TIP)


# Security


async def notify_new_device_login(
    service: NotificationService, user_id: str, *, device_info: str, ip_address: str
) -> Notification:
    """Warn the user about a login from an unknown device."""

    return await service.send(
        user_id,
        "New Device Login Detected",
        f"A login was detected from a new device: {device_info}. "
        "If this wasn't you, please secure your account.",
        NotificationCategory.SECURITY,
        metadata={"device_info": device_info, "ip_address": ip_address},
        severity=NotificationSeverity.WARNING,
        action_url="/settings/security",
        action_button_text="Review activity",
    )


async def notify_password_changed(service: NotificationService, user_id: str) -> Notification:
    return await service.send(
        user_id,
        "Password Changed",
        "Your password was successfully changed. "
        "If you didn't make this change, contact support immediately.",
        NotificationCategory.SECURITY,
        severity=NotificationSeverity.INFO,
        action_url="/support",
    )


async def notify_api_usage_anomaly(
    service: NotificationService, user_id: str, *, description: str
) -> Notification:
    return await service.send(
        user_id,
        "Unusual API Activity",
        f"We detected unusual API usage: {description}. Please review your account activity.",
        NotificationCategory.SECURITY,
        metadata={"description": description},
        severity=NotificationSeverity.WARNING,
        action_url="/settings/api-keys",
    )


__all__ = [
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
