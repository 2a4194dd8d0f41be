from .health import HealthRead
from .notification import (
    NotificationListRead,
    NotificationMarkReadRequest,
    NotificationRead,
    NotificationStatsRead,
    UnreadCountRead,
)

__all__ = [
    "HealthRead",
    "NotificationListRead",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "NotificationStatsRead",
    "UnreadCountRead",
]
