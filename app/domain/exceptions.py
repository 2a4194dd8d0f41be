"""Errors raised across the notification delivery layers."""


class AuthenticationError(RuntimeError):
    """Raised when a bearer credential is missing or cannot be verified."""


class NotificationPersistenceError(RuntimeError):
    """Raised when the notification store cannot complete an operation."""


__all__ = ["AuthenticationError", "NotificationPersistenceError"]
