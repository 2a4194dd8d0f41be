"""Periodic retention sweep for read notifications."""

from __future__ import annotations

import logging

import anyio

from app.domain.exceptions import NotificationPersistenceError

from .service import NotificationService

logger = logging.getLogger(__name__)


class NotificationCleanupTask:
    """Run :meth:`NotificationService.cleanup_old_notifications` on an interval."""

    def __init__(self, service: NotificationService, *, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._service = service
        self._interval_seconds = interval_seconds

    async def run_once(self) -> int:
        """Run one sweep; store failures are logged and reported as zero rows."""

        logger.info("Starting cleanup of old read notifications")
        try:
            removed = await self._service.cleanup_old_notifications()
        except NotificationPersistenceError:
            logger.exception("Error during notification cleanup")
            return 0
        if removed:
            logger.info("Cleanup completed: %d notifications removed", removed)
        else:
            logger.info("Cleanup completed: no expired notifications found")
        return removed

    async def run_forever(self) -> None:
        """Sweep every interval until cancelled; a failed sweep never stops the loop."""

        while True:
            await anyio.sleep(self._interval_seconds)
            try:
                await self.run_once()
            except Exception:
                logger.exception("Unexpected error during notification cleanup")


__all__ = ["NotificationCleanupTask"]
