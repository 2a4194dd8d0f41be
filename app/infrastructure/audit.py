"""Audit sink writing records through the standard logging machinery."""

from __future__ import annotations

import json
import logging
from typing import Any

audit_logger = logging.getLogger("app.audit")


class LoggingAuditSink:
    """Emit one ``INFO`` record per audited action on the ``app.audit`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or audit_logger

    def record(self, action: str, user_id: str | None, **details: Any) -> None:
        self._logger.info(
            "%s user=%s %s",
            action,
            user_id or "-",
            json.dumps(details, default=str, sort_keys=True),
        )


__all__ = ["LoggingAuditSink", "audit_logger"]
