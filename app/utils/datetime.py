"""Timezone helpers shared by the stores, the service and the wire format.

The application timezone is configured once per application instance through
:func:`configure_app_timezone` (called while the container is built from
``Settings.app_timezone``). Until then every helper works in UTC.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)

_app_timezone: tzinfo = ZoneInfo(DEFAULT_TIMEZONE)


def resolve_timezone(tz_name: str | None) -> tzinfo:
    """Return the timezone named ``tz_name``.

    Accepts IANA names (``America/Bogota``) and fixed offsets such as
    ``UTC-05:00``. Blank or unknown names resolve to UTC.
    """

    name = (tz_name or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            offset = timedelta(
                hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
            )
            return timezone(sign * offset)
    return ZoneInfo(DEFAULT_TIMEZONE)


def configure_app_timezone(tz_name: str | None) -> tzinfo:
    """Set the timezone used for notification timestamps and return it."""

    global _app_timezone
    _app_timezone = resolve_timezone(tz_name)
    return _app_timezone


def get_app_timezone() -> tzinfo:
    return _app_timezone


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=_app_timezone)


def now_in_app_naive_datetime() -> datetime:
    """Return the current localized time without ``tzinfo``, as stored in SQL."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone; naive values are taken as app local."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=_app_timezone)
    return value.astimezone(_app_timezone)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` in app local time with ``tzinfo`` stripped.

    ``DATETIME`` columns keep no offset, so rows are written and compared in
    app local time while the domain layer works with aware values.
    """

    localized = ensure_app_timezone(value)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)
