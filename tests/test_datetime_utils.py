from datetime import datetime, timedelta, timezone

from app.utils import (
    configure_app_timezone,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    resolve_timezone,
)


def test_resolve_timezone_accepts_names_and_offsets():
    assert str(resolve_timezone("America/Bogota")) == "America/Bogota"
    assert resolve_timezone("UTC-05:00").utcoffset(None) == timedelta(hours=-5)
    assert str(resolve_timezone("Not/AZone")) == "UTC"
    assert str(resolve_timezone("")) == "UTC"


def test_configured_timezone_drives_conversions():
    configure_app_timezone("UTC-05:00")
    moment = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    localized = ensure_app_timezone(moment)

    assert get_app_timezone().utcoffset(None) == timedelta(hours=-5)
    assert localized.hour == 7
    assert ensure_app_naive_datetime(moment) == datetime(2024, 5, 1, 7, 0)
    assert ensure_app_timezone(datetime(2024, 5, 1, 7, 0)) == moment
