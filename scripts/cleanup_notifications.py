"""Utility script to purge old read notifications once, e.g. from cron."""

from __future__ import annotations

import argparse
import asyncio
import logging

from app.config import get_settings
from app.domain.exceptions import NotificationPersistenceError
from app.interfaces.api.container import build_container


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Delete read notifications older than the retention window.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Age in days (default: NOTIFICATION_RETENTION_DAYS)",
    )
    return parser.parse_args()


async def run(days: int | None) -> int:
    container = build_container(get_settings())
    try:
        return await container.service.cleanup_old_notifications(days)
    finally:
        container.dispose()


def main() -> None:
    """Run one retention sweep using the configured database."""

    args = parse_args()
    logging.basicConfig(level=logging.INFO)
    try:
        removed = asyncio.run(run(args.days))
    except NotificationPersistenceError as exc:
        raise SystemExit(f"Cleanup failed: {exc}") from exc
    print(f"Removed {removed} notifications")


if __name__ == "__main__":
    main()
