"""Utility script to issue a bearer token for a user id."""

from __future__ import annotations

import argparse
from datetime import timedelta

from app.config import get_settings
from app.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for token issuing."""

    parser = argparse.ArgumentParser(
        description="Issue a signed access token accepted by the notifications API.",
    )
    parser.add_argument("user_id", help="Identifier stored in the token 'sub' claim")
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Token lifetime in minutes (default: ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    expires = timedelta(minutes=args.minutes) if args.minutes else None
    print(create_access_token({"sub": args.user_id}, expires, settings=get_settings()))


if __name__ == "__main__":
    main()
