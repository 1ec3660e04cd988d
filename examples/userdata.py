#!/usr/bin/env python
"""
Example: print details of the authenticated account.

Usage:
    python examples/userdata.py
    python examples/userdata.py --fields description created_at
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

if __package__ is None:  # pragma: no cover - runtime convenience
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from xapi_client.config import ConfigManager
from xapi_client.exceptions import RateLimitExceeded, XClientError
from xapi_client.factory import XClientFactory
from xapi_client.services.post_service import PostService


async def run(fields: list[str]) -> int:
    async with XClientFactory.create_from_config(ConfigManager()) as client:
        user = await PostService(client).me(fields)

    print(f"My name is {user.name} and my username is {user.username}. Also, my id is {user.id}.")
    if user.description is not None:
        print(f'My description is "{user.description}"')
    if user.created_at is not None:
        print(f"I made my account on {user.created_at:%Y-%m-%d}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Show the authenticated X account")
    parser.add_argument("--fields", nargs="*", default=[], help="Extra user.fields to request")
    args = parser.parse_args()

    try:
        return asyncio.run(run(args.fields))
    except RateLimitExceeded:
        print("Error: rate limited, try again later")
        return 1
    except XClientError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
