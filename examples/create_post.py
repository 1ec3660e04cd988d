#!/usr/bin/env python
"""
Example: Post to X (Twitter) with optional media using xapi_client.

This example demonstrates:
- Loading credentials from environment or .env file
- Creating a client using the factory
- Uploading media (small files in one request, large ones in chunks)
- Creating a post with or without media

Usage:
    # Text-only post
    python examples/create_post.py "Hello from xapi_client!"

    # Post with an image or a video (local path or http(s) URL)
    python examples/create_post.py "Check this out!" --media path/to/video.mp4

    # Reply to an existing post
    python examples/create_post.py "Agreed." --reply-to 1234567890

Requirements:
    Set environment variables or create a .env file with:
    - X_API_KEY
    - X_API_SECRET
    - X_ACCESS_TOKEN
    - X_ACCESS_TOKEN_SECRET
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script (e.g. python examples/create_post.py)
if __package__ is None:  # pragma: no cover - runtime convenience
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from xapi_client.config import ConfigManager
from xapi_client.exceptions import (
    ConfigurationError,
    MediaProcessingFailed,
    MediaValidationError,
    RateLimitExceeded,
    XClientError,
)
from xapi_client.factory import XClientFactory
from xapi_client.models import PostDraft
from xapi_client.services.media_service import MediaService
from xapi_client.services.post_service import PostService


async def run(args: argparse.Namespace) -> int:
    print("Loading credentials...")
    config = ConfigManager(dotenv_path=args.dotenv) if args.dotenv else ConfigManager()

    async with XClientFactory.create_from_config(config) as client:
        post_service = PostService(client)
        media_service = MediaService(client)

        media_ids: list[str] = []
        for source in args.media:
            print(f"Uploading media: {source}")
            result = await media_service.upload_file(source, args.mime_type)
            media_ids.append(result.media_id)
            print(f"✅ Media uploaded: {result.media_id}")

        draft = PostDraft(text=args.text, media_ids=media_ids, in_reply_to=args.reply_to)
        post = await post_service.create_post(draft)

    print(f"\n🎉 Success! Post URL: https://x.com/i/web/status/{post.id}")
    return 0


def main() -> int:
    """Main entry point for the example."""
    parser = argparse.ArgumentParser(description="Post to X with optional media attachments")
    parser.add_argument("text", help="Post text content")
    parser.add_argument(
        "--media",
        action="append",
        default=[],
        help="Path or URL of an image/video to attach (repeat up to 4 times)",
    )
    parser.add_argument(
        "--mime-type",
        help="MIME type of the media when it cannot be inferred (e.g. video/mp4)",
    )
    parser.add_argument("--reply-to", metavar="POST_ID", help="Reply to the given post ID")
    parser.add_argument("--dotenv", type=Path, help="Path to .env file (default: ./.env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP traffic")
    args = parser.parse_args()

    if len(args.media) > 4:
        print("Error: At most 4 media attachments are allowed")
        return 1

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return asyncio.run(run(args))

    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}")
        print("\nPlease set environment variables or create a .env file:")
        print("  - X_API_KEY")
        print("  - X_API_SECRET")
        print("  - X_ACCESS_TOKEN")
        print("  - X_ACCESS_TOKEN_SECRET")
        return 1

    except MediaValidationError as e:
        print(f"❌ Media validation error: {e}")
        return 1

    except MediaProcessingFailed as e:
        print(f"❌ Media processing failed: {e}")
        print("\nX's media processing encountered an error.")
        print("Please check the file format and encoding.")
        return 1

    except RateLimitExceeded as e:
        print(f"❌ Rate limited: {e}")
        print("   Wait for the reset window (usually a few minutes) before retrying.")
        return 1

    except XClientError as e:
        print(f"❌ X API error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
