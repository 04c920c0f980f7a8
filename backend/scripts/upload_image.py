#!/usr/bin/env python3
"""
Copy a remote image (e.g. from a design CDN) into the CMS media bucket and
print its public URL.

Usage:
    python scripts/upload_image.py --image-url URL --email EMAIL --password PASSWORD [--name about-meeting.webp]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
import structlog

from lawsite.core.config import settings
from lawsite.core.logging import configure_script_logging
from lawsite.services.media import upload_remote_image
from lawsite.services.supabase import SupabaseRestClient

configure_script_logging()
logger = structlog.get_logger()


async def main(image_url: str, email: str, password: str, name: str) -> str:
    async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
        # Uploads go through the user's session, so the anon key is enough
        client = SupabaseRestClient(settings.supabase_url, settings.supabase_anon_key, http=http)
        return await upload_remote_image(client, http, image_url, email, password, name=name)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Upload a remote image to CMS storage")
    parser.add_argument("--image-url", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="image.webp")
    args = parser.parse_args()

    try:
        public_url = asyncio.run(main(args.image_url, args.email, args.password, args.name))
    except Exception as e:
        logger.error("Upload failed", error=str(e))
        sys.exit(1)
    print(public_url)
