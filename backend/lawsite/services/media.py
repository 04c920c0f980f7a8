"""
Media upload: copy a remote image into the CMS storage bucket.
"""

import re
import time

import httpx
import structlog

from lawsite.core.exceptions import ExternalServiceError
from lawsite.services.supabase import SupabaseRestClient

logger = structlog.get_logger()

DEFAULT_BUCKET = "media"
LIBRARY_PREFIX = "library"


def build_object_path(name: str, timestamp_ms: int | None = None) -> str:
    """library/<ms-timestamp>-<slug> so repeated uploads never collide."""
    timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    slug = re.sub(r"[^a-zA-Z0-9._-]+", "-", name.strip()).strip("-").lower() or "image"
    return f"{LIBRARY_PREFIX}/{timestamp_ms}-{slug}"


async def upload_remote_image(
    client: SupabaseRestClient,
    http: httpx.AsyncClient,
    image_url: str,
    email: str,
    password: str,
    name: str = "image.webp",
    bucket: str = DEFAULT_BUCKET,
) -> str:
    """Sign in, download image_url and upload it. Returns the public URL."""
    log = logger.bind(component="MediaUpload", image_url=image_url[:80])

    token = await client.sign_in_with_password(email, password)
    log.info("Authenticated")

    try:
        response = await http.get(image_url, follow_redirects=True)
    except httpx.RequestError as e:
        raise ExternalServiceError(f"Image download failed: {e}") from e
    if response.is_error:
        raise ExternalServiceError("Image download failed", status_code=response.status_code)

    data = response.content
    content_type = response.headers.get("content-type", "image/webp").split(";")[0].strip()
    log.info("Downloaded image", bytes=len(data), content_type=content_type)

    object_path = build_object_path(name)
    await client.upload_object(bucket, object_path, data, content_type, token)

    public_url = client.public_object_url(bucket, object_path)
    log.info("Uploaded image", public_url=public_url)
    return public_url
