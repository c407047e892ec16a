# angra/utils/storage.py
import logging
import re
import time
from datetime import timedelta
from typing import Optional

from google.api_core.exceptions import GoogleAPIError, NotFound

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024
IMAGE_PREFIX = "gallery-images"
SIGNED_URL_TTL = timedelta(days=365 * 10)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def object_name(filename: str, now_ms: Optional[int] = None) -> str:
    """`<millis>-<filename without anything but letters, digits, dots and dashes>`"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{_UNSAFE_CHARS.sub('', filename or '')}"


def gallery_object_path(gallery_id: str, filename: str, now_ms: Optional[int] = None) -> str:
    return f"{IMAGE_PREFIX}/{gallery_id}/{object_name(filename, now_ms)}"


def upload_public(bucket, path: str, data: bytes, content_type: Optional[str]) -> str:
    """Upload bytes and return a public URL (signed URL when the bucket refuses ACLs)."""
    blob = bucket.blob(path)
    blob.upload_from_string(data, content_type=content_type)
    try:
        blob.make_public()
        return blob.public_url
    except GoogleAPIError:
        return blob.generate_signed_url(expiration=SIGNED_URL_TTL)


def delete_object(bucket, path: Optional[str]) -> None:
    if not path:
        return
    try:
        bucket.blob(path).delete()
    except NotFound:
        logger.warning("Storage object already gone: %s", path)
