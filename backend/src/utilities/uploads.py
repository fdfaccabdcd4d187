"""Validation and storage of uploaded image assets."""

import os
import random
import time
from typing import Optional

from .constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_IMAGE_TYPES,
    MAX_UPLOAD_BYTES,
    UPLOAD_URL_PREFIX,
)


class UploadRejected(ValueError):
    """Raised when an uploaded asset fails validation. Never reaches the engine."""


def validate_image(filename: Optional[str], content_type: Optional[str], size: int) -> str:
    """Check an upload against the size ceiling and image whitelist.

    Both the file extension and the declared content type must be whitelisted.
    Returns the normalized (lowercase) extension.
    """
    if not filename:
        raise UploadRejected("No file uploaded")
    ext = os.path.splitext(filename)[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS or (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise UploadRejected("Only image files are allowed!")
    if size > MAX_UPLOAD_BYTES:
        raise UploadRejected(f"File too large (max {MAX_UPLOAD_BYTES} bytes)")
    return ext


def unique_filename(ext: str) -> str:
    # <ms>-<random><ext>
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return suffix + ext


def store_asset(upload_dir: str, ext: str, data: bytes) -> str:
    """Write the payload under upload_dir and return its public reference."""
    os.makedirs(upload_dir, exist_ok=True)
    filename = unique_filename(ext)
    with open(os.path.join(upload_dir, filename), "wb") as fh:
        fh.write(data)
    return f"{UPLOAD_URL_PREFIX}/{filename}"
