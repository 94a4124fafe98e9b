"""Storing admin image uploads under the public uploads directory."""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import AsyncIterable

from storefront.config import settings
from storefront.errors import UploadRejectedError

log = logging.getLogger("uploads")

ALLOWED_CONTENT_TYPES = frozenset(
    {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/svg+xml"}
)
UPLOAD_URL_PREFIX = "/uploads"

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9.-]")

TOO_LARGE_MESSAGE = "Bildet er for stort."


def safe_filename(filename: str) -> str:
    name = Path(filename or "").name
    return _UNSAFE_CHARS_RE.sub("-", name) or "upload"


async def read_upload_body(
    chunks: AsyncIterable[bytes],
    *,
    declared_length: str | None = None,
    limit: int | None = None,
) -> bytes:
    """Collect a request body, refusing it as soon as it passes ``limit`` bytes."""

    limit = settings.UPLOAD_MAX_BYTES if limit is None else limit
    if declared_length and declared_length.isdigit() and int(declared_length) > limit:
        raise UploadRejectedError(TOO_LARGE_MESSAGE)

    body = bytearray()
    async for chunk in chunks:
        body.extend(chunk)
        if len(body) > limit:
            raise UploadRejectedError(TOO_LARGE_MESSAGE)
    return bytes(body)


def save_upload(
    filename: str,
    content_type: str | None,
    data: bytes,
    *,
    upload_dir: str | Path | None = None,
) -> str:
    """Write an image to disk and return its public ``/uploads/...`` path."""

    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if mime not in ALLOWED_CONTENT_TYPES:
        raise UploadRejectedError("Kun bildefiler er tillatt.")
    if len(data) > settings.UPLOAD_MAX_BYTES:
        raise UploadRejectedError(TOO_LARGE_MESSAGE)
    if not data:
        raise UploadRejectedError("Filen er tom.")

    target_dir = Path(upload_dir or settings.UPLOAD_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{int(time.time() * 1000)}-{safe_filename(filename)}"
    (target_dir / stored_name).write_bytes(data)
    log.info("uploads: stored %s (%s bytes)", stored_name, len(data))
    return f"{UPLOAD_URL_PREFIX}/{stored_name}"


__all__ = ["ALLOWED_CONTENT_TYPES", "read_upload_body", "safe_filename", "save_upload"]
