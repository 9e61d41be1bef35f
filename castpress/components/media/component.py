"""
Media component - uploads to object storage and best-effort cleanup.

Each upload kind (audio, video, thumbnail, article_thumbnail,
article_media) has a MIME prefix allow-list and a size limit. Keys take the
form {key_prefix}/{epoch_ms}-{random}.{ext} and are never reused.
"""

from __future__ import annotations

import logging
import mimetypes
import re
import secrets
from collections.abc import Mapping
from datetime import datetime
from pathlib import PurePosixPath

from castpress.adapters.clock import SystemClock
from castpress.core.ports.storage import StorageError

from .models import MediaValidationError, UploadInput, UploadKind, UploadOutput
from .ports import MediaStorePort, TimePort

logger = logging.getLogger(__name__)

_EXT = re.compile(r"^[a-z0-9]{1,10}$")


def _extension(filename: str, content_type: str) -> str:
    ext = PurePosixPath(filename or "").suffix.lower().lstrip(".")
    if _EXT.match(ext):
        return ext
    guessed = mimetypes.guess_extension(content_type or "") or ".bin"
    return guessed.lstrip(".")


def generate_key(prefix: str, filename: str, content_type: str, now: datetime) -> str:
    stamp = int(now.timestamp() * 1000)
    return f"{prefix}/{stamp}-{secrets.token_hex(6)}.{_extension(filename, content_type)}"


def _fail(code: str, message: str) -> UploadOutput:
    return UploadOutput(
        errors=[MediaValidationError(code=code, message=message, field="file")], success=False
    )


# --- Component Entry Points ---


def run_upload(
    inp: UploadInput,
    *,
    store: MediaStorePort,
    kinds: Mapping[str, UploadKind],
    time: TimePort | None = None,
) -> UploadOutput:
    """
    Validate and store one uploaded file.

    Returns:
        UploadOutput with the public URL, or errors (unknown_kind,
        empty_file, type_not_allowed, file_too_large, storage_failed).
    """
    kind = kinds.get(inp.kind)
    if kind is None:
        return _fail("unknown_kind", f"Unknown upload kind: {inp.kind}")

    if not inp.data:
        return _fail("empty_file", "No file uploaded")

    content_type = (inp.content_type or "").lower()
    if not any(content_type.startswith(p) for p in kind.mime_prefixes):
        allowed = ", ".join(f"{p}*" for p in kind.mime_prefixes)
        return _fail(
            "type_not_allowed",
            f"File type {content_type or 'unknown'} not allowed ({allowed})",
        )

    if len(inp.data) > kind.max_bytes:
        return _fail("file_too_large", f"File exceeds the {kind.max_bytes} byte limit")

    now = (time or SystemClock()).now_utc()
    key = generate_key(kind.key_prefix, inp.filename, content_type, now)
    try:
        stored = store.put(key, inp.data, content_type)
    except StorageError as e:
        logger.error("Upload of %s failed: %s", inp.filename, e)
        return _fail("storage_failed", "Could not store file")

    logger.info("Stored %s upload %s (%d bytes)", inp.kind, key, stored.size_bytes)
    return UploadOutput(
        url=store.get_public_url(key),
        key=key,
        size_bytes=stored.size_bytes,
        content_type=content_type,
    )


def run_delete_media(urls: list[str], *, store: MediaStorePort) -> int:
    """
    Delete stored objects behind urls, best-effort.

    URLs that do not point into our store are skipped. Failures are logged
    and never raised. Returns how many objects were removed.
    """
    removed = 0
    for url in urls:
        key = store.key_for_url(url)
        if key is None:
            continue
        try:
            if store.delete(key):
                removed += 1
        except Exception:
            logger.warning("Failed to delete media object %s", key, exc_info=True)
    return removed


class MediaCleaner:
    """MediaCleanupPort backed by the media store."""

    def __init__(self, store: MediaStorePort) -> None:
        self._store = store

    def delete_urls(self, urls: list[str]) -> int:
        return run_delete_media(urls, store=self._store)
