"""
Media serving routes.

Streams stored objects with HTTP Range support so audio and video players
can seek.

Headers:
- Accept-Ranges: bytes on every response
- Content-Range on 206 and 416 responses
- ETag from the stored object's SHA256
"""

import logging
import re
from collections.abc import Iterator
from typing import BinaryIO

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response, StreamingResponse

from castpress.adapters.local_storage import LocalFileStorage
from castpress.api.deps import get_media_store
from castpress.core.ports.storage import KeyNotFoundError, StorageError

logger = logging.getLogger(__name__)

router = APIRouter()

CHUNK_SIZE = 64 * 1024
CACHE_CONTROL = "public, max-age=31536000, immutable"

_RANGE = re.compile(r"^bytes=(\d*)-(\d*)$")


class RangeNotSatisfiable(Exception):
    pass


def parse_range(header: str | None, size: int) -> tuple[int, int] | None:
    """
    Resolve a Range header to an inclusive (start, end) byte span.

    Returns None when the whole object should be sent: no header, a
    malformed header, or several ranges. Raises RangeNotSatisfiable when
    the range lies outside the object.
    """
    if not header:
        return None
    match = _RANGE.match(header.strip())
    if not match:
        return None

    first, last = match.groups()
    if not first and not last:
        return None

    if not first:
        # Suffix range: the final N bytes.
        length = int(last)
        if length == 0 or size == 0:
            raise RangeNotSatisfiable()
        return max(size - length, 0), size - 1

    start = int(first)
    end = int(last) if last else size - 1
    if start >= size or end < start:
        raise RangeNotSatisfiable()
    return start, min(end, size - 1)


def _iter_span(handle: BinaryIO, start: int, length: int) -> Iterator[bytes]:
    try:
        handle.seek(start)
        remaining = length
        while remaining > 0:
            chunk = handle.read(min(CHUNK_SIZE, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
    finally:
        handle.close()


@router.get("/{key:path}")
def get_media(
    key: str,
    request: Request,
    store: LocalFileStorage = Depends(get_media_store),
) -> Response:
    try:
        handle, meta = store.get_stream(key)
    except KeyNotFoundError:
        raise HTTPException(status_code=404, detail="Media not found") from None
    except StorageError:
        logger.warning("Rejected media key %r", key)
        raise HTTPException(status_code=404, detail="Media not found") from None

    headers = {
        "Accept-Ranges": "bytes",
        "ETag": meta.etag,
        "Cache-Control": CACHE_CONTROL,
    }
    size = meta.size_bytes

    try:
        span = parse_range(request.headers.get("range"), size)
    except RangeNotSatisfiable:
        handle.close()
        return Response(
            status_code=416,
            headers={**headers, "Content-Range": f"bytes */{size}"},
        )

    if span is None:
        headers["Content-Length"] = str(size)
        return StreamingResponse(
            _iter_span(handle, 0, size), media_type=meta.content_type, headers=headers
        )

    start, end = span
    length = end - start + 1
    headers["Content-Range"] = f"bytes {start}-{end}/{size}"
    headers["Content-Length"] = str(length)
    return StreamingResponse(
        _iter_span(handle, start, length),
        status_code=206,
        media_type=meta.content_type,
        headers=headers,
    )
