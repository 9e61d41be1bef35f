"""
Object storage port for uploaded media.

Implementations: local filesystem (castpress.adapters.local_storage).
Any S3-compatible backend can satisfy the same protocol.

Keys are generated once per upload and never rewritten.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Protocol


@dataclass
class StoredObject:
    """Metadata for a stored object."""

    key: str
    size_bytes: int
    content_type: str
    sha256: str
    etag: str


class MediaStorePort(Protocol):
    """Object storage used for podcast audio/video and thumbnails."""

    def put(self, key: str, data: bytes | BinaryIO, content_type: str) -> StoredObject:
        """
        Store object bytes under the given key.

        Raises:
            KeyExistsError: If key already exists
        """
        ...

    def get_stream(self, key: str) -> tuple[BinaryIO, StoredObject]:
        """
        Get a streaming handle to object bytes. Caller closes the handle.

        Raises:
            KeyNotFoundError: If key doesn't exist
        """
        ...

    def exists(self, key: str) -> bool:
        """Check if key exists in storage."""
        ...

    def delete(self, key: str) -> bool:
        """Delete object by key. Returns False if the key didn't exist."""
        ...

    def get_metadata(self, key: str) -> StoredObject | None:
        """Object metadata, or None if key doesn't exist."""
        ...

    def get_public_url(self, key: str) -> str:
        """URL clients use to fetch the object."""
        ...

    def key_for_url(self, url: str) -> str | None:
        """Inverse of get_public_url; None when the URL is not one of ours."""
        ...


class StorageError(Exception):
    """Base class for storage errors."""


class KeyExistsError(StorageError):
    """Raised when attempting to write to an existing key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key already exists: {key}")


class KeyNotFoundError(StorageError):
    """Raised when key doesn't exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key not found: {key}")
