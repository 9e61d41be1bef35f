"""
Local filesystem implementation of MediaStorePort.

Objects are stored as {base_path}/{key}.bin with a {key}.meta.json sidecar
holding size, content type and hash. Public URLs are {public_base}/{key},
served by the /media route.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import BinaryIO

from castpress.core.ports.storage import (
    KeyExistsError,
    KeyNotFoundError,
    StorageError,
    StoredObject,
)

logger = logging.getLogger(__name__)


class LocalFileStorage:
    def __init__(
        self,
        base_path: str | Path,
        *,
        public_base_url: str = "/media",
        create_dirs: bool = True,
        allow_delete: bool = True,
    ) -> None:
        """
        Initialize local file storage.

        Args:
            base_path: Root directory for storage
            public_base_url: Prefix of the URLs handed out for stored keys
            create_dirs: Whether to create directories if they don't exist
            allow_delete: Whether deletion is permitted
        """
        self.base_path = Path(base_path)
        self.public_base_url = public_base_url.rstrip("/")
        self.allow_delete = allow_delete

        if create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    def _key_to_paths(self, key: str) -> tuple[Path, Path]:
        """Convert storage key to file paths (data and metadata)."""
        # Sanitize key to prevent directory traversal
        safe_key = key.replace("..", "").lstrip("/")
        if not safe_key:
            raise StorageError("Empty storage key")
        data_path = self.base_path / f"{safe_key}.bin"
        meta_path = self.base_path / f"{safe_key}.meta.json"
        return data_path, meta_path

    def _read_all(self, data: bytes | BinaryIO) -> bytes:
        if isinstance(data, bytes):
            return data
        chunks = []
        while True:
            chunk = data.read(8192)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def _compute_etag(self, sha256_hex: str) -> str:
        return f'"{sha256_hex[:32]}"'

    def put(self, key: str, data: bytes | BinaryIO, content_type: str) -> StoredObject:
        """Store object bytes; raises KeyExistsError if the key is taken."""
        data_path, meta_path = self._key_to_paths(key)

        if data_path.exists():
            raise KeyExistsError(key)

        data_bytes = self._read_all(data)
        sha256_hex = hashlib.sha256(data_bytes).hexdigest()

        data_path.parent.mkdir(parents=True, exist_ok=True)
        with open(data_path, "wb") as f:
            f.write(data_bytes)

        metadata = StoredObject(
            key=key,
            size_bytes=len(data_bytes),
            content_type=content_type,
            sha256=sha256_hex,
            etag=self._compute_etag(sha256_hex),
        )

        with open(meta_path, "w") as f:
            json.dump(
                {
                    "key": metadata.key,
                    "size_bytes": metadata.size_bytes,
                    "content_type": metadata.content_type,
                    "sha256": metadata.sha256,
                    "etag": metadata.etag,
                },
                f,
            )

        return metadata

    def get_stream(self, key: str) -> tuple[BinaryIO, StoredObject]:
        """Get a streaming handle to object bytes."""
        data_path, meta_path = self._key_to_paths(key)

        if not data_path.exists():
            raise KeyNotFoundError(key)

        metadata = self._load_metadata(meta_path, key)
        return open(data_path, "rb"), metadata

    def exists(self, key: str) -> bool:
        data_path, _ = self._key_to_paths(key)
        return data_path.exists()

    def delete(self, key: str) -> bool:
        if not self.allow_delete:
            raise StorageError("Delete not allowed: storage is configured read-only")

        data_path, meta_path = self._key_to_paths(key)

        if not data_path.exists():
            return False

        data_path.unlink()
        if meta_path.exists():
            meta_path.unlink()
        logger.info("Deleted stored object %s", key)
        return True

    def get_metadata(self, key: str) -> StoredObject | None:
        data_path, meta_path = self._key_to_paths(key)

        if not data_path.exists():
            return None

        return self._load_metadata(meta_path, key)

    def get_public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key.lstrip('/')}"

    def key_for_url(self, url: str) -> str | None:
        prefix = f"{self.public_base_url}/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    def _load_metadata(self, meta_path: Path, key: str) -> StoredObject:
        if not meta_path.exists():
            # Rebuild metadata for objects written without a sidecar.
            data_path = meta_path.parent / meta_path.name.replace(".meta.json", ".bin")
            with open(data_path, "rb") as f:
                sha256_hex = hashlib.sha256(f.read()).hexdigest()
            return StoredObject(
                key=key,
                size_bytes=data_path.stat().st_size,
                content_type="application/octet-stream",
                sha256=sha256_hex,
                etag=self._compute_etag(sha256_hex),
            )

        with open(meta_path) as f:
            meta = json.load(f)

        return StoredObject(
            key=meta["key"],
            size_bytes=meta["size_bytes"],
            content_type=meta["content_type"],
            sha256=meta["sha256"],
            etag=meta["etag"],
        )


def create_local_storage(
    base_path: str | Path | None = None,
    *,
    env_var: str = "CASTPRESS_MEDIA_DIR",
    default_path: str = "./data/media",
    public_base_url: str = "/media",
) -> LocalFileStorage:
    """Build a LocalFileStorage, reading the directory from env_var when not given."""
    if base_path is None:
        base_path = os.environ.get(env_var, default_path)

    return LocalFileStorage(base_path, public_base_url=public_base_url)
