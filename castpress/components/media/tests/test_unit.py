"""
Media component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from castpress.adapters.local_storage import LocalFileStorage
from castpress.components.media import (
    MediaCleaner,
    UploadInput,
    UploadKind,
    generate_key,
    run_delete_media,
    run_upload,
)
from castpress.core.ports.storage import StorageError


class FixedClock:
    def now_utc(self) -> datetime:
        return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


class BrokenStore(LocalFileStorage):
    def delete(self, key: str) -> bool:
        raise StorageError("bucket unavailable")


@pytest.fixture
def store(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "media", public_base_url="/media")


@pytest.fixture
def kinds() -> dict[str, UploadKind]:
    return {
        "audio": UploadKind(mime_prefixes=("audio/",), max_bytes=1024, key_prefix="podcasts/audio"),
        "thumbnail": UploadKind(
            mime_prefixes=("image/",), max_bytes=16, key_prefix="podcasts/thumbnails"
        ),
    }


class TestUpload:
    def test_audio_upload_stored(self, store: LocalFileStorage, kinds: dict) -> None:
        result = run_upload(
            UploadInput(kind="audio", filename="Episode.MP3", content_type="audio/mpeg", data=b"ID3"),
            store=store,
            kinds=kinds,
            time=FixedClock(),
        )

        assert result.success
        assert result.key is not None
        assert result.key.startswith("podcasts/audio/1718452800000-")
        assert result.key.endswith(".mp3")
        assert result.url == f"/media/{result.key}"
        assert store.exists(result.key)

    def test_wrong_mime_rejected(self, store: LocalFileStorage, kinds: dict) -> None:
        result = run_upload(
            UploadInput(kind="audio", filename="x.png", content_type="image/png", data=b"png"),
            store=store,
            kinds=kinds,
        )

        assert not result.success
        assert result.errors[0].code == "type_not_allowed"

    def test_size_limit(self, store: LocalFileStorage, kinds: dict) -> None:
        result = run_upload(
            UploadInput(kind="thumbnail", filename="t.png", content_type="image/png", data=b"x" * 17),
            store=store,
            kinds=kinds,
        )

        assert result.errors[0].code == "file_too_large"

    def test_empty_file(self, store: LocalFileStorage, kinds: dict) -> None:
        result = run_upload(
            UploadInput(kind="audio", filename="a.mp3", content_type="audio/mpeg", data=b""),
            store=store,
            kinds=kinds,
        )

        assert result.errors[0].code == "empty_file"

    def test_unknown_kind(self, store: LocalFileStorage, kinds: dict) -> None:
        result = run_upload(
            UploadInput(kind="pdf", filename="a.pdf", content_type="application/pdf", data=b"%"),
            store=store,
            kinds=kinds,
        )

        assert result.errors[0].code == "unknown_kind"

    def test_key_extension_guessed_from_type(self) -> None:
        key = generate_key("podcasts/video", "noext", "video/mp4", FixedClock().now_utc())

        assert key.startswith("podcasts/video/")
        assert key.endswith(".mp4")

    def test_keys_unique(self) -> None:
        now = FixedClock().now_utc()

        keys = {generate_key("p", "a.mp3", "audio/mpeg", now) for _ in range(50)}

        assert len(keys) == 50


class TestDeleteMedia:
    def test_removes_owned_objects(self, store: LocalFileStorage) -> None:
        store.put("podcasts/audio/a.mp3", b"a", "audio/mpeg")
        store.put("podcasts/thumbnails/t.png", b"t", "image/png")

        removed = run_delete_media(
            [
                "/media/podcasts/audio/a.mp3",
                "/media/podcasts/thumbnails/t.png",
                "https://cdn.example.com/other.mp3",
            ],
            store=store,
        )

        assert removed == 2
        assert not store.exists("podcasts/audio/a.mp3")

    def test_missing_object_not_counted(self, store: LocalFileStorage) -> None:
        assert run_delete_media(["/media/podcasts/audio/gone.mp3"], store=store) == 0

    def test_storage_failure_swallowed(self, tmp_path: Path) -> None:
        broken = BrokenStore(tmp_path / "media")
        cleaner = MediaCleaner(broken)

        assert cleaner.delete_urls(["/media/podcasts/audio/a.mp3"]) == 0
