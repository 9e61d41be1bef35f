"""
Media component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from castpress.rules.models import UploadKindRules


@dataclass(frozen=True)
class MediaValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class UploadKind:
    """What one upload slot accepts and where it is stored."""

    mime_prefixes: tuple[str, ...]
    max_bytes: int
    key_prefix: str

    @classmethod
    def from_rules(cls, rules: UploadKindRules) -> UploadKind:
        return cls(
            mime_prefixes=tuple(rules.mime_prefixes),
            max_bytes=rules.max_bytes,
            key_prefix=rules.key_prefix.strip("/"),
        )


@dataclass(frozen=True)
class UploadInput:
    kind: str
    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class UploadOutput:
    url: str | None = None
    key: str | None = None
    size_bytes: int = 0
    content_type: str | None = None
    errors: list[MediaValidationError] = field(default_factory=list)
    success: bool = True
