"""
Content component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from castpress.components.listing.models import AppliedFilters, ListParams, PageInfo
from castpress.domain.entities import AnyContent, ContentKind
from castpress.rules.models import ContentRules

# --- Validation Error ---


@dataclass(frozen=True)
class ContentValidationError:
    """Content validation error."""

    code: str
    message: str
    field: str | None = None


# --- Configuration ---


@dataclass(frozen=True)
class ContentConfig:
    max_tags: int = 10
    tag_max_length: int = 50
    slug_pattern: str = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

    @classmethod
    def from_rules(cls, rules: ContentRules) -> ContentConfig:
        return cls(
            max_tags=rules.max_tags,
            tag_max_length=rules.tag_max_length,
            slug_pattern=rules.slug_pattern,
        )


# --- Input Models ---


@dataclass(frozen=True)
class CreateContentInput:
    """Input for creating an article or podcast. data holds entity fields."""

    kind: ContentKind
    data: dict[str, Any]


@dataclass(frozen=True)
class GetContentInput:
    kind: ContentKind
    content_id: UUID | None = None
    slug: str | None = None


@dataclass(frozen=True)
class UpdateContentInput:
    kind: ContentKind
    content_id: UUID
    updates: dict[str, Any]


@dataclass(frozen=True)
class SetStatusInput:
    kind: ContentKind
    content_id: UUID
    status: str


@dataclass(frozen=True)
class DeleteContentInput:
    kind: ContentKind
    content_id: UUID


@dataclass(frozen=True)
class ListContentInput:
    kind: ContentKind
    params: ListParams = field(default_factory=ListParams)


# --- Output Models ---


@dataclass(frozen=True)
class ContentOutput:
    """Output containing a single content item."""

    content: AnyContent | None
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ContentListOutput:
    """One page of a listing plus what was actually applied."""

    items: list[AnyContent]
    page_info: PageInfo
    applied: AppliedFilters
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class DeleteOutput:
    deleted: bool
    media_removed: int = 0
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class StatsOutput:
    total: int
    by_status: dict[str, int]
    errors: list[ContentValidationError] = field(default_factory=list)
    success: bool = True
