"""
Listing component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from math import ceil
from typing import Any, Literal

from castpress.domain.entities import ContentKind, ContentStatus
from castpress.rules.models import ListingProfileRules, ListingRules

SortDirection = Literal["asc", "desc"]
ConditionOp = Literal["eq", "contains", "in_ci", "search"]

# Key under which the free-text search condition is stored in ListQuery.filters.
SEARCH_KEY = "_search"


# --- Configuration ---


@dataclass(frozen=True)
class ListingLimits:
    """Bounds applied while parsing list parameters."""

    default_limit: int = 10
    max_limit: int = 100
    max_page: int = 100_000
    search_max_length: int = 100
    category_max_length: int = 50
    author_max_length: int = 100
    max_tags: int = 10
    tag_max_length: int = 50

    @classmethod
    def from_rules(cls, rules: ListingRules) -> ListingLimits:
        return cls(
            default_limit=rules.default_limit,
            max_limit=rules.max_limit,
            max_page=rules.max_page,
            search_max_length=rules.search_max_length,
            category_max_length=rules.category_max_length,
            author_max_length=rules.author_max_length,
            max_tags=rules.max_tags,
            tag_max_length=rules.tag_max_length,
        )


@dataclass(frozen=True)
class ListingProfile:
    """
    Per-content-kind listing configuration.

    sort_fields maps the public sortBy name to the stored column.
    """

    kind: ContentKind
    search_fields: tuple[str, ...]
    filters: frozenset[str]
    sort_fields: dict[str, str]
    default_sort: str

    @classmethod
    def from_rules(cls, kind: ContentKind, rules: ListingProfileRules) -> ListingProfile:
        return cls(
            kind=kind,
            search_fields=tuple(rules.search_fields),
            filters=frozenset(rules.filters),
            sort_fields=dict(rules.sort_fields),
            default_sort=rules.default_sort,
        )


# --- Input ---


@dataclass(frozen=True)
class ListParams:
    """Raw, untrusted listing parameters exactly as they arrived."""

    page: str | None = None
    limit: str | None = None
    search: str | None = None
    tags: str | None = None
    category: str | None = None
    status: str | None = None
    author: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None


# --- Output ---


@dataclass(frozen=True)
class Condition:
    """
    One filter condition.

    eq: exact match on the field.
    contains: case-insensitive substring match using pattern.
    in_ci: case-insensitive exact match against any of value.
    search: case-insensitive substring match of pattern over fields.
    """

    op: ConditionOp
    value: str | tuple[str, ...]
    pattern: str | None = None
    fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    skip: int


@dataclass(frozen=True)
class SortSpec:
    field: str
    column: str
    direction: SortDirection


@dataclass(frozen=True)
class AppliedFilters:
    """The sanitized values actually applied, echoed back to clients."""

    search: str | None = None
    tags: tuple[str, ...] = ()
    category: str | None = None
    status: ContentStatus | None = None
    author: str | None = None
    sort_by: str = ""
    sort_order: SortDirection = "desc"

    def to_dict(self) -> dict[str, Any]:
        return {
            "search": self.search,
            "tags": list(self.tags),
            "category": self.category,
            "status": self.status,
            "author": self.author,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }


@dataclass(frozen=True)
class ListQuery:
    """Validated list query. Empty filters means match everything."""

    filters: dict[str, Condition]
    pagination: Pagination
    sort: SortSpec
    applied: AppliedFilters


@dataclass(frozen=True)
class PageInfo:
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_previous_page: bool
    limit: int

    @classmethod
    def from_total(cls, pagination: Pagination, total: int) -> PageInfo:
        total_pages = ceil(total / pagination.limit) if total > 0 else 0
        return cls(
            current_page=pagination.page,
            total_pages=total_pages,
            total_items=total,
            has_next_page=pagination.page < total_pages,
            has_previous_page=pagination.page > 1,
            limit=pagination.limit,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_items": self.total_items,
            "has_next_page": self.has_next_page,
            "has_previous_page": self.has_previous_page,
            "limit": self.limit,
        }


@dataclass(frozen=True)
class ListingProfiles:
    """Profiles for every content kind, keyed by kind."""

    profiles: dict[str, ListingProfile] = field(default_factory=dict)
    limits: ListingLimits = field(default_factory=ListingLimits)

    @classmethod
    def from_rules(cls, rules: ListingRules) -> ListingProfiles:
        profiles = {
            kind: ListingProfile.from_rules(kind, profile)  # type: ignore[arg-type]
            for kind, profile in rules.profiles.items()
        }
        return cls(profiles=profiles, limits=ListingLimits.from_rules(rules))

    def get(self, kind: ContentKind) -> ListingProfile:
        return self.profiles[kind]
