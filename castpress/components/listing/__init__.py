"""
Listing component - shared list query builder for articles and podcasts.
"""

from .component import (
    build_list_query,
    parse_limit,
    parse_page,
    parse_sort,
    parse_status,
    parse_tags,
    with_forced_status,
)
from .models import (
    SEARCH_KEY,
    AppliedFilters,
    Condition,
    ListingLimits,
    ListingProfile,
    ListingProfiles,
    ListParams,
    ListQuery,
    PageInfo,
    Pagination,
    SortSpec,
)

__all__ = [
    # Entry points
    "build_list_query",
    "with_forced_status",
    # Helpers
    "parse_limit",
    "parse_page",
    "parse_sort",
    "parse_status",
    "parse_tags",
    # Models
    "SEARCH_KEY",
    "AppliedFilters",
    "Condition",
    "ListingLimits",
    "ListingProfile",
    "ListingProfiles",
    "ListParams",
    "ListQuery",
    "PageInfo",
    "Pagination",
    "SortSpec",
]
