"""
Listing component - turns untrusted list parameters into a bounded query.

build_list_query is total: every malformed value degrades to a safe default,
so listing endpoints never answer 400 for a bad filter. The same builder
serves every content kind; a ListingProfile supplies the searchable fields,
the supported filters and the sort allow-list.

Processing order:
1. page  -> positive int, default 1, capped at max_page
2. limit -> int, default when missing/invalid/0, clamped to [1, max_limit]
3. skip  = (page - 1) * limit
4. search, category, author -> sanitized, LIKE-escaped where pattern matched
5. tags  -> split, trimmed, de-duplicated, capped, sanitized
6. status -> enum or absent
7. sortBy -> allow-list or profile default; sortOrder -> "asc" or "desc"
"""

from __future__ import annotations

from dataclasses import replace

from castpress.domain.entities import CONTENT_STATUSES, ContentStatus
from castpress.domain.sanitize import escape_like, sanitize_text

from .models import (
    SEARCH_KEY,
    AppliedFilters,
    Condition,
    ListingLimits,
    ListingProfile,
    ListParams,
    ListQuery,
    Pagination,
    SortDirection,
    SortSpec,
)

# --- Parsing helpers ---


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_page(raw: str | None, max_page: int = 100_000) -> int:
    """Missing, non-numeric and non-positive pages resolve to 1."""
    page = _parse_int(raw)
    if page is None or page <= 0:
        return 1
    return min(page, max_page)


def parse_limit(raw: str | None, default: int = 10, maximum: int = 100) -> int:
    """Missing, non-numeric and zero limits use the default; result is in [1, maximum]."""
    limit = _parse_int(raw)
    if not limit:
        limit = default
    return max(1, min(limit, maximum))


def parse_tags(raw: str | None, max_tags: int = 10, max_length: int = 50) -> tuple[str, ...]:
    """
    Comma separated tags to a bounded tuple.

    Duplicates (case-insensitive) are removed before the cap so a repeated
    tag cannot push distinct ones out of the first max_tags slots.
    """
    if not isinstance(raw, str):
        return ()

    candidates: list[str] = []
    seen: set[str] = set()
    for part in raw.split(","):
        tag = part.strip()
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        candidates.append(tag)

    result: list[str] = []
    seen.clear()
    for tag in candidates[:max_tags]:
        if len(tag) > max_length:
            continue
        clean = sanitize_text(tag, max_length)
        if not clean or clean.lower() in seen:
            continue
        seen.add(clean.lower())
        result.append(clean)
    return tuple(result)


def parse_status(raw: str | None) -> ContentStatus | None:
    if isinstance(raw, str) and raw.strip() in CONTENT_STATUSES:
        return raw.strip()  # type: ignore[return-value]
    return None


def parse_sort(
    sort_by: str | None,
    sort_order: str | None,
    profile: ListingProfile,
) -> SortSpec:
    name = sort_by.strip() if isinstance(sort_by, str) else ""
    if name not in profile.sort_fields:
        name = profile.default_sort
    direction: SortDirection = (
        "asc" if isinstance(sort_order, str) and sort_order.strip() == "asc" else "desc"
    )
    return SortSpec(field=name, column=profile.sort_fields[name], direction=direction)


# --- Entry point ---


def build_list_query(
    params: ListParams,
    profile: ListingProfile,
    limits: ListingLimits | None = None,
) -> ListQuery:
    """
    Build a ListQuery from raw parameters.

    Args:
        params: Raw request parameters, any of which may be missing or hostile.
        profile: Listing profile of the content kind being listed.
        limits: Parsing bounds (defaults apply when omitted).

    Returns:
        ListQuery with filters, pagination, sort and the echoed filter report.
    """
    limits = limits or ListingLimits()

    page = parse_page(params.page, limits.max_page)
    limit = parse_limit(params.limit, limits.default_limit, limits.max_limit)
    pagination = Pagination(page=page, limit=limit, skip=(page - 1) * limit)

    filters: dict[str, Condition] = {}

    search = sanitize_text(params.search, limits.search_max_length) or None
    if search:
        filters[SEARCH_KEY] = Condition(
            op="search",
            value=search,
            pattern=escape_like(search),
            fields=profile.search_fields,
        )

    category: str | None = None
    if "category" in profile.filters:
        category = sanitize_text(params.category, limits.category_max_length) or None
        if category:
            filters["category"] = Condition(op="eq", value=category)

    author: str | None = None
    if "author" in profile.filters:
        author = sanitize_text(params.author, limits.author_max_length) or None
        if author:
            filters["author"] = Condition(op="contains", value=author, pattern=escape_like(author))

    tags: tuple[str, ...] = ()
    if "tags" in profile.filters:
        tags = parse_tags(params.tags, limits.max_tags, limits.tag_max_length)
        if tags:
            filters["tags"] = Condition(op="in_ci", value=tags)

    status: ContentStatus | None = None
    if "status" in profile.filters:
        status = parse_status(params.status)
        if status:
            filters["status"] = Condition(op="eq", value=status)

    sort = parse_sort(params.sort_by, params.sort_order, profile)

    applied = AppliedFilters(
        search=search,
        tags=tags,
        category=category,
        status=status,
        author=author,
        sort_by=sort.field,
        sort_order=sort.direction,
    )

    return ListQuery(filters=filters, pagination=pagination, sort=sort, applied=applied)


def with_forced_status(query: ListQuery, status: ContentStatus) -> ListQuery:
    """Copy of query restricted to one status regardless of what the caller asked for."""
    filters = dict(query.filters)
    filters["status"] = Condition(op="eq", value=status)
    return replace(query, filters=filters, applied=replace(query.applied, status=status))
