"""
Content component - article and podcast lifecycle.

Handles create, read, partial update, manual status change, delete and
listing for both content kinds. Validation problems are returned as
ContentValidationError records, never raised.

Lifecycle:
- created as draft unless a status is given; scheduled_date defaults to now
- any manual status change is allowed; setting published stamps publish_date
- drafts whose scheduled_date has passed are promoted by the scheduler
- deleting a podcast removes its stored media best-effort
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any
from uuid import UUID

from pydantic import ValidationError

from castpress.adapters.clock import SystemClock
from castpress.components.listing import (
    ListingLimits,
    ListingProfile,
    ListParams,
    PageInfo,
    SortSpec,
    build_list_query,
    with_forced_status,
)
from castpress.domain.entities import (
    CONTENT_STATUSES,
    AnyContent,
    Article,
    Podcast,
)
from castpress.domain.errors import DuplicateValueError

from .models import (
    ContentConfig,
    ContentListOutput,
    ContentOutput,
    ContentValidationError,
    CreateContentInput,
    DeleteContentInput,
    DeleteOutput,
    GetContentInput,
    ListContentInput,
    SetStatusInput,
    StatsOutput,
    UpdateContentInput,
)
from .ports import ContentRepoPort, MediaCleanupPort, TimePort

logger = logging.getLogger(__name__)

_MODELS: dict[str, type[Article] | type[Podcast]] = {"article": Article, "podcast": Podcast}

_COMMON_WRITABLE = frozenset(
    {"title", "tags", "category", "status", "scheduled_date", "slug", "thumbnail_url"}
)
WRITABLE_FIELDS: dict[str, frozenset[str]] = {
    "article": _COMMON_WRITABLE | {"content", "author"},
    "podcast": _COMMON_WRITABLE
    | {
        "description",
        "audio_url",
        "video_url",
        "duration_seconds",
        "youtube",
        "spotify",
        "anghami",
        "apple_music",
    },
}


# --- Validation Functions ---


def _not_found(kind: str) -> ContentValidationError:
    return ContentValidationError(code="not_found", message=f"{kind.capitalize()} not found")


def _pydantic_errors(exc: ValidationError) -> list[ContentValidationError]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        errors.append(
            ContentValidationError(
                code="invalid_field",
                message=err.get("msg", "Invalid value"),
                field=str(loc[0]) if loc else None,
            )
        )
    return errors


def _clean_blank(value: Any) -> Any:
    """Blank strings from forms mean 'not set'."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def normalize_tags(tags: Any) -> list[str]:
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [str(t).strip() for t in tags if str(t).strip()]


def validate_item(
    item: AnyContent,
    repo: ContentRepoPort,
    config: ContentConfig,
    *,
    require_media: bool = False,
) -> list[ContentValidationError]:
    """Field rules shared by create and update."""
    errors: list[ContentValidationError] = []

    if not item.title or not item.title.strip():
        errors.append(
            ContentValidationError(code="title_required", message="Title is required", field="title")
        )

    if isinstance(item, Article) and not item.content.strip():
        errors.append(
            ContentValidationError(
                code="content_required", message="Content is required", field="content"
            )
        )

    if require_media and isinstance(item, Podcast) and not (item.audio_url or item.video_url):
        errors.append(
            ContentValidationError(
                code="media_required",
                message="Either an audio or a video file is required",
                field="audio",
            )
        )

    if len(item.tags) > config.max_tags:
        errors.append(
            ContentValidationError(
                code="too_many_tags",
                message=f"At most {config.max_tags} tags are allowed",
                field="tags",
            )
        )
    if any(len(t) > config.tag_max_length for t in item.tags):
        errors.append(
            ContentValidationError(
                code="tag_too_long",
                message=f"Tags must be at most {config.tag_max_length} characters",
                field="tags",
            )
        )

    if item.slug is not None:
        if not re.match(config.slug_pattern, item.slug):
            errors.append(
                ContentValidationError(
                    code="slug_invalid",
                    message="Slug must contain only lowercase letters, numbers, and hyphens",
                    field="slug",
                )
            )
        elif repo.slug_exists(item.slug, exclude_id=item.id):
            errors.append(_slug_taken())

    return errors


def _slug_taken() -> ContentValidationError:
    return ContentValidationError(code="slug_taken", message="Slug is already in use", field="slug")


def _prepare(data: dict[str, Any]) -> dict[str, Any]:
    prepared = {k: _clean_blank(v) for k, v in data.items()}
    if "tags" in data:
        prepared["tags"] = normalize_tags(data["tags"])
    if prepared.get("title") is not None:
        prepared["title"] = str(prepared["title"]).strip()
    return prepared


# --- Component Entry Points ---


def run_create(
    inp: CreateContentInput,
    *,
    repo: ContentRepoPort,
    time: TimePort | None = None,
    config: ContentConfig | None = None,
) -> ContentOutput:
    """
    Create a new article or podcast.

    Status defaults to draft and scheduled_date to the creation time.
    Podcasts need an audio or video URL.
    """
    config = config or ContentConfig()
    now = (time or SystemClock()).now_utc()

    data = _prepare(inp.data)
    data = {k: v for k, v in data.items() if v is not None}
    unknown = set(data) - WRITABLE_FIELDS[inp.kind]
    if unknown:
        return ContentOutput(
            content=None,
            errors=[
                ContentValidationError(
                    code="field_not_writable", message=f"Field '{name}' cannot be set", field=name
                )
                for name in sorted(unknown)
            ],
            success=False,
        )

    data.setdefault("scheduled_date", now)
    data.setdefault("title", "")
    if inp.kind == "article":
        data.setdefault("content", "")
    if data.get("status") == "published":
        data["publish_date"] = now

    try:
        item = _MODELS[inp.kind](created_at=now, updated_at=now, **data)
    except ValidationError as e:
        return ContentOutput(content=None, errors=_pydantic_errors(e), success=False)

    errors = validate_item(item, repo, config, require_media=True)
    if errors:
        return ContentOutput(content=None, errors=errors, success=False)

    try:
        saved = repo.save(item)
    except DuplicateValueError:
        return ContentOutput(content=None, errors=[_slug_taken()], success=False)
    logger.info("Created %s %s (%s)", inp.kind, saved.id, saved.status)
    return ContentOutput(content=saved)


def run_get(inp: GetContentInput, *, repo: ContentRepoPort) -> ContentOutput:
    """Get an item by id, or by slug when no id is given."""
    item: AnyContent | None = None
    if inp.content_id is not None:
        item = repo.get_by_id(inp.content_id)
    elif inp.slug:
        item = repo.get_by_slug(inp.slug)

    if item is None:
        return ContentOutput(content=None, errors=[_not_found(inp.kind)], success=False)
    return ContentOutput(content=item)


def run_get_published_by_slug(inp: GetContentInput, *, repo: ContentRepoPort) -> ContentOutput:
    """Public lookup: anything that is not published reads as missing."""
    item = repo.get_by_slug(inp.slug) if inp.slug else None
    if item is None or item.status != "published":
        return ContentOutput(content=None, errors=[_not_found(inp.kind)], success=False)
    return ContentOutput(content=item)


def run_update(
    inp: UpdateContentInput,
    *,
    repo: ContentRepoPort,
    time: TimePort | None = None,
    config: ContentConfig | None = None,
) -> ContentOutput:
    """
    Partially update an item.

    Only WRITABLE_FIELDS for the kind may change; id, created_at and
    publish_date are managed here. A status change follows run_set_status.
    """
    config = config or ContentConfig()
    now = (time or SystemClock()).now_utc()

    existing = repo.get_by_id(inp.content_id)
    if existing is None:
        return ContentOutput(content=None, errors=[_not_found(inp.kind)], success=False)

    not_writable = set(inp.updates) - WRITABLE_FIELDS[inp.kind]
    if not_writable:
        return ContentOutput(
            content=None,
            errors=[
                ContentValidationError(
                    code="field_not_writable", message=f"Field '{name}' cannot be set", field=name
                )
                for name in sorted(not_writable)
            ],
            success=False,
        )

    updates = _prepare(inp.updates)
    # Blank required text fails validation; blank scheduling fields are ignored.
    for name in ("scheduled_date", "status"):
        if name in updates and updates[name] is None:
            del updates[name]
    for name in ("title", "content"):
        if name in updates and updates[name] is None:
            updates[name] = ""
    if "tags" in updates and updates["tags"] is None:
        updates["tags"] = []
    if "category" in updates and updates["category"] is None:
        updates["category"] = ""

    merged = existing.model_dump()
    merged.update(updates)
    merged["updated_at"] = now
    stamp_publish = updates.get("status") == "published" and existing.status != "published"
    if stamp_publish:
        merged["publish_date"] = now

    try:
        item = _MODELS[inp.kind].model_validate(merged)
    except ValidationError as e:
        return ContentOutput(content=None, errors=_pydantic_errors(e), success=False)

    errors = validate_item(item, repo, config)
    if errors:
        return ContentOutput(content=None, errors=errors, success=False)

    # Only the submitted fields are written; a scheduler publish that landed
    # after the read above is kept.
    changes = {name: getattr(item, name) for name in updates}
    changes["updated_at"] = now
    if stamp_publish:
        changes["publish_date"] = now
    return _write_fields(inp.kind, inp.content_id, changes, repo)


def _write_fields(
    kind: str, item_id: UUID, changes: dict[str, Any], repo: ContentRepoPort
) -> ContentOutput:
    try:
        found = repo.update_fields(item_id, changes)
    except DuplicateValueError:
        return ContentOutput(content=None, errors=[_slug_taken()], success=False)
    item = repo.get_by_id(item_id) if found else None
    if item is None:
        return ContentOutput(content=None, errors=[_not_found(kind)], success=False)
    return ContentOutput(content=item)


def run_set_status(
    inp: SetStatusInput,
    *,
    repo: ContentRepoPort,
    time: TimePort | None = None,
) -> ContentOutput:
    """
    Manually set the status.

    Any transition between draft, published and archived is allowed.
    Setting published stamps publish_date with the current time; other
    statuses keep whatever publish_date the item already had.
    """
    if inp.status not in CONTENT_STATUSES:
        return ContentOutput(
            content=None,
            errors=[
                ContentValidationError(
                    code="invalid_status",
                    message=f"Status must be one of: {', '.join(CONTENT_STATUSES)}",
                    field="status",
                )
            ],
            success=False,
        )

    existing = repo.get_by_id(inp.content_id)
    if existing is None:
        return ContentOutput(content=None, errors=[_not_found(inp.kind)], success=False)

    now = (time or SystemClock()).now_utc()
    changes: dict[str, Any] = {"status": inp.status, "updated_at": now}
    if inp.status == "published":
        changes["publish_date"] = now

    output = _write_fields(inp.kind, inp.content_id, changes, repo)
    if output.success:
        logger.info(
            "%s %s status %s -> %s", inp.kind, inp.content_id, existing.status, inp.status
        )
    return output


def run_delete(
    inp: DeleteContentInput,
    *,
    repo: ContentRepoPort,
    media: MediaCleanupPort | None = None,
) -> DeleteOutput:
    """
    Delete an item.

    For podcasts the audio, video and thumbnail objects are removed after
    the record; storage failures are logged by the media port and never
    undo the record deletion.
    """
    existing = repo.get_by_id(inp.content_id)
    if existing is None:
        return DeleteOutput(deleted=False, errors=[_not_found(inp.kind)], success=False)

    repo.delete(inp.content_id)

    removed = 0
    if media is not None and isinstance(existing, Podcast):
        removed = media.delete_urls(existing.media_urls())

    logger.info("Deleted %s %s", inp.kind, inp.content_id)
    return DeleteOutput(deleted=True, media_removed=removed)


def run_list(
    inp: ListContentInput,
    *,
    repo: ContentRepoPort,
    profile: ListingProfile,
    limits: ListingLimits | None = None,
) -> ContentListOutput:
    """Admin listing: every filter the profile supports."""
    query = build_list_query(inp.params, profile, limits)
    items = repo.find(query)
    total = repo.count(query)
    return ContentListOutput(
        items=items,
        page_info=PageInfo.from_total(query.pagination, total),
        applied=query.applied,
    )


def run_list_published(
    inp: ListContentInput,
    *,
    repo: ContentRepoPort,
    profile: ListingProfile,
    limits: ListingLimits | None = None,
) -> ContentListOutput:
    """
    Public listing: published items only, newest publish_date first.

    Only page, limit, search and category are honoured.
    """
    params = ListParams(
        page=inp.params.page,
        limit=inp.params.limit,
        search=inp.params.search,
        category=inp.params.category,
    )
    query = with_forced_status(build_list_query(params, profile, limits), "published")
    newest_first = SortSpec(field="publishDate", column="publish_date", direction="desc")
    query = replace(
        query,
        sort=newest_first,
        applied=replace(query.applied, sort_by=newest_first.field, sort_order="desc"),
    )
    items = repo.find(query)
    total = repo.count(query)
    return ContentListOutput(
        items=items,
        page_info=PageInfo.from_total(query.pagination, total),
        applied=query.applied,
    )


def run_stats(*, repo: ContentRepoPort) -> StatsOutput:
    """Item counts per status."""
    by_status = repo.count_by_status()
    return StatsOutput(total=sum(by_status.values()), by_status=by_status)
