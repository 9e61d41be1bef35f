"""
Helpers shared by the article and podcast routers.
"""

from typing import Any

from fastapi import Query, UploadFile

from castpress.adapters.clock import SystemClock
from castpress.api.errors import raise_for_errors
from castpress.api.schemas import (
    ArticleResponse,
    ListResponse,
    PaginationResponse,
    PodcastResponse,
    StatsResponse,
    UploadResponse,
)
from castpress.components.content import ContentListOutput, StatsOutput
from castpress.components.listing import ListParams
from castpress.components.media import (
    MediaCleaner,
    UploadInput,
    UploadKind,
    UploadOutput,
    run_upload,
)
from castpress.core.ports.storage import MediaStorePort
from castpress.domain.entities import AnyContent, Article


def get_list_params(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    search: str | None = Query(None),
    tags: str | None = Query(None),
    category: str | None = Query(None),
    status: str | None = Query(None),
    author: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
) -> ListParams:
    """Every listing parameter as a raw string; nothing here can fail validation."""
    return ListParams(
        page=page,
        limit=limit,
        search=search,
        tags=tags,
        category=category,
        status=status,
        author=author,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def serialize(item: AnyContent) -> dict[str, Any]:
    if isinstance(item, Article):
        return ArticleResponse.model_validate(item).model_dump(mode="json")
    return PodcastResponse.model_validate(item).model_dump(mode="json")


def list_response(result: ContentListOutput) -> ListResponse:
    return ListResponse(
        items=[serialize(item) for item in result.items],
        pagination=PaginationResponse(**result.page_info.to_dict()),
        filters=result.applied.to_dict(),
    )


def stats_response(result: StatsOutput) -> StatsResponse:
    return StatsResponse(
        total=result.total,
        published=result.by_status.get("published", 0),
        draft=result.by_status.get("draft", 0),
        archived=result.by_status.get("archived", 0),
        by_status=result.by_status,
    )


def upload_file(
    kind: str,
    file: UploadFile | None,
    *,
    store: MediaStorePort,
    kinds: dict[str, UploadKind],
    clock: SystemClock,
) -> UploadOutput:
    """Store one uploaded file, raising the mapped HTTPException when it is rejected."""
    inp = UploadInput(
        kind=kind,
        filename=(file.filename if file else None) or "upload",
        content_type=(file.content_type if file else None) or "application/octet-stream",
        data=file.file.read() if file else b"",
    )
    result = run_upload(inp, store=store, kinds=kinds, time=clock)
    if not result.success:
        raise_for_errors(result.errors)
    return result


def upload_response(result: UploadOutput) -> UploadResponse:
    return UploadResponse(
        url=result.url or "",
        key=result.key or "",
        size=result.size_bytes,
        type=result.content_type or "",
    )


def discard_uploads(urls: list[str], store: MediaStorePort) -> None:
    """Remove files stored for a create request that was then rejected."""
    if urls:
        MediaCleaner(store).delete_urls(urls)


def form_data(**fields: Any) -> dict[str, Any]:
    """Form fields that were actually sent."""
    return {name: value for name, value in fields.items() if value is not None}
