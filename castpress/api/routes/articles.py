from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from castpress.adapters.clock import SystemClock
from castpress.adapters.local_storage import LocalFileStorage
from castpress.adapters.sqlite.repos import SQLiteArticleRepo
from castpress.api.deps import (
    enforce_upload_limit,
    get_article_repo,
    get_clock,
    get_content_config,
    get_current_admin,
    get_listing_profiles,
    get_media_store,
    get_rate_limiter,
    get_upload_kinds,
)
from castpress.api.errors import raise_for_errors
from castpress.api.routes.common import (
    discard_uploads,
    form_data,
    get_list_params,
    list_response,
    serialize,
    stats_response,
    upload_file,
    upload_response,
)
from castpress.api.schemas import (
    ArticleUpdateRequest,
    DeleteResponse,
    ListResponse,
    StatsResponse,
    StatusUpdateRequest,
    UploadResponse,
)
from castpress.app_shell.rate_limit import RateLimiter
from castpress.components.content import (
    ContentConfig,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    ListContentInput,
    SetStatusInput,
    UpdateContentInput,
    run_create,
    run_delete,
    run_get,
    run_get_published_by_slug,
    run_list,
    run_list_published,
    run_set_status,
    run_stats,
    run_update,
)
from castpress.components.listing import ListingProfiles, ListParams
from castpress.components.media import UploadKind
from castpress.domain.entities import Admin

router = APIRouter()


@router.get("", response_model=ListResponse)
def list_articles(
    params: ListParams = Depends(get_list_params),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    profiles: ListingProfiles = Depends(get_listing_profiles),
) -> ListResponse:
    """List articles with pagination, search, filters and sorting."""
    result = run_list(
        ListContentInput(kind="article", params=params),
        repo=repo,
        profile=profiles.get("article"),
        limits=profiles.limits,
    )
    return list_response(result)


@router.get("/published", response_model=ListResponse)
def list_published_articles(
    params: ListParams = Depends(get_list_params),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    profiles: ListingProfiles = Depends(get_listing_profiles),
) -> ListResponse:
    """Public listing: published articles, newest first."""
    result = run_list_published(
        ListContentInput(kind="article", params=params),
        repo=repo,
        profile=profiles.get("article"),
        limits=profiles.limits,
    )
    return list_response(result)


@router.get("/stats/overview", response_model=StatsResponse)
def article_stats(
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
) -> StatsResponse:
    return stats_response(run_stats(repo=repo))


@router.get("/slug/{slug}")
def get_article_by_slug(
    slug: str,
    repo: SQLiteArticleRepo = Depends(get_article_repo),
) -> dict[str, Any]:
    result = run_get_published_by_slug(GetContentInput(kind="article", slug=slug), repo=repo)
    if not result.success or result.content is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return serialize(result.content)


@router.get("/{item_id}")
def get_article(
    item_id: UUID,
    repo: SQLiteArticleRepo = Depends(get_article_repo),
) -> dict[str, Any]:
    result = run_get(GetContentInput(kind="article", content_id=item_id), repo=repo)
    if not result.success or result.content is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return serialize(result.content)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_article(
    title: str = Form(""),
    content: str = Form(""),
    author: str | None = Form(None),
    category: str | None = Form(None),
    tags: str | None = Form(None),
    article_status: str | None = Form(None, alias="status"),
    scheduled_date: str | None = Form(None),
    slug: str | None = Form(None),
    thumbnail_url: str | None = Form(None),
    thumbnail: UploadFile | None = File(None),
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    store: LocalFileStorage = Depends(get_media_store),
    kinds: dict[str, UploadKind] = Depends(get_upload_kinds),
    limiter: RateLimiter = Depends(get_rate_limiter),
    config: ContentConfig = Depends(get_content_config),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    """Create an article from a multipart form with an optional thumbnail file."""
    data = form_data(
        title=title,
        content=content,
        author=author,
        category=category,
        tags=tags,
        status=article_status,
        scheduled_date=scheduled_date,
        slug=slug,
        thumbnail_url=thumbnail_url,
    )

    stored: list[str] = []
    if thumbnail is not None and thumbnail.filename:
        if not limiter.check_upload(str(current_admin.id)):
            raise HTTPException(status_code=429, detail="Too many uploads")
        upload = upload_file(
            "article_thumbnail", thumbnail, store=store, kinds=kinds, clock=clock
        )
        data["thumbnail_url"] = upload.url
        stored.append(upload.url or "")

    result = run_create(
        CreateContentInput(kind="article", data=data), repo=repo, time=clock, config=config
    )
    if not result.success or result.content is None:
        discard_uploads(stored, store)
        raise_for_errors(result.errors)
    return serialize(result.content)


@router.patch("/{item_id}")
def update_article(
    item_id: UUID,
    req: ArticleUpdateRequest,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    config: ContentConfig = Depends(get_content_config),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    inp = UpdateContentInput(
        kind="article", content_id=item_id, updates=req.model_dump(exclude_unset=True)
    )
    result = run_update(inp, repo=repo, time=clock, config=config)
    if not result.success or result.content is None:
        raise_for_errors(result.errors)
    return serialize(result.content)


@router.patch("/{item_id}/status")
def set_article_status(
    item_id: UUID,
    req: StatusUpdateRequest,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    result = run_set_status(
        SetStatusInput(kind="article", content_id=item_id, status=req.status),
        repo=repo,
        time=clock,
    )
    if not result.success or result.content is None:
        raise_for_errors(result.errors)
    return serialize(result.content)


@router.delete("/{item_id}", response_model=DeleteResponse)
def delete_article(
    item_id: UUID,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLiteArticleRepo = Depends(get_article_repo),
) -> DeleteResponse:
    result = run_delete(DeleteContentInput(kind="article", content_id=item_id), repo=repo)
    if not result.success:
        raise_for_errors(result.errors)
    return DeleteResponse(deleted=result.deleted, media_removed=result.media_removed)


@router.post("/upload-media", response_model=UploadResponse)
def upload_article_media(
    media: UploadFile | None = File(None),
    current_admin: Admin = Depends(enforce_upload_limit),
    store: LocalFileStorage = Depends(get_media_store),
    kinds: dict[str, UploadKind] = Depends(get_upload_kinds),
    clock: SystemClock = Depends(get_clock),
) -> UploadResponse:
    """Upload an image, audio or video file for embedding in an article body."""
    return upload_response(
        upload_file("article_media", media, store=store, kinds=kinds, clock=clock)
    )
