from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from castpress.adapters.clock import SystemClock
from castpress.adapters.local_storage import LocalFileStorage
from castpress.adapters.sqlite.repos import SQLitePodcastRepo
from castpress.api.deps import (
    enforce_upload_limit,
    get_clock,
    get_content_config,
    get_current_admin,
    get_listing_profiles,
    get_media_cleaner,
    get_media_store,
    get_podcast_repo,
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
    DeleteResponse,
    ListResponse,
    PodcastUpdateRequest,
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
from castpress.components.media import MediaCleaner, UploadKind
from castpress.domain.entities import Admin

router = APIRouter()


@router.get("", response_model=ListResponse)
def list_podcasts(
    params: ListParams = Depends(get_list_params),
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
    profiles: ListingProfiles = Depends(get_listing_profiles),
) -> ListResponse:
    """List podcasts with pagination, search, filters and sorting."""
    result = run_list(
        ListContentInput(kind="podcast", params=params),
        repo=repo,
        profile=profiles.get("podcast"),
        limits=profiles.limits,
    )
    return list_response(result)


@router.get("/published", response_model=ListResponse)
def list_published_podcasts(
    params: ListParams = Depends(get_list_params),
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
    profiles: ListingProfiles = Depends(get_listing_profiles),
) -> ListResponse:
    result = run_list_published(
        ListContentInput(kind="podcast", params=params),
        repo=repo,
        profile=profiles.get("podcast"),
        limits=profiles.limits,
    )
    return list_response(result)


@router.get("/stats/overview", response_model=StatsResponse)
def podcast_stats(
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
) -> StatsResponse:
    return stats_response(run_stats(repo=repo))


@router.get("/slug/{slug}")
def get_podcast_by_slug(
    slug: str,
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
) -> dict[str, Any]:
    result = run_get_published_by_slug(GetContentInput(kind="podcast", slug=slug), repo=repo)
    if not result.success or result.content is None:
        raise HTTPException(status_code=404, detail="Podcast not found")
    return serialize(result.content)


@router.get("/{item_id}")
def get_podcast(
    item_id: UUID,
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
) -> dict[str, Any]:
    result = run_get(GetContentInput(kind="podcast", content_id=item_id), repo=repo)
    if not result.success or result.content is None:
        raise HTTPException(status_code=404, detail="Podcast not found")
    return serialize(result.content)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_podcast(
    title: str = Form(""),
    description: str | None = Form(None),
    category: str | None = Form(None),
    tags: str | None = Form(None),
    podcast_status: str | None = Form(None, alias="status"),
    scheduled_date: str | None = Form(None),
    slug: str | None = Form(None),
    duration_seconds: str | None = Form(None),
    youtube: str | None = Form(None),
    spotify: str | None = Form(None),
    anghami: str | None = Form(None),
    apple_music: str | None = Form(None),
    audio_url: str | None = Form(None),
    video_url: str | None = Form(None),
    thumbnail_url: str | None = Form(None),
    audio: UploadFile | None = File(None),
    video: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
    store: LocalFileStorage = Depends(get_media_store),
    kinds: dict[str, UploadKind] = Depends(get_upload_kinds),
    limiter: RateLimiter = Depends(get_rate_limiter),
    config: ContentConfig = Depends(get_content_config),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    """
    Create a podcast from a multipart form.

    Audio, video and thumbnail may be sent as files or as URLs of media
    uploaded earlier; at least one of audio or video is required.
    """
    data = form_data(
        title=title,
        description=description,
        category=category,
        tags=tags,
        status=podcast_status,
        scheduled_date=scheduled_date,
        slug=slug,
        duration_seconds=duration_seconds,
        youtube=youtube,
        spotify=spotify,
        anghami=anghami,
        apple_music=apple_music,
        audio_url=audio_url,
        video_url=video_url,
        thumbnail_url=thumbnail_url,
    )

    files = {
        "audio_url": ("audio", audio),
        "video_url": ("video", video),
        "thumbnail_url": ("thumbnail", thumbnail),
    }
    sent = {
        field: (kind, upload)
        for field, (kind, upload) in files.items()
        if upload is not None and upload.filename
    }
    if sent and not limiter.check_upload(str(current_admin.id)):
        raise HTTPException(status_code=429, detail="Too many uploads")

    stored: list[str] = []
    try:
        for field, (kind, upload) in sent.items():
            result = upload_file(kind, upload, store=store, kinds=kinds, clock=clock)
            data[field] = result.url
            stored.append(result.url or "")
    except HTTPException:
        discard_uploads(stored, store)
        raise

    created = run_create(
        CreateContentInput(kind="podcast", data=data), repo=repo, time=clock, config=config
    )
    if not created.success or created.content is None:
        discard_uploads(stored, store)
        raise_for_errors(created.errors)
    return serialize(created.content)


@router.post("/upload-audio", response_model=UploadResponse)
def upload_audio(
    audio: UploadFile | None = File(None),
    current_admin: Admin = Depends(enforce_upload_limit),
    store: LocalFileStorage = Depends(get_media_store),
    kinds: dict[str, UploadKind] = Depends(get_upload_kinds),
    clock: SystemClock = Depends(get_clock),
) -> UploadResponse:
    return upload_response(upload_file("audio", audio, store=store, kinds=kinds, clock=clock))


@router.post("/upload-video", response_model=UploadResponse)
def upload_video(
    video: UploadFile | None = File(None),
    current_admin: Admin = Depends(enforce_upload_limit),
    store: LocalFileStorage = Depends(get_media_store),
    kinds: dict[str, UploadKind] = Depends(get_upload_kinds),
    clock: SystemClock = Depends(get_clock),
) -> UploadResponse:
    return upload_response(upload_file("video", video, store=store, kinds=kinds, clock=clock))


@router.patch("/{item_id}")
def update_podcast(
    item_id: UUID,
    req: PodcastUpdateRequest,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
    config: ContentConfig = Depends(get_content_config),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    inp = UpdateContentInput(
        kind="podcast", content_id=item_id, updates=req.model_dump(exclude_unset=True)
    )
    result = run_update(inp, repo=repo, time=clock, config=config)
    if not result.success or result.content is None:
        raise_for_errors(result.errors)
    return serialize(result.content)


@router.patch("/{item_id}/status")
def set_podcast_status(
    item_id: UUID,
    req: StatusUpdateRequest,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
    clock: SystemClock = Depends(get_clock),
) -> dict[str, Any]:
    result = run_set_status(
        SetStatusInput(kind="podcast", content_id=item_id, status=req.status),
        repo=repo,
        time=clock,
    )
    if not result.success or result.content is None:
        raise_for_errors(result.errors)
    return serialize(result.content)


@router.delete("/{item_id}", response_model=DeleteResponse)
def delete_podcast(
    item_id: UUID,
    current_admin: Admin = Depends(get_current_admin),
    repo: SQLitePodcastRepo = Depends(get_podcast_repo),
    cleaner: MediaCleaner = Depends(get_media_cleaner),
) -> DeleteResponse:
    """Delete a podcast and, best-effort, its stored audio, video and thumbnail."""
    result = run_delete(
        DeleteContentInput(kind="podcast", content_id=item_id), repo=repo, media=cleaner
    )
    if not result.success:
        raise_for_errors(result.errors)
    return DeleteResponse(deleted=result.deleted, media_removed=result.media_removed)
