from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# --- Shared Enums/Types ---
ContentStatus = Literal["draft", "published", "archived"]
CategoryType = Literal["podcast", "article", "both"]


# --- Content ---
class ContentItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    kind: str
    title: str
    slug: str | None = None
    tags: list[str] = []
    category: str = ""
    status: ContentStatus
    scheduled_date: datetime
    publish_date: datetime | None = None
    thumbnail_url: str | None = None
    created_at: datetime
    updated_at: datetime


class ArticleResponse(ContentItemResponse):
    content: str
    author: str | None = None


class PodcastResponse(ContentItemResponse):
    description: str = ""
    audio_url: str | None = None
    video_url: str | None = None
    duration_seconds: int | None = None
    youtube: str | None = None
    spotify: str | None = None
    anghami: str | None = None
    apple_music: str | None = None


class _ContentUpdateBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    tags: list[str] | str | None = None
    category: str | None = None
    status: ContentStatus | None = None
    scheduled_date: datetime | None = None
    slug: str | None = None
    thumbnail_url: str | None = None


class ArticleUpdateRequest(_ContentUpdateBase):
    content: str | None = None
    author: str | None = None


class PodcastUpdateRequest(_ContentUpdateBase):
    description: str | None = None
    audio_url: str | None = None
    video_url: str | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    youtube: str | None = None
    spotify: str | None = None
    anghami: str | None = None
    apple_music: str | None = None


class StatusUpdateRequest(BaseModel):
    # Plain str so an unknown status reaches the component and comes back as a 400.
    status: str


class PaginationResponse(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_previous_page: bool
    limit: int


class ListResponse(BaseModel):
    items: list[dict[str, Any]]
    pagination: PaginationResponse
    filters: dict[str, Any]


class StatsResponse(BaseModel):
    total: int
    published: int
    draft: int
    archived: int
    by_status: dict[str, int]


class DeleteResponse(BaseModel):
    deleted: bool
    media_removed: int = 0


class UploadResponse(BaseModel):
    url: str
    key: str
    size: int
    type: str


# --- Categories ---
class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str | None = None
    type: CategoryType
    created_at: datetime
    updated_at: datetime


class CategoryCreateRequest(BaseModel):
    name: str
    description: str | None = None
    type: str = "both"


class CategoryUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    type: str | None = None


# --- Admins ---
class Token(BaseModel):
    token: str
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterRequest(BaseModel):
    username: str
    password: str
    is_super_admin: bool = False


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(alias="oldPassword")
    new_password: str = Field(alias="newPassword")

    model_config = ConfigDict(populate_by_name=True)


class AdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    is_super_admin: bool
    created_at: datetime


class MessageResponse(BaseModel):
    message: str


# --- Scheduler ---
class TickResponse(BaseModel):
    started_at: str
    published: dict[str, int]
    errors: dict[str, str]
    skipped: bool
    total_published: int
