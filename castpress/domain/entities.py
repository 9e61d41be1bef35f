from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ContentKind = Literal["article", "podcast"]
ContentStatus = Literal["draft", "published", "archived"]
CategoryType = Literal["podcast", "article", "both"]

CONTENT_STATUSES: tuple[ContentStatus, ...] = ("draft", "published", "archived")
CATEGORY_TYPES: tuple[CategoryType, ...] = ("podcast", "article", "both")


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- Admins ---


class Admin(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    username: str
    password_hash: str
    is_super_admin: bool = False
    created_at: datetime = Field(default_factory=utcnow)


# --- Categories ---


class Category(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    slug: str
    description: str | None = None
    type: CategoryType = "both"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- Content ---


class ContentItem(BaseModel):
    """Fields shared by every publishable item."""

    id: UUID = Field(default_factory=uuid4)
    title: str
    tags: list[str] = Field(default_factory=list)
    category: str = ""
    status: ContentStatus = "draft"
    scheduled_date: datetime = Field(default_factory=utcnow)
    publish_date: datetime | None = None
    slug: str | None = None
    thumbnail_url: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Article(ContentItem):
    kind: Literal["article"] = "article"
    content: str
    author: str | None = None


class Podcast(ContentItem):
    kind: Literal["podcast"] = "podcast"
    description: str = ""
    audio_url: str | None = None
    video_url: str | None = None
    duration_seconds: int | None = None
    youtube: str | None = None
    spotify: str | None = None
    anghami: str | None = None
    apple_music: str | None = None

    def media_urls(self) -> list[str]:
        return [u for u in (self.audio_url, self.video_url, self.thumbnail_url) if u]


AnyContent = Article | Podcast
