import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from castpress.adapters.auth.crypto import JWTAuthAdapter
from castpress.adapters.clock import SystemClock
from castpress.adapters.local_storage import LocalFileStorage
from castpress.adapters.sqlite.repos import (
    SQLiteAdminRepo,
    SQLiteArticleRepo,
    SQLiteCategoryRepo,
    SQLitePodcastRepo,
)
from castpress.app_shell.rate_limit import RateLimiter
from castpress.components.content import ContentConfig
from castpress.components.listing import ListingProfiles
from castpress.components.media import MediaCleaner, UploadKind
from castpress.components.scheduler import PublicationTransitioner, create_transitioner
from castpress.domain.entities import Admin
from castpress.rules.loader import load_rules
from castpress.rules.models import Rules

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("CASTPRESS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "castpress.db")
        self.media_dir = self.data_dir / "media"
        self.rules_path = Path(
            os.environ.get("CASTPRESS_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = Path(
            os.environ.get("CASTPRESS_MIGRATIONS_DIR", str(_PROJECT_ROOT / "migrations"))
        )
        self.secret_key = os.environ.get("CASTPRESS_SECRET_KEY")
        self.media_base_url = os.environ.get("CASTPRESS_MEDIA_BASE_URL", "/media")
        self.bootstrap_username = os.environ.get("CASTPRESS_BOOTSTRAP_USERNAME")
        self.bootstrap_password = os.environ.get("CASTPRESS_BOOTSTRAP_PASSWORD")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


def get_listing_profiles(rules: Rules = Depends(get_rules)) -> ListingProfiles:
    return ListingProfiles.from_rules(rules.listing)


def get_content_config(rules: Rules = Depends(get_rules)) -> ContentConfig:
    return ContentConfig.from_rules(rules.content)


def get_upload_kinds(rules: Rules = Depends(get_rules)) -> dict[str, UploadKind]:
    return {name: UploadKind.from_rules(kind) for name, kind in rules.uploads.items()}


# --- Repos ---
def get_article_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLiteArticleRepo:
    return SQLiteArticleRepo(settings.db_path, timeout=rules.scheduler.db_timeout_seconds)


def get_podcast_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLitePodcastRepo:
    return SQLitePodcastRepo(settings.db_path, timeout=rules.scheduler.db_timeout_seconds)


def get_category_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLiteCategoryRepo:
    return SQLiteCategoryRepo(settings.db_path, timeout=rules.scheduler.db_timeout_seconds)


def get_admin_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLiteAdminRepo:
    return SQLiteAdminRepo(settings.db_path, timeout=rules.scheduler.db_timeout_seconds)


# --- Adapters ---
def get_media_store(settings: Settings = Depends(get_settings)) -> LocalFileStorage:
    return LocalFileStorage(settings.media_dir, public_base_url=settings.media_base_url)


def get_media_cleaner(store: LocalFileStorage = Depends(get_media_store)) -> MediaCleaner:
    return MediaCleaner(store)


def get_auth_adapter(settings: Settings = Depends(get_settings)) -> JWTAuthAdapter:
    return JWTAuthAdapter(settings.secret_key)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


_rate_limiter_instance: RateLimiter | None = None


def get_rate_limiter(rules: Rules = Depends(get_rules)) -> RateLimiter:
    """Get rate limiter singleton."""
    global _rate_limiter_instance
    if _rate_limiter_instance is None:
        _rate_limiter_instance = RateLimiter(rules.rate_limits)
    return _rate_limiter_instance


def get_transitioner(
    request: Request,
    article_repo: SQLiteArticleRepo = Depends(get_article_repo),
    podcast_repo: SQLitePodcastRepo = Depends(get_podcast_repo),
    clock: SystemClock = Depends(get_clock),
) -> PublicationTransitioner:
    """
    The transitioner shared with the background scheduler when the app started one,
    so manual and scheduled ticks use the same single-flight guard.
    """
    shared = getattr(request.app.state, "transitioner", None)
    if shared is not None:
        return shared
    return create_transitioner({"article": article_repo, "podcast": podcast_repo}, clock)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/admin/login", auto_error=False)


def get_current_admin(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
) -> Admin:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = auth_adapter.decode_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        admin_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        ) from None

    # Deleted admins lose access even while their token is unexpired.
    admin = admin_repo.get_by_id(admin_id)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin not found",
        )
    return admin


def require_super_admin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if not admin.is_super_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return admin


def enforce_upload_limit(
    admin: Admin = Depends(get_current_admin),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> Admin:
    if not limiter.check_upload(str(admin.id)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Too many uploads"
        )
    return admin
