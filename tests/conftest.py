from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from castpress.adapters.auth.crypto import JWTAuthAdapter
from castpress.adapters.sqlite.migrator import SQLiteMigrator
from castpress.adapters.sqlite.repos import (
    SQLiteAdminRepo,
    SQLiteArticleRepo,
    SQLiteCategoryRepo,
    SQLitePodcastRepo,
)
from castpress.api import deps
from castpress.api.auth_utils import get_password_hash
from castpress.api.deps import Settings, get_rate_limiter, get_rules, get_settings
from castpress.api.main import include_routers
from castpress.app_shell.rate_limit import RateLimiter
from castpress.domain.entities import Admin
from castpress.rules.loader import load_rules
from castpress.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[1]
RULES_PATH = PROJECT_ROOT / "rules.yaml"
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"

TEST_SECRET = "test-secret-key"
SUPER_PASSWORD = "rootpass123"
EDITOR_PASSWORD = "editorpass123"


@pytest.fixture
def rules() -> Rules:
    """The real project rules."""
    return load_rules(RULES_PATH)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """A migrated, empty SQLite database."""
    path = str(tmp_path / "castpress.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


@pytest.fixture
def settings(tmp_path: Path, db_path: str) -> Settings:
    s = Settings()
    s.data_dir = tmp_path
    s.db_path = db_path
    s.media_dir = tmp_path / "media"
    s.rules_path = RULES_PATH
    s.migrations_dir = MIGRATIONS_DIR
    s.secret_key = TEST_SECRET
    s.media_base_url = "/media"
    return s


@pytest.fixture
def env_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the cached settings and rules at a fresh data directory via the environment."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("CASTPRESS_DATA_DIR", str(data_dir))
    monkeypatch.setenv("CASTPRESS_RULES_PATH", str(RULES_PATH))
    monkeypatch.setenv("CASTPRESS_MIGRATIONS_DIR", str(MIGRATIONS_DIR))
    monkeypatch.setenv("CASTPRESS_SECRET_KEY", TEST_SECRET)
    monkeypatch.setattr(deps, "_rate_limiter_instance", None)
    get_settings.cache_clear()
    get_rules.cache_clear()
    yield data_dir
    get_settings.cache_clear()
    get_rules.cache_clear()


@pytest.fixture
def article_repo(db_path: str) -> SQLiteArticleRepo:
    return SQLiteArticleRepo(db_path)


@pytest.fixture
def podcast_repo(db_path: str) -> SQLitePodcastRepo:
    return SQLitePodcastRepo(db_path)


@pytest.fixture
def category_repo(db_path: str) -> SQLiteCategoryRepo:
    return SQLiteCategoryRepo(db_path)


@pytest.fixture
def admin_repo(db_path: str) -> SQLiteAdminRepo:
    return SQLiteAdminRepo(db_path)


@pytest.fixture
def super_admin(admin_repo: SQLiteAdminRepo) -> Admin:
    return admin_repo.save(
        Admin(
            username="root",
            password_hash=get_password_hash(SUPER_PASSWORD),
            is_super_admin=True,
        )
    )


@pytest.fixture
def editor(admin_repo: SQLiteAdminRepo) -> Admin:
    return admin_repo.save(
        Admin(username="editor", password_hash=get_password_hash(EDITOR_PASSWORD))
    )


def bearer(admin: Admin) -> dict[str, str]:
    token = JWTAuthAdapter(TEST_SECRET).create_token(
        {"sub": str(admin.id), "username": admin.username}, 60
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(super_admin: Admin) -> dict[str, str]:
    return bearer(super_admin)


@pytest.fixture
def editor_headers(editor: Admin) -> dict[str, str]:
    return bearer(editor)


@pytest.fixture
def app(settings: Settings, rules: Rules) -> FastAPI:
    """All routers wired to a temporary database and media directory."""
    app = FastAPI()
    include_routers(app, settings.media_base_url)

    limiter = RateLimiter(rules.rate_limits)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
