import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from castpress.adapters.auth.crypto import JWTAuthAdapter
from castpress.adapters.background import PublicationScheduler
from castpress.adapters.clock import SystemClock
from castpress.adapters.sqlite.migrator import SQLiteMigrator
from castpress.adapters.sqlite.repos import SQLiteAdminRepo, SQLiteArticleRepo, SQLitePodcastRepo
from castpress.api.deps import get_rules, get_settings
from castpress.api.routes import admin, articles, categories, media, podcasts
from castpress.app_shell.config import validate_ops_rules
from castpress.components.auth import BootstrapAdminInput, run_bootstrap_admin
from castpress.components.scheduler import create_transitioner

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load rules, migrate, bootstrap the first admin and run the publication scheduler."""
    settings = get_settings()

    # Fail fast: a bad rules file or environment aborts startup.
    try:
        rules = get_rules()
        validate_ops_rules(rules, settings.data_dir)
    except Exception:
        logger.critical("Startup configuration failed", exc_info=True)
        raise
    logger.info("Rules loaded from %s", settings.rules_path)

    SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()

    timeout = rules.scheduler.db_timeout_seconds
    clock = SystemClock()
    run_bootstrap_admin(
        BootstrapAdminInput(settings.bootstrap_username, settings.bootstrap_password),
        SQLiteAdminRepo(settings.db_path, timeout=timeout),
        JWTAuthAdapter(settings.secret_key),
        clock,
    )

    transitioner = create_transitioner(
        {
            "article": SQLiteArticleRepo(settings.db_path, timeout=timeout),
            "podcast": SQLitePodcastRepo(settings.db_path, timeout=timeout),
        },
        clock,
    )
    app.state.transitioner = transitioner

    scheduler: PublicationScheduler | None = None
    if rules.scheduler.enabled:
        scheduler = PublicationScheduler(transitioner, rules.scheduler.interval_seconds)
        scheduler.start()

    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.stop()
        app.state.transitioner = None


def include_routers(app: FastAPI, media_base_url: str = "/media") -> None:
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])
    app.include_router(articles.router, prefix="/article", tags=["Articles"])
    app.include_router(podcasts.router, prefix="/podcast", tags=["Podcasts"])
    app.include_router(categories.router, prefix="/category", tags=["Categories"])
    app.include_router(media.router, prefix=media_base_url.rstrip("/"), tags=["Media"])


def create_app() -> FastAPI:
    app = FastAPI(
        title="Castpress API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    include_routers(app, get_settings().media_base_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_rules().cors.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "castpress"}

    return app


app = create_app()
