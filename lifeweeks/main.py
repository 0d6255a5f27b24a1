import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Explicitly load .env files at startup
# Load order (later files override earlier):
# 1. project .env (project defaults)
# 2. project .env.local (local overrides)
project_root = Path(__file__).parent.parent
env_file = project_root / ".env"
env_local = project_root / ".env.local"

if env_file.exists():
    load_dotenv(env_file, override=False)

if env_local.exists():
    load_dotenv(env_local, override=True)

from .api.health import create_health_router, set_start_time
from .api.images import router as images_router
from .api.static import create_static_router
from .api.weeks import router as weeks_router
from .core.config import Settings, get_settings
from .middleware.body_size import UploadSizeLimitMiddleware
from .middleware.error_handler import (
    ErrorHandlerMiddleware,
    error_body,
    register_error_handlers,
)
from .middleware.request_id import RequestIdMiddleware
from .services.life_expectancy import load_life_expectancy_table
from .services.snapshot_store import SnapshotStore
from .utils.logging import setup_logging
from .version import get_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    settings: Settings = app.state.settings
    set_start_time()
    logger.info(
        "Life in Weeks starting up (environment=%s, snapshot_ttl=%ss)",
        settings.environment,
        settings.snapshot_ttl_seconds,
    )

    yield

    logger.info("Life in Weeks shutting down...")
    app.state.snapshot_store.close()
    logger.info("Shutdown complete")


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Invalid request on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content=error_body("Invalid request"))


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SnapshotStore] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings (defaults to the cached env settings).
        store: Snapshot store to serve share links from; a fresh one is
            created with the configured TTL when omitted.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Life in Weeks",
        description="Life-in-weeks calculator and ephemeral share links",
        version=get_version(),
        lifespan=lifespan,
    )
    app.state.settings = settings
    if store is None:
        store = SnapshotStore(ttl_seconds=settings.snapshot_ttl_seconds)
    app.state.snapshot_store = store
    app.state.life_expectancy = load_life_expectancy_table()

    # Added innermost first: request id wraps everything
    app.add_middleware(UploadSizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(create_health_router())
    app.include_router(images_router)
    app.include_router(weeks_router)
    # Catch-all shell route must stay last
    app.include_router(create_static_router(settings.static_dir))

    return app


_settings = get_settings()
setup_logging(log_level=_settings.log_level, log_to_file=_settings.log_to_file)

app = create_app(_settings)

