"""
List-Curation-Service - Main Application Entry Point

FastAPI app with lifespan handler; start with
``uvicorn list_curation.main:app``.

Patterns Applied:
- Lifespan context manager
- One-time configure_logging() at startup
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from list_curation.api.curate import curate_router
from list_curation.api.health import get_health_service
from list_curation.api.health import router as health_router
from list_curation.core.config import get_settings
from list_curation.core.logging import configure_logging, get_logger
from list_curation.core.tracing import configure_tracing

settings = get_settings()

configure_logging(
    log_level=settings.log_level,
    json_output=settings.log_json,
    environment=settings.environment,
)

logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager for startup/shutdown events."""
    logger.info(
        "startup",
        service=settings.service_name,
        version=settings.version,
        environment=settings.environment,
        max_records=settings.max_records,
    )

    if settings.tracing_enabled:
        configure_tracing(
            service_name=settings.service_name,
            service_version=settings.version,
            environment=settings.environment,
            console_export=settings.tracing_console_export,
        )
        logger.info("tracing_configured")

    app.state.initialized = True
    get_health_service().set_started(True)

    yield

    logger.info("shutdown", service=settings.service_name)
    get_health_service().set_started(False)
    app.state.initialized = False


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="List-Curation-Service",
    description="Filters, permission-checks, ranks and bounds record lists for display",
    version=settings.version,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "development" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(curate_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint pointing at the docs."""
    return {
        "service": settings.service_name,
        "version": settings.version,
        "docs": "/docs",
    }
