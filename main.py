"""
FastAPI Application Entry Point

Creates and configures the component store and workflow export service.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from core.components.api import router as components_router, stages_router
from core.components.exceptions import ComponentStoreException
from core.database.engine import close_db, create_tables, init_db
from core.exceptions.handlers import (
    component_store_exception_handler,
    generic_http_exception_handler,
    method_not_allowed_exception_handler,
    not_found_exception_handler,
    script_synthesis_exception_handler,
    validation_exception_handler,
)
from core.health.routes import router as health_router
from core.workflow.api import router as workflow_router
from middleware.error_handler import ErrorHandlerMiddleware
from middleware.logging import LoggingMiddleware
from stagecraft.exceptions import ScriptSynthesisError

logger = logging.getLogger(__name__)
settings = get_settings()

OPENAPI_TAGS = [
    {"name": "Components", "description": "Stage-tagged component store."},
    {"name": "Workflow", "description": "Sandbox runs and pipeline script export."},
    {"name": "health", "description": "Health and readiness checks consumed by monitoring systems."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting Stagecraft")
    start_time = time.time()

    await init_db(app)
    logger.info("✅ Database initialized")

    await create_tables(app.state.db_engine)
    logger.info("✅ Database tables created/verified")

    logger.info(f"🎉 Application started in {time.time() - start_time:.2f} seconds")

    yield

    logger.info("🛑 Shutting down Stagecraft")
    await close_db(app)
    logger.info("✅ Application shutdown complete")


def create_app() -> FastAPI:
    """
    FastAPI application factory.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    docs_enabled = settings.API_DOCS_ENABLED
    if docs_enabled is None:
        docs_enabled = settings.DEBUG

    app = FastAPI(
        title=settings.APP_NAME,
        summary=settings.APP_SUMMARY,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    # Add middleware (order matters!)
    _add_middleware(app)

    _include_routers(app)

    _add_exception_handlers(app)

    return app


def _add_middleware(app: FastAPI) -> None:
    """Add middleware to the FastAPI application."""

    if settings.ALLOWED_HOSTS:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=settings.ALLOWED_HOSTS
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID", "X-Missing-Definitions"],
    )

    app.add_middleware(LoggingMiddleware)
    # Added last so it runs first and sets the request id used by logging
    app.add_middleware(ErrorHandlerMiddleware)


def _include_routers(app: FastAPI) -> None:
    """Include all API routers."""
    # Health check (no prefix, available at /health)
    app.include_router(health_router, tags=["health"])

    app.include_router(components_router, prefix=settings.API_PREFIX)
    app.include_router(stages_router, prefix=settings.API_PREFIX)
    app.include_router(workflow_router, prefix=settings.API_PREFIX)

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url="/docs")


def _add_exception_handlers(app: FastAPI) -> None:
    """Add global exception handlers returning JSON bodies."""
    app.add_exception_handler(404, not_found_exception_handler)
    app.add_exception_handler(405, method_not_allowed_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_exception_handler(HTTPException, generic_http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, generic_http_exception_handler)

    app.add_exception_handler(ScriptSynthesisError, script_synthesis_exception_handler)
    app.add_exception_handler(ComponentStoreException, component_store_exception_handler)


# Create the application instance
app = create_app()


# For development server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning"
    )
