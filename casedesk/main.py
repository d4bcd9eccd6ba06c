"""
CaseDesk API entry point.

Configures the FastAPI application with every route, middleware and
lifecycle handler.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from casedesk.api.router import api_router
from casedesk.core.config import settings
from casedesk.core.logging import setup_logging
from casedesk.core.middleware import (
    BodySizeLimitMiddleware,
    RequestContextMiddleware,
    setup_exception_handlers,
)
from casedesk.core.storage import MB

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle."""
    setup_logging()
    logger.info("starting casedesk api", version=settings.VERSION, environment=settings.ENVIRONMENT)

    yield

    logger.info("stopping casedesk api")


def create_application() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Multi-tenant case management for law firms",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )

    # Last added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.MAX_REQUEST_BODY_MB * MB)

    setup_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


app = create_application()


def run() -> None:
    """Console entry point."""
    uvicorn.run("casedesk.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
