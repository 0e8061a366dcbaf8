"""FastAPI application factory and main entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

import testhub.models  # noqa: F401  (registers tables on Base.metadata)
from testhub.api.v1.router import api_router
from testhub.common.request_id import RequestIDMiddleware
from testhub.core.config import settings
from testhub.core.errors import (
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from testhub.core.logging import get_logger, setup_logging
from testhub.db.base import Base
from testhub.db.engine import engine
from testhub.services.payments import get_payment_gateway

logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.ENV == "dev":
        # Outside dev the schema comes from alembic migrations
        Base.metadata.create_all(bind=engine)
    gateway = get_payment_gateway()
    logger.info("Application started", extra={"env": settings.ENV, "gateway": gateway.name})
    yield
    engine.dispose()
    logger.info("Application stopped")


def create_app() -> FastAPI:
    """Build the API: middleware, error envelope handlers, and v1 routes."""
    docs_enabled = settings.ENV != "prod"
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=VERSION,
        description="Online testing platform API: grading and premium subscriptions",
        openapi_url="/openapi.json" if docs_enabled else None,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Added last runs first, so request IDs exist before CORS short-circuits
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": settings.PROJECT_NAME,
            "version": VERSION,
            "docs_url": "/docs" if docs_enabled else None,
        }

    return app


app = create_app()
