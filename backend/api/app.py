"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import configure_logging, get_settings
from shared.exceptions import AuthenticationError, InternalFailureError, VarnayaError
from .middleware.access import AccessControlMiddleware
from .routes import health, session
from modules.blog.routes import router as blog_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


async def varnaya_error_handler(request: Request, exc: VarnayaError) -> JSONResponse:
    """Render module exceptions as {"error", "code"} bodies."""
    if isinstance(exc, InternalFailureError):
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; the exception text never reaches the client."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": InternalFailureError.public_message, "code": "INTERNAL_ERROR"},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Skincare storefront and blog API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    app.add_exception_handler(VarnayaError, varnaya_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Route protection runs inside CORS so preflight answers are untouched
    app.add_middleware(AccessControlMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(session.router, prefix="/api/session", tags=["session"])
    app.include_router(blog_router, prefix="/api/blog", tags=["blog"])

    return app


# Application instance for uvicorn
app = create_app()
