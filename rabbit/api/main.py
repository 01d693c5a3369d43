"""
FastAPI application factory and main entry point.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from rabbit.api.middleware import WideEventMiddleware
from rabbit.api.routes import ai, content, health, posts
from rabbit.core.config import Settings, load_env_file, settings
from rabbit.core.exceptions import RabbitException
from rabbit.core.logging import configure_logging
from rabbit.db import DatabaseError, close_db, init_db
from rabbit.services.ai import AIRouter, RetryPolicy, RouterConfig, build_registry
from rabbit.services.content_store import SQLContentStore

# Provider credentials are read from the process environment
load_env_file()

# Configure structured logging with wide events support
configure_logging(
    json_logs=settings.log_json and not settings.debug,  # JSON in production, console in dev
    log_level="DEBUG" if settings.debug else "INFO",
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Rabbit API", version=settings.app_version)
    try:
        await init_db()
        logger.info("Database initialized")
    except (SQLAlchemyError, OSError) as e:
        # Generation works without a database
        logger.warning("Database unavailable at startup", error=str(e))

    active = app.state.ai_router.current_provider()
    logger.info("AI provider selected", provider=active.name, name=active.display_name)

    yield

    # Shutdown
    logger.info("Shutting down Rabbit API")
    await close_db()
    logger.info("Database connections closed")


def build_ai_router(app_settings: Settings) -> AIRouter:
    """Wire config, registry and retry policy into a router."""
    return AIRouter(
        config=RouterConfig.from_settings(app_settings),
        registry=build_registry(app_settings),
        retry_policy=RetryPolicy.from_settings(app_settings),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="AI-powered social media content generation",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.ai_router = build_ai_router(settings)
    app.state.content_store = SQLContentStore()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Wide Events middleware - canonical log line per request
    app.add_middleware(WideEventMiddleware)

    app.include_router(health.router, tags=["Health"])
    app.include_router(ai.router, tags=["AI"])
    app.include_router(content.router, tags=["Content"])
    app.include_router(posts.router, tags=["Posts"])

    # Exception Handlers
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are the client's fault: 400."""
        logger.warning("Validation error", url=str(request.url), errors=exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": {
                    "message": "Validation failed",
                    "type": "validation_error",
                    "details": jsonable_errors(exc),
                }
            }
        )

    @app.exception_handler(DatabaseError)
    async def database_exception_handler(request: Request, exc: DatabaseError):
        """Handle database errors"""
        logger.error("Database error", url=str(request.url), error=exc.message, exc_info=True)
        return JSONResponse(
            status_code=503,
            content={
                "success": False,
                "error": {
                    "message": "Database operation failed",
                    "type": "database_error",
                }
            }
        )

    @app.exception_handler(RabbitException)
    async def app_exception_handler(request: Request, exc: RabbitException):
        """Handle application exceptions; each class carries its status."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log("App error", url=str(request.url), type=exc.error_type, message=exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": exc.message,
                "error": {
                    "message": exc.message,
                    "type": exc.error_type,
                    "details": exc.details
                }
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions"""
        logger.error("Unexpected error", url=str(request.url), error=str(exc), exc_info=True)

        # Don't expose internal details in production
        message = str(exc) if settings.debug else "An unexpected error occurred"

        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "message": message,
                    "type": "internal_server_error"
                }
            }
        )

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the non-serialisable `ctx`/`input` payloads."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rabbit.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
