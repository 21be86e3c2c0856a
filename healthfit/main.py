# ==============================================================================
# MAIN APPLICATION - FastAPI Entry Point
# ==============================================================================
# Application factory with lifespan events, middleware, and routing
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from healthfit.api.router import build_api_router
from healthfit.core.exceptions import AppException, ValidationError
from healthfit.core.logger import setup_logging
from healthfit.core.settings import Settings, settings
from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter
from healthfit.database.factory import DatabaseFactory
from healthfit.entities.catalogue import build_registry
from healthfit.entities.registry import EntityRegistry
from healthfit.middleware.request_logger import RequestLoggerMiddleware

logger = logging.getLogger(__name__)


# ==============================================================================
# LIFESPAN MANAGEMENT
# ==============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Connect the adapter (creates tables / indexes)
    - Shutdown: Close database connections
    """
    config: Settings = app.state.settings
    adapter: BaseDatabaseAdapter = app.state.adapter

    # Startup
    logger.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")
    logger.info(f"Environment: {config.ENVIRONMENT}")
    logger.info(f"Database: {config.DATABASE_TYPE}")

    try:
        await DatabaseFactory.initialize(adapter)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        # Keep serving in development so /api/health reports the outage
        if config.is_production:
            raise

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await DatabaseFactory.shutdown(adapter)
    logger.info("Application shutdown complete")


# ==============================================================================
# APPLICATION FACTORY
# ==============================================================================

def create_app(
    registry: Optional[EntityRegistry] = None,
    adapter: Optional[BaseDatabaseAdapter] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        registry: Entities to serve (defaults to the built-in catalogue)
        adapter: Storage adapter (defaults to the configured backend)
        app_settings: Settings override (defaults to the environment)

    Returns:
        Configured FastAPI application instance
    """
    config = app_settings or settings
    setup_logging(level=config.LOG_LEVEL, fmt=config.LOG_FORMAT)

    registry = registry if registry is not None else build_registry()
    if adapter is None:
        adapter = DatabaseFactory.create_adapter(config=config)
    DatabaseFactory.register_entities(adapter, registry)

    app = FastAPI(
        title=config.API_TITLE,
        description=config.API_DESCRIPTION,
        version=config.APP_VERSION,
        debug=config.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if config.DEBUG else None,
        redoc_url="/redoc" if config.DEBUG else None,
        openapi_url="/openapi.json" if config.DEBUG else None,
    )
    app.state.settings = config
    app.state.registry = registry
    app.state.adapter = adapter

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.REQUEST_LOGGING_ENABLED:
        app.add_middleware(RequestLoggerMiddleware)

    # Register exception handlers
    register_exception_handlers(app)

    # Include routers; the route set is fixed from here on
    app.include_router(build_api_router(registry, prefix=config.API_PREFIX))
    registry.freeze()

    # Register root endpoint
    register_root_endpoint(app)

    return app


# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================

def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        """Handle application exceptions."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc!r}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed or missing JSON body."""
        error = ValidationError(message="Request body must be a JSON object")
        error.details["request_errors"] = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error.to_dict(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")

        if app.state.settings.DEBUG:
            detail = str(exc)
        else:
            detail = "An unexpected error occurred"

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": detail,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": detail,
                    "details": {},
                },
            },
        )


# ==============================================================================
# ROOT ENDPOINT
# ==============================================================================

def register_root_endpoint(app: FastAPI) -> None:

    @app.get(
        "/",
        tags=["Health"],
        summary="Root endpoint",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API info."""
        config: Settings = app.state.settings
        return {
            "name": config.APP_NAME,
            "version": config.APP_VERSION,
            "docs": "/docs" if config.DEBUG else "Disabled in production",
            "health": f"{config.API_PREFIX}/health",
            "resources": app.state.registry.names(),
        }


# Create application instance
app = create_app()


# ==============================================================================
# DEVELOPMENT RUNNER
# ==============================================================================

def run() -> None:
    """Serve `app` with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        "healthfit.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
