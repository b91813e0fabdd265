"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adtax.api import analytics_router, config_router, keys_router, names_router
from adtax.api.schemas import ErrorResponse
from adtax.core.config import Settings, get_settings
from adtax.core.factory import ComponentFactory
from adtax.core.logging_config import setup_logging
from adtax.interfaces.store import StoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events for proper resource management.
    """
    factory: ComponentFactory = app.state.factory

    # Startup
    logger.info("Starting Ad Taxonomy API...")

    try:
        logger.info("Initializing key-value store...")
        await factory.get_store().initialize()
        logger.info("Key-value store initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize key-value store: {e}", exc_info=True)
        raise

    yield

    # Shutdown
    logger.info("Shutting down Ad Taxonomy API...")

    try:
        await factory.get_store().close()
        logger.info("Key-value store closed")
    except Exception as e:
        logger.error(f"Error closing key-value store: {e}", exc_info=True)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    try:
        settings = settings or get_settings()
        setup_logging(settings)

        app = FastAPI(
            title="Ad Taxonomy",
            description="Structured file names for ad creatives, with parsing and usage analytics",
            version="0.1.0",
            lifespan=lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        app.state.settings = settings
        app.state.factory = ComponentFactory(settings)

        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Include routers
        try:
            for router in (config_router, names_router, analytics_router, keys_router):
                app.include_router(router)
                logger.info(f"Registered {router.prefix} router")
        except Exception as e:
            logger.error(f"Failed to include router: {e}", exc_info=True)
            raise

        # Health check endpoint
        @app.get("/health", tags=["health"])
        async def health_check():
            """Health check endpoint for load balancers and monitoring."""
            return {
                "status": "healthy",
                "service": "adtax-api",
                "version": "0.1.0",
            }

        # Exception handlers
        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request, exc):
            """Handle Pydantic validation errors."""
            logger.warning(f"Validation error: {exc.errors()}")
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content=jsonable_encoder(
                    {
                        "detail": "Validation error",
                        "errors": exc.errors(),
                    }
                ),
            )

        @app.exception_handler(StoreError)
        async def store_exception_handler(request, exc):
            """Handle storage backend failures."""
            logger.error(f"Store error: {exc}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=ErrorResponse(
                    detail="Storage unavailable",
                    error_code="STORE_ERROR",
                ).model_dump(),
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request, exc):
            """Handle uncaught exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=ErrorResponse(
                    detail="Internal server error",
                    error_code="INTERNAL_ERROR",
                ).model_dump(),
            )

        logger.info("FastAPI application created successfully")
        return app

    except Exception as e:
        logger.error(f"Failed to create FastAPI app: {e}", exc_info=True)
        raise


# Create the app instance
try:
    app = create_app()
except Exception as e:
    logger.error(f"Fatal error creating app: {e}", exc_info=True)
    raise


if __name__ == "__main__":
    import uvicorn

    try:
        settings = get_settings()
        logger.info("Starting uvicorn server on port 8000...")
        uvicorn.run(
            "adtax.main:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            log_level=settings.log_level.lower(),
        )
    except Exception as e:
        logger.error(f"Failed to start uvicorn: {e}", exc_info=True)
        raise
