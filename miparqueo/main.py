# =============================================================================
# MIPARQUEO BACKEND - MAIN APPLICATION
# =============================================================================
# File: main.py
# Description: FastAPI application entry point with lifecycle management
# =============================================================================

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from miparqueo.api.v1 import api_router
from miparqueo.api.middleware import (
    DatabaseGateMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
)
from miparqueo.core.config import Settings, settings as default_settings
from miparqueo.core.exceptions import ParkingSystemException, QueryError
from miparqueo.db.factory import database_initializer
from miparqueo.db.gate import InitializationGate


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.

    Handles startup and shutdown events:
    - Startup: Initialize the database right away when eager init is on;
      otherwise the first API request does it through the gate
    - Shutdown: Close all connections gracefully
    """
    settings: Settings = app.state.settings
    gate: InitializationGate = app.state.db_gate

    # STARTUP
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"Database: {settings.db_type}")

    if settings.eager_db_init:
        try:
            await gate.get()
        except ParkingSystemException as e:
            logger.error(f"Startup failed: {e.message}")
            raise

    yield  # Application runs here

    # SHUTDOWN
    logger.info(f"Shutting down {settings.app_name}")

    try:
        await gate.close()
    except Exception as e:
        logger.error(f"Shutdown error: {e}")

    logger.info(f"{settings.app_name} shutdown complete")


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_application(
    settings: Optional[Settings] = None,
    gate: Optional[InitializationGate] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings (defaults to the global instance)
        gate: Initialization gate; one is built from ``settings`` if omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or default_settings
    if gate is None:
        gate = InitializationGate(
            database_initializer(settings),
            timeout=settings.db_init_timeout,
        )

    app = FastAPI(
        title=settings.app_name,
        description="Parking reservation backend over SQLite or PostgreSQL",
        version=settings.app_version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db_gate = gate

    # =========================================================================
    # MIDDLEWARE STACK (last added = outermost)
    # =========================================================================

    # Database readiness (innermost - right before routing)
    app.add_middleware(DatabaseGateMiddleware)

    # Logging (captures request/response info)
    app.add_middleware(RequestLoggingMiddleware)

    # Request ID (adds tracking ID before logging reads it)
    app.add_middleware(RequestIDMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(ParkingSystemException)
    async def parking_exception_handler(
        request: Request,
        exc: ParkingSystemException,
    ) -> JSONResponse:
        """Handle custom application exceptions."""
        content = exc.to_dict()

        # Raw driver messages stay in the logs in production
        if isinstance(exc, QueryError) and settings.is_production:
            content["details"] = {}

        return JSONResponse(
            status_code=exc.status_code,
            content=content,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Handle standard HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "error_code": f"HTTP_{exc.status_code}",
                "message": exc.detail,
                "details": {},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception")

        # Don't expose internal errors in production
        if settings.is_production:
            message = "An internal error occurred"
        else:
            message = str(exc)

        return JSONResponse(
            status_code=500,
            content={
                "error": True,
                "error_code": "INTERNAL_ERROR",
                "message": message,
                "details": {},
            },
        )

    # =========================================================================
    # ROUTES
    # =========================================================================

    app.include_router(api_router)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "endpoints": {"health": "/api/health"},
        }

    return app


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = create_application()


# =============================================================================
# ENTRYPOINT
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "miparqueo.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.is_development,
        log_level=default_settings.log_level.lower(),
    )
