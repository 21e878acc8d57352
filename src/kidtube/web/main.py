"""FastAPI application factory and entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

import kidtube
from kidtube.common.logging_config import setup_logging

from .dependencies import get_api_settings
from .middleware import RequestLoggingMiddleware, register_exception_handlers
from .schemas.common import HealthCheckResponse
from .settings import APISettings, get_settings

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: Configure kidtube (logging, database and migrations)
    - Shutdown: Close the database connection

    Note: In test mode, kidtube._config and kidtube._repository are
    pre-configured by test fixtures, so we skip initialization.
    """
    settings: APISettings = app.state.settings

    logger.info("api_starting", host=settings.host, port=settings.port)

    already_configured = kidtube._config is not None and kidtube._repository is not None

    if not already_configured:
        await kidtube.configure()
    else:
        logger.info("api_using_existing_config")

    if settings.multi_tenant:
        logger.info(
            "api_multi_tenant",
            verifier="jwks" if settings.jwks_url else "shared_secret",
        )
    else:
        logger.info("api_single_tenant", note="All requests share one unauthenticated collection")

    logger.info("api_ready", version=kidtube.__version__, debug=settings.debug)

    yield

    logger.info("api_shutting_down")

    # Close database (only if we initialized)
    if not already_configured:
        await kidtube.shutdown()


def create_app(settings: Optional[APISettings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    This factory function creates the app with:
    - OpenAPI metadata (title, version, description)
    - CORS middleware
    - Request logging middleware (if enabled)
    - Exception handlers for service and database errors
    - Health check endpoint

    Args:
        settings: API settings (defaults to the environment, KIDTUBE_API_*)

    Returns:
        Configured FastAPI application instance

    Example:
        from fastapi.testclient import TestClient
        from kidtube.web import create_app

        client = TestClient(create_app(APISettings(multi_tenant=False)))
    """
    if settings is None:
        settings = get_settings()

    # Setup logging before creating app
    config = kidtube.get_config()
    setup_logging(config)

    app = FastAPI(
        title="KidTube API",
        version=kidtube.__version__,
        description="""Curated YouTube collections for children.
Parents bookmark videos by URL or ID; the child's player page lists them.

## Authentication

In multi-tenant mode (`KIDTUBE_API_MULTI_TENANT=true`, the default), routes that
change a collection require a Bearer token from the identity provider:

```
Authorization: Bearer <your-jwt-token>
```

The token's `sub` claim identifies the collection owner.
""",
        openapi_url=settings.openapi_url,
        openapi_tags=[
            {
                "name": "Health",
                "description": "Health check and status endpoints",
            },
            {
                "name": "Videos",
                "description": "Bookmark, rename, remove and list videos; popular videos",
            },
            {
                "name": "Child Profiles",
                "description": "The child's name and birth date shown on the player page",
            },
        ],
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.log_requests:
        app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    @app.get(
        "/api/health",
        tags=["Health"],
        summary="Health check",
        response_model=HealthCheckResponse,
        response_description="Health status of the API",
    )
    async def health_check(
        settings: APISettings = Depends(get_api_settings),
    ) -> HealthCheckResponse:
        """Check API health status."""
        return HealthCheckResponse(
            status="ok",
            message="Server is running",
            version=kidtube.__version__,
            multi_tenant=settings.multi_tenant,
        )

    from .routes import profiles, videos

    app.include_router(videos.router)
    app.include_router(profiles.router)

    logger.info("api_app_created", routes=len(app.routes))

    return app


def run() -> None:
    """
    Run the API server with uvicorn.

    This is the entry point for the kidtube-api script.
    """
    settings = get_settings()

    uvicorn.run(
        "kidtube.web.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
