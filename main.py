"""
PeopleDesk - Mock Backend Entry Point

FastAPI application that serves every HR resource from the in-memory
simulation over the same HTTP contract the live backend exposes. The live
facades (USE_MOCK=false) can be pointed at it for local development.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from peopledesk import __version__
from peopledesk.config import Settings, settings
from peopledesk.routers import build_resource_router
from peopledesk.services.resource_facade import no_latency
from peopledesk.services.resources import RESOURCE_DEFINITIONS, build_resource_facades
from peopledesk.utils.error_handling import setup_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Handles startup and shutdown events.
    """
    app_settings: Settings = app.state.settings
    logger.info(f"Starting {app_settings.app_name}...")
    logger.info(f"Environment: {app_settings.app_env}")
    logger.info(f"Serving {len(RESOURCE_DEFINITIONS)} resources under {app_settings.api_prefix}")

    yield

    logger.info(f"Shutting down {app_settings.app_name}...")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the mock backend application.

    The API is the backend itself, so it always runs simulated facades with
    no artificial latency, whatever USE_MOCK says.
    """
    app_settings = app_settings or settings

    application = FastAPI(
        title=app_settings.app_name,
        description="In-memory HR backend: payroll, leave, attendance, benefits, assets and expenses",
        version=__version__,
        docs_url=f"{app_settings.api_prefix}/docs" if app_settings.is_development else None,
        redoc_url=f"{app_settings.api_prefix}/redoc" if app_settings.is_development else None,
        lifespan=lifespan,
    )
    application.state.settings = app_settings
    application.state.facades = build_resource_facades(
        app_settings.model_copy(update={"use_mock": True}),
        delay=no_latency,
    )

    # Configure CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Standard error envelope for every AppException
    setup_exception_handlers(application)

    @application.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "app": app_settings.app_name,
            "version": __version__,
            "environment": app_settings.app_env,
        }

    # ===========================================
    # RESOURCE ROUTERS
    # ===========================================

    for definition in RESOURCE_DEFINITIONS.values():
        application.include_router(
            build_resource_router(definition),
            prefix=f"{app_settings.api_prefix}{definition.path}",
            tags=[f"{definition.resource_name}s"],
        )

    return application


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
    )
