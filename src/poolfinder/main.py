"""Main FastAPI application for the poolfinder service."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.middleware import LoggingMiddleware
from .api.routes import facilities, health
from .availability.engine import AvailabilityEngine
from .config import Settings, settings as default_settings
from .services.coordinator import SaveCoordinator
from .services.gateway import GatewayConfig, PersistenceGateway
from .services.history import VersionHistoryStore
from .services.seed import seed_if_empty
from .stores.factory import StoreFactory
from .utils.exceptions import ConfigurationError, PoolfinderError
from .utils.filters import FacilityFilter
from .utils.logger import get_logger

logger = get_logger()


async def build_gateway(settings: Settings) -> PersistenceGateway:
    """Connect the configured stores and put the gateway in front of them."""
    is_valid, problems = StoreFactory.validate_environment(settings)
    if problems:
        logger.log_warning(f"Storage configuration issues: {problems}")
    if not is_valid:
        raise ConfigurationError(
            "No storage backend enabled",
            config_key="FALLBACK_ENABLED",
            details={"problems": problems},
        )

    primary = await StoreFactory.create_primary(settings)
    secondary = StoreFactory.create_secondary(settings)
    return PersistenceGateway(
        primary,
        secondary,
        GatewayConfig(
            primary_enabled=settings.primary_enabled,
            fallback_enabled=settings.fallback_enabled,
        ),
    )


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[PersistenceGateway] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use instead of the environment
        gateway: Ready-made gateway; stores are built from settings when omitted
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle."""
        # Startup
        logger.log_info(f"Starting {settings.app_name} service")

        app_gateway = gateway or await build_gateway(settings)
        history = VersionHistoryStore(app_gateway, timeout_seconds=settings.history_timeout_seconds)
        coordinator = SaveCoordinator(app_gateway, history)
        engine = AvailabilityEngine()

        app.state.settings = settings
        app.state.gateway = app_gateway
        app.state.coordinator = coordinator
        app.state.engine = engine
        app.state.facility_filter = FacilityFilter(engine)

        if settings.seed_sample_data:
            try:
                seeded = await seed_if_empty(coordinator)
                if seeded:
                    logger.log_info(f"Loaded {seeded} sample facilities")
            except PoolfinderError as e:
                logger.log_error("Failed to seed sample facilities", error=e)

        storage = app_gateway.status()
        logger.log_info(f"Storage ready: primary={storage['primary']} secondary={storage['secondary']}")

        yield

        # Shutdown
        logger.log_info(f"Shutting down {settings.app_name} service")
        await app_gateway.close()

    app = FastAPI(
        title=settings.app_name,
        description="Swimming facility directory with free-swim availability and version history",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Add logging middleware first
    app.add_middleware(LoggingMiddleware)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PoolfinderError)
    async def poolfinder_error_handler(request: Request, exc: PoolfinderError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Include routers
    app.include_router(health.router)
    app.include_router(facilities.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "healthy",
            "endpoints": {
                "/api/facilities": "List facilities (region, q, available_only, lat/lng, radius_km)",
                "/api/facilities/{id}": "Get, replace or delete a facility",
                "/api/facilities/{id}/availability": "Free-swim availability at a given time",
                "/api/facilities/{id}/visibility": "Show or hide a facility",
                "/api/facilities/{id}/history": "Prior versions of a facility",
                "/api/facilities/{id}/history/{snapshot_id}/restore": "Restore a prior version",
                "/health": "Service and storage health",
                "/stats": "Fallback and search statistics",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "poolfinder.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )
