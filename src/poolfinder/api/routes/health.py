"""
Health check and system status routes
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from ...config import Settings
from ...services.gateway import PersistenceGateway
from ...utils.filters import FacilityFilter
from ..dependencies import get_facility_filter, get_gateway, get_settings

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_settings),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """Health check endpoint"""
    storage = gateway.status()
    reachable = await gateway.health_check()
    storage["reachable"] = reachable

    status = "healthy"
    if not reachable.get("primary") or storage["last_backend"] == "secondary":
        status = "degraded"
    if not any(reachable.values()):
        status = "unhealthy"

    return {
        "status": status,
        "service": settings.app_name,
        "version": settings.app_version,
        "timestamp": datetime.now().isoformat(),
        "storage": storage,
    }


@router.get("/stats")
async def get_stats(
    gateway: PersistenceGateway = Depends(get_gateway),
    facility_filter: FacilityFilter = Depends(get_facility_filter),
):
    """Fallback and search statistics"""
    return {
        "storage": gateway.status(),
        "search": facility_filter.get_statistics(),
    }
