"""
FastAPI dependency injection for the poolfinder API
"""
from typing import Optional

from fastapi import Header, Request

from ..availability.engine import AvailabilityEngine
from ..config import Settings
from ..services.coordinator import SaveCoordinator
from ..services.gateway import PersistenceGateway
from ..utils.filters import FacilityFilter


def get_settings(request: Request) -> Settings:
    """Get application settings"""
    return request.app.state.settings


def get_coordinator(request: Request) -> SaveCoordinator:
    """Get the save coordinator built at startup"""
    return request.app.state.coordinator


def get_gateway(request: Request) -> PersistenceGateway:
    return request.app.state.gateway


def get_engine(request: Request) -> AvailabilityEngine:
    return request.app.state.engine


def get_facility_filter(request: Request) -> FacilityFilter:
    return request.app.state.facility_filter


def get_actor_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Id of the user making a change, passed by the front end"""
    return x_user_id
