"""Persistence, history and save coordination services."""

from .coordinator import SaveCoordinator
from .gateway import GatewayConfig, PersistenceGateway
from .history import VersionHistoryStore
from .seed import sample_facilities, seed_if_empty

__all__ = [
    "GatewayConfig",
    "PersistenceGateway",
    "SaveCoordinator",
    "VersionHistoryStore",
    "sample_facilities",
    "seed_if_empty",
]
