"""Storage backends for facility records and their history."""

from .base import FacilityStore
from .factory import StoreFactory, StoreType
from .local import LocalFacilityStore
from .postgres import PostgresFacilityStore

__all__ = [
    "FacilityStore",
    "LocalFacilityStore",
    "PostgresFacilityStore",
    "StoreFactory",
    "StoreType",
]
