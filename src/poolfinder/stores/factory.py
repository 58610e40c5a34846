"""Store factory for building the configured backends."""

import logging
from enum import Enum

from ..config import Settings
from ..database.connection import DatabaseManager
from .base import FacilityStore
from .local import LocalFacilityStore
from .postgres import PostgresFacilityStore

logger = logging.getLogger(__name__)


class StoreType(str, Enum):
    """Supported storage backends."""
    POSTGRES = "postgres"
    LOCAL = "local"


class StoreFactory:
    """Factory for creating facility stores from settings."""

    @staticmethod
    async def create_primary(settings: Settings) -> FacilityStore | None:
        """
        Create and connect the primary store.

        Returns:
            Connected PostgreSQL store, or None if not configured or unreachable
        """
        if not settings.primary_configured:
            logger.warning("Primary store not configured, using local store only")
            return None

        db_manager = DatabaseManager(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )
        try:
            await db_manager.initialize()
            store = PostgresFacilityStore(db_manager)
            await store.ensure_schema()
        except Exception as e:
            logger.error(f"Failed to connect primary store: {e}")
            await db_manager.close()
            return None

        logger.info("Created PostgreSQL primary store")
        return store

    @staticmethod
    def create_secondary(settings: Settings) -> FacilityStore | None:
        """Create the local fallback store, or None when disabled."""
        if not settings.fallback_enabled:
            logger.warning("Fallback store disabled")
            return None

        logger.info(f"Creating local store: {settings.local_store_path or 'in-memory'}")
        return LocalFacilityStore(settings.local_store_path, history_limit=settings.history_limit)

    @staticmethod
    def get_supported_types() -> list[str]:
        """Get list of supported store types."""
        return [t.value for t in StoreType]

    @staticmethod
    def validate_environment(settings: Settings) -> tuple[bool, list[str]]:
        """
        Validate that at least one backend can be built.

        Returns:
            Tuple of (is_valid, problems)
        """
        problems = []
        if settings.primary_enabled and not settings.database_url:
            problems.append("DATABASE_URL")
        if not settings.primary_configured and not settings.fallback_enabled:
            problems.append("no storage backend enabled")
        return settings.primary_configured or settings.fallback_enabled, problems
