"""PostgreSQL database connection management."""

import logging
from contextlib import asynccontextmanager

import asyncpg

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages PostgreSQL database connections."""

    def __init__(
        self,
        database_url: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 10.0,
    ):
        self.database_url = database_url
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.pool: asyncpg.Pool | None = None
        self._initialized = False

    async def initialize(self):
        """Initialize database connection pool."""
        if self._initialized:
            logger.warning("Database already initialized")
            return

        try:
            self.pool = await asyncpg.create_pool(
                self.database_url,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
                server_settings={
                    'application_name': 'poolfinder-service'
                }
            )

            # Test connection
            async with self.pool.acquire() as conn:
                await conn.fetchval('SELECT 1')

            self._initialized = True
            logger.info("PostgreSQL connection pool initialized")

        except Exception as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    async def close(self):
        """Close database connection pool."""
        if self.pool:
            await self.pool.close()
            self._initialized = False
            logger.info("PostgreSQL connection pool closed")

    @asynccontextmanager
    async def get_connection(self):
        """Get a database connection from the pool."""
        if not self._initialized or not self.pool:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        async with self.pool.acquire() as connection:
            yield connection

    async def execute_query(self, query: str, *args):
        """Execute a query and return results."""
        async with self.get_connection() as conn:
            return await conn.fetch(query, *args)

    async def execute_command(self, query: str, *args):
        """Execute a command (INSERT, UPDATE, DELETE)."""
        async with self.get_connection() as conn:
            return await conn.execute(query, *args)

    @property
    def is_initialized(self) -> bool:
        """Check if database is initialized."""
        return self._initialized and self.pool is not None

    async def health_check(self) -> bool:
        """Check database health."""
        if not self.is_initialized:
            return False
        try:
            async with self.get_connection() as conn:
                result = await conn.fetchval('SELECT 1')
                return result == 1
        except (RuntimeError, OSError, asyncpg.PostgresError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False
