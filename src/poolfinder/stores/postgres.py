"""PostgreSQL facility store (primary backend)."""

import logging
from typing import List

from ..database.connection import DatabaseManager
from ..models.base import FacilityRecord, VersionSnapshot
from .base import FacilityStore

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS facilities (
        id TEXT PRIMARY KEY,
        data JSONB NOT NULL,
        is_public BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS facility_history (
        id TEXT PRIMARY KEY,
        facility_id TEXT NOT NULL,
        data JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    );
    """,
    "CREATE INDEX IF NOT EXISTS ix_facilities_created ON facilities(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS ix_history_facility ON facility_history(facility_id, created_at DESC);",
)


class PostgresFacilityStore(FacilityStore):
    """
    Stores each facility as a JSONB document keyed by id.

    History retention is left to the database owner; no cap is applied here.
    """

    name = "postgres"
    history_limit = None

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    async def ensure_schema(self):
        """Create tables if they don't exist."""
        async with self.db.get_connection() as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)
        logger.info("Facility schema ready")

    async def read_all(self) -> List[FacilityRecord]:
        rows = await self.db.execute_query(
            "SELECT data FROM facilities ORDER BY created_at DESC"
        )
        return [FacilityRecord.model_validate_json(row['data']) for row in rows]

    async def write(self, record: FacilityRecord) -> None:
        await self.db.execute_command(
            """
            INSERT INTO facilities (id, data, is_public, created_at)
            VALUES ($1, $2::jsonb, $3, COALESCE($4::timestamptz, NOW()))
            ON CONFLICT (id) DO UPDATE
            SET data = EXCLUDED.data,
                is_public = EXCLUDED.is_public,
                updated_at = NOW()
            """,
            record.id,
            record.model_dump_json(),
            record.is_public,
            record.created_at,
        )

    async def delete(self, facility_id: str) -> bool:
        status = await self.db.execute_command(
            "DELETE FROM facilities WHERE id = $1", facility_id
        )
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return status.split()[-1] != "0"

    async def append_snapshot(self, snapshot: VersionSnapshot) -> None:
        await self.db.execute_command(
            """
            INSERT INTO facility_history (id, facility_id, data, created_at)
            VALUES ($1, $2, $3::jsonb, $4)
            """,
            snapshot.id,
            snapshot.facility_id,
            snapshot.data.model_dump_json(),
            snapshot.created_at,
        )

    async def list_snapshots(self, facility_id: str) -> List[VersionSnapshot]:
        rows = await self.db.execute_query(
            """
            SELECT id, facility_id, data, created_at
            FROM facility_history
            WHERE facility_id = $1
            ORDER BY created_at DESC
            """,
            facility_id,
        )
        return [
            VersionSnapshot(
                id=row['id'],
                facility_id=row['facility_id'],
                data=FacilityRecord.model_validate_json(row['data']),
                created_at=row['created_at'],
            )
            for row in rows
        ]

    async def health_check(self) -> bool:
        return await self.db.health_check()

    async def close(self):
        await self.db.close()
