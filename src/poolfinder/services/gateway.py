"""Persistence gateway with primary-then-fallback routing."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from ..models.base import Backend, FacilityRecord, VersionSnapshot
from ..models.results import StoreResult
from ..stores.base import FacilityStore
from ..utils.exceptions import PermanentWriteFailure, TransientBackendError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GatewayConfig:
    """Routing switches for the gateway, fixed for the life of the process."""
    primary_enabled: bool = True
    fallback_enabled: bool = True


class PersistenceGateway:
    """
    One read/write contract over a primary and a secondary facility store.

    Every operation tries the primary store first. Any primary failure is
    logged and the operation is repeated against the secondary store; writes
    reach the secondary store only in that case, so the two stores are not
    kept consistent. Only a failure of both stores reaches the caller.
    """

    def __init__(
        self,
        primary: Optional[FacilityStore],
        secondary: Optional[FacilityStore],
        config: Optional[GatewayConfig] = None,
    ):
        self.primary = primary
        self.secondary = secondary
        self.config = config or GatewayConfig()
        self.fallback_count = 0
        self.last_backend: Backend = Backend.NONE

    @property
    def primary_active(self) -> bool:
        return self.primary is not None and self.config.primary_enabled

    @property
    def secondary_active(self) -> bool:
        return self.secondary is not None and self.config.fallback_enabled

    def _candidates(self) -> List[tuple[Backend, FacilityStore]]:
        candidates = []
        if self.primary_active:
            candidates.append((Backend.PRIMARY, self.primary))
        if self.secondary_active:
            candidates.append((Backend.SECONDARY, self.secondary))
        return candidates

    async def _route(
        self,
        operation: str,
        call: Callable[[FacilityStore], Awaitable[T]],
    ) -> tuple[Optional[StoreResult], List[str]]:
        failures = []
        for backend, store in self._candidates():
            try:
                value = await call(store)
            except Exception as e:
                failures.append(f"{store.name}: {e}")
                if backend == Backend.PRIMARY:
                    self.fallback_count += 1
                    error = TransientBackendError(
                        f"Primary store failed during {operation}",
                        operation=operation,
                        backend=store.name,
                        cause=e,
                    )
                    logger.warning(f"{error.message}, falling back: {e}")
                else:
                    logger.error(f"Secondary store failed during {operation}: {e}")
                continue

            if backend == Backend.SECONDARY:
                logger.info(f"{operation} served by secondary store")
            self.last_backend = backend
            return StoreResult(value=value, backend=backend), failures

        self.last_backend = Backend.NONE
        return None, failures

    async def read(self) -> StoreResult[List[FacilityRecord]]:
        """Read the whole collection; empty when no store can serve it."""
        result, failures = await self._route("read", lambda store: store.read_all())
        if result is None:
            logger.error(f"No store could serve read, returning empty collection ({failures})")
            return StoreResult(value=[], backend=Backend.NONE)
        return result

    async def write(self, record: FacilityRecord) -> StoreResult[None]:
        """
        Replace a facility in the first store that accepts it.

        Raises:
            PermanentWriteFailure: If no store accepted the write
        """
        return await self._mutate("write", lambda store: store.write(record))

    async def delete(self, facility_id: str) -> StoreResult[bool]:
        """
        Delete a facility; value tells whether it existed in the serving store.

        Raises:
            PermanentWriteFailure: If no store accepted the delete
        """
        return await self._mutate("delete", lambda store: store.delete(facility_id))

    async def append_snapshot(self, snapshot: VersionSnapshot) -> StoreResult[None]:
        return await self._mutate("append_snapshot", lambda store: store.append_snapshot(snapshot))

    async def list_snapshots(self, facility_id: str) -> StoreResult[List[VersionSnapshot]]:
        result, failures = await self._route(
            "list_snapshots", lambda store: store.list_snapshots(facility_id)
        )
        if result is None:
            logger.error(f"No store could list snapshots for {facility_id} ({failures})")
            return StoreResult(value=[], backend=Backend.NONE)
        return result

    async def _mutate(self, operation: str, call: Callable[[FacilityStore], Awaitable[Any]]) -> StoreResult:
        result, failures = await self._route(operation, call)
        if result is None:
            error = PermanentWriteFailure(
                f"All stores failed during {operation}",
                operation=operation,
                failures=failures,
            )
            logger.error(f"{error.message}: {failures}")
            raise error
        return result

    def status(self) -> dict:
        """Backend configuration and fallback statistics."""
        return {
            "primary": self.primary.name if self.primary_active else None,
            "secondary": self.secondary.name if self.secondary_active else None,
            "fallback_count": self.fallback_count,
            "last_backend": self.last_backend.value,
        }

    async def health_check(self) -> dict[str, bool]:
        """Reachability of each active store, keyed by role."""
        health = {}
        for backend, store in self._candidates():
            health[backend.value] = bool(await store.health_check())
        return health

    async def close(self):
        for store in (self.primary, self.secondary):
            if store is not None:
                await store.close()
