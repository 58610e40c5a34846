"""
Custom exceptions for the poolfinder service
"""
from typing import Any


class PoolfinderError(Exception):
    """Base exception for poolfinder errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class StorageError(PoolfinderError):
    """Base exception for storage backend failures"""

    status_code = 503

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        operation: str | None = None,
        backend: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, error_code, details)
        self.operation = operation
        self.backend = backend

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["storage_info"] = {
            "operation": self.operation,
            "backend": self.backend
        }
        return result


class TransientBackendError(StorageError):
    """Primary store failure that was recovered through the fallback store"""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        backend: str | None = None,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "TRANSIENT_BACKEND_ERROR", operation, backend, details)
        self.cause = cause


class PermanentWriteFailure(StorageError):
    """Exception raised when neither store accepted a write or delete"""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        failures: list[str] | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "PERMANENT_WRITE_FAILURE", operation, None, details)
        self.failures = failures or []

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["failures"] = self.failures
        return result


class HistoryWriteFailure(StorageError):
    """Snapshot append failure; logged, never raised to callers of save"""

    def __init__(
        self,
        message: str,
        facility_id: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "HISTORY_WRITE_FAILURE", "append_snapshot", None, details)
        self.facility_id = facility_id


class FacilityNotFoundError(PoolfinderError):
    """Exception raised when a facility does not exist"""

    status_code = 404

    def __init__(self, facility_id: str):
        super().__init__(
            "Facility not found",
            "FACILITY_NOT_FOUND",
            {"facility_id": facility_id}
        )
        self.facility_id = facility_id


class SnapshotNotFoundError(PoolfinderError):
    """Exception raised when a version snapshot does not exist"""

    status_code = 404

    def __init__(self, facility_id: str, snapshot_id: str):
        super().__init__(
            "Snapshot not found",
            "SNAPSHOT_NOT_FOUND",
            {"facility_id": facility_id, "snapshot_id": snapshot_id}
        )
        self.facility_id = facility_id
        self.snapshot_id = snapshot_id


class ValidationError(PoolfinderError):
    """Exception raised when a facility payload is rejected"""

    status_code = 422

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "VALIDATION_FAILED", details)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["validation_info"] = {"field": self.field}
        return result


class ConfigurationError(PoolfinderError):
    """Exception raised when configuration is invalid"""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, "CONFIGURATION_ERROR", details)
        self.config_key = config_key

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_info"] = {"key": self.config_key}
        return result
