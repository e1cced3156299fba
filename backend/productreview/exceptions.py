"""Error types for the product review service.

Each error carries the HTTP status it maps to, so the API layer can render
every failure with one handler.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """Base exception for catalog and review errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class NotFoundError(CatalogError):
    """Raised when a referenced product or review does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} {entity_id} not found",
            status_code=404,
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(CatalogError):
    """Raised when input violates an ingress constraint (rating range, comment length, paging)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, details=details)


class StorageError(CatalogError):
    """Raised when the database is unreachable or a write fails.

    The surrounding transaction has been rolled back when this is raised.
    """

    def __init__(self, operation: str, error: Exception):
        super().__init__(
            message=f"Storage failure during {operation}: {error}",
            status_code=500,
            details={
                "operation": operation,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
        self.operation = operation
