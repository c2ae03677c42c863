"""Exception hierarchy for the inventory core.

Every error the services raise on purpose derives from InventoryException so
the API layer can translate it into a uniform JSON error body. Anything else
(database or cache failures) propagates untouched and ends up in the
catch-all 500 handler.

Error codes follow pattern: INV[HTTP-ish number]
- INV400: invalid argument (negative quantity or delta, bad sort field)
- INV404: entity not found
- INV409: uniqueness violation or delete blocked by dependents
- INV410: insufficient inventory for a decrease
- INV422: request payload failed field validation
"""

from __future__ import annotations

from typing import Any


class InventoryException(Exception):
    """Base exception for all inventory application errors."""

    error = "Bad Request"

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with message and metadata.

        Args:
            message: Human readable error message
            code: Unique error code (e.g., "INV404")
            status_code: HTTP status code (default: 400 Bad Request)
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the API error body (without timestamp/path)."""
        return {
            "status": self.status_code,
            "error": self.error,
            "message": self.message,
            "details": self.details or None,
        }


class NotFoundError(InventoryException):
    """Referenced entity id or natural key does not exist."""

    error = "Not Found"

    def __init__(self, entity: str, identifier: Any, field: str = "id"):
        super().__init__(
            message=f"{entity} not found with {field}: {identifier}",
            code="INV404",
            status_code=404,
            details={"entity": entity, field: identifier},
        )


class InvalidArgumentError(InventoryException):
    """Caller-supplied value violates a core precondition."""

    def __init__(self, message: str, **details: Any):
        super().__init__(
            message=message,
            code="INV400",
            status_code=400,
            details=details,
        )


class ValidationFailedError(InventoryException):
    """Request payload failed field validation before reaching the core."""

    def __init__(self, errors: dict[str, str]):
        super().__init__(
            message="Validation failed",
            code="INV422",
            status_code=400,
            details=errors,
        )


class ConflictError(InventoryException):
    """Duplicate natural key, or delete blocked by existing dependents."""

    error = "Conflict"

    def __init__(self, message: str, **details: Any):
        super().__init__(
            message=message,
            code="INV409",
            status_code=409,
            details=details,
        )


class InsufficientInventoryError(InventoryException):
    """Decrease would take inventory below zero."""

    def __init__(self, product_id: int, current_quantity: int, requested: int):
        message = (
            "Cannot decrease inventory below zero. "
            f"Current inventory: {current_quantity}, Requested decrease: {requested}"
        )
        super().__init__(
            message=message,
            code="INV410",
            status_code=400,
            details={
                "product_id": product_id,
                "current_quantity": current_quantity,
                "requested": requested,
            },
        )
        self.product_id = product_id
        self.current_quantity = current_quantity
        self.requested = requested
