"""
Domain exceptions for the MRO service.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class MROError(Exception):
    """Base exception for all MRO errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Auth Exceptions
class UnauthenticatedError(MROError):
    """No valid session accompanies the request."""

    def __init__(self, reason: str = "Authentication required"):
        super().__init__(reason, code="UNAUTHENTICATED")


class PermissionDeniedError(MROError):
    """Authenticated caller lacks a required permission."""

    def __init__(self, missing: list[str]):
        super().__init__(
            f"Missing permissions: {', '.join(sorted(missing))}",
            code="PERMISSION_DENIED",
            details={"missing": sorted(missing)},
        )


# Lookup Exceptions
class NotFoundError(MROError):
    """Entity absent or not owned by the caller's company."""

    pass


class StockItemNotFoundError(NotFoundError):
    """Stock item not found for this company."""

    def __init__(self, item_id: str):
        super().__init__(
            "Stock inventory record not found",
            code="STOCK_ITEM_NOT_FOUND",
            details={"stock_item_id": item_id},
        )


class WheelRotationNotFoundError(NotFoundError):
    """Wheel rotation asset not found for this company."""

    def __init__(self, wheel_id: str):
        super().__init__(
            "Wheel rotation not found",
            code="WHEEL_ROTATION_NOT_FOUND",
            details={"wheel_rotation_id": wheel_id},
        )


# Storage Exceptions
class StorageError(MROError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Validation Exceptions
class ValidationError(MROError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(ValidationError):
    """Requested usage quantity is not a positive whole number."""

    def __init__(self, value: Any):
        super().__init__(
            field="usedQuantity",
            message="Used quantity must be a positive number",
            value=value,
        )
        self.message = "Used quantity must be a positive number"
        self.code = "INVALID_QUANTITY"
        self.args = (self.message,)


class InvalidRotationError(ValidationError):
    """Wheel position is outside the 0-359 degree range."""

    def __init__(self, value: Any):
        super().__init__(
            field="newPosition",
            message="Position must be a whole number of degrees between 0 and 359",
            value=value,
        )
        self.code = "INVALID_ROTATION"


class InsufficientQuantityError(MROError):
    """Requested usage exceeds the quantity on hand."""

    def __init__(self, stock_item_id: str, available: int, requested: int):
        super().__init__(
            f"Insufficient quantity. Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_QUANTITY",
            details={
                "stock_item_id": stock_item_id,
                "available": available,
                "requested": requested,
            },
        )
        self.available = available
        self.requested = requested


class LedgerInconsistencyError(MROError):
    """Usage history does not replay to the item's current quantity."""

    def __init__(self, stock_item_id: str, reason: str):
        super().__init__(
            f"Usage ledger for {stock_item_id} is inconsistent: {reason}",
            code="LEDGER_INCONSISTENT",
            details={"stock_item_id": stock_item_id, "reason": reason},
        )


class ConfigurationError(MROError):
    """Configuration error."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")
