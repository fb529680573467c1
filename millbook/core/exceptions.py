"""
Domain exceptions for the Millbook application.

Every command either returns its record or raises one of these. A raised
error always means the store is unchanged.
"""

from typing import Any


class MillbookError(Exception):
    """Base exception for all Millbook errors."""

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
        """Convert to dictionary for the presentation layer."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(MillbookError):
    """Base exception for storage operations."""

    pass


class SchemaError(StorageError):
    """The database schema cannot be brought up to date."""

    def __init__(self, message: str, version: str | None = None, **details: Any):
        if version is not None:
            details["version"] = version
        super().__init__(message, code="SCHEMA_ERROR", details=details)


class StockVersionConflictError(StorageError):
    """Finished stock counter changed between read and write."""

    def __init__(self, product: str, expected_version: int):
        super().__init__(
            f"Stock counter for {product} changed concurrently "
            f"(expected version {expected_version})",
            code="STOCK_VERSION_CONFLICT",
            details={"product": product, "expected_version": expected_version},
        )


class NotFoundError(MillbookError):
    """Requested record does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity} not found: {entity_id}",
            code="NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, user_ref: str):
        super().__init__("User", user_ref)


class SaleNotFoundError(NotFoundError):
    def __init__(self, sale_id: str):
        super().__init__("Sale", sale_id)


class AdjustmentNotFoundError(NotFoundError):
    def __init__(self, adjustment_id: str):
        super().__init__("Adjustment", adjustment_id)


# Identity Exceptions
class AuthError(MillbookError):
    """Base exception for identity and permission failures."""

    pass


class ForbiddenError(AuthError):
    """Actor's role does not allow the action."""

    def __init__(self, action: str, role: str):
        super().__init__(
            f"Role {role} is not allowed to {action}",
            code="FORBIDDEN",
            details={"action": action, "role": role},
        )


class InvalidCredentialsError(AuthError):
    def __init__(self, login_id: str):
        super().__init__(
            "Invalid credentials",
            code="INVALID_CREDENTIALS",
            details={"login_id": login_id},
        )


class AccountDisabledError(AuthError):
    def __init__(self, login_id: str):
        super().__init__(
            f"Account disabled: {login_id}",
            code="ACCOUNT_DISABLED",
            details={"login_id": login_id},
        )


class DuplicateLoginIdError(AuthError):
    def __init__(self, login_id: str):
        super().__init__(
            f"Login ID already exists: {login_id}",
            code="DUPLICATE_LOGIN_ID",
            details={"login_id": login_id},
        )


class WeakPasswordError(AuthError):
    def __init__(self, min_length: int):
        super().__init__(
            f"Password must be at least {min_length} characters long",
            code="WEAK_PASSWORD",
            details={"min_length": min_length},
        )


class IncorrectPasswordError(AuthError):
    def __init__(self, user_id: str):
        super().__init__(
            "Incorrect current password",
            code="INCORRECT_PASSWORD",
            details={"user_id": user_id},
        )


class SystemAlreadyInitializedError(AuthError):
    def __init__(self):
        super().__init__("System already initialized", code="ALREADY_INITIALIZED")


# Stock Exceptions
class StockError(MillbookError):
    """Base exception for stock movements."""

    pass


class InsufficientStockError(StockError):
    """A movement would take a counter below zero."""

    def __init__(
        self,
        product: str,
        requested: float,
        available: float,
        code: str = "INSUFFICIENT_STOCK",
    ):
        super().__init__(
            f"Insufficient {product} stock: requested {requested}, available {available}",
            code=code,
            details={
                "product": product,
                "requested": requested,
                "available": available,
            },
        )


class InsufficientRawStockError(InsufficientStockError):
    def __init__(self, requested: float, available: float):
        super().__init__(
            "raw",
            requested,
            available,
            code="INSUFFICIENT_RAW_STOCK",
        )


class AdjustmentApprovalFailedError(InsufficientStockError):
    """Approving the adjustment would make its product negative."""

    def __init__(self, adjustment_id: str, product: str, requested: float, available: float):
        super().__init__(product, requested, available, code="APPROVAL_FAILED")
        self.message = (
            f"Adjustment {adjustment_id} was not approved: {self.message}"
        )
        self.args = (self.message,)
        self.details["adjustment_id"] = adjustment_id


# Workflow Exceptions
class WorkflowError(MillbookError):
    """Base exception for invalid state transitions."""

    pass


class AlreadyProcessedError(WorkflowError):
    def __init__(self, adjustment_id: str, status: str):
        super().__init__(
            f"Adjustment {adjustment_id} already processed ({status})",
            code="ALREADY_PROCESSED",
            details={"adjustment_id": adjustment_id, "status": status},
        )


class AlreadyCancelledError(WorkflowError):
    def __init__(self, sale_id: str):
        super().__init__(
            f"Sale {sale_id} is already cancelled",
            code="ALREADY_CANCELLED",
            details={"sale_id": sale_id},
        )


# Validation Exceptions
class ValidationError(MillbookError):
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


class MissingFieldError(ValidationError):
    def __init__(self, field: str):
        super().__init__(field=field, message="is required")
        self.code = "MISSING_FIELD"


class InvalidDurationError(ValidationError):
    """Shift runtime after breakdown is zero or negative."""

    def __init__(self, runtime_minutes: int):
        super().__init__(
            field="runtime_minutes",
            message="runtime after breakdown must be positive",
            value=runtime_minutes,
        )
        self.code = "INVALID_DURATION"
        self.details["runtime_minutes"] = runtime_minutes
