"""Error taxonomy shared by every bounded context.

Business-rule failures are Protean ``ValidationError`` subclasses, so they
roll back the Unit of Work they are raised in and carry the usual
``{field: [message, ...]}`` messages. Each one also carries a machine-readable
``kind`` so callers (HTTP handlers, server actions, other services) can tell
failures apart without parsing messages.

Lookups that miss raise Protean's ``ObjectNotFoundError``; storage and
transport failures surface as ``TransactionError`` / ``DatabaseError`` and are
reported as ``INTERNAL`` without raw driver text.
"""

from enum import Enum

from protean.exceptions import (
    DatabaseError,
    ExpectedVersionError,
    ObjectNotFoundError,
    TransactionError,
    ValidationError,
)


class ErrorKind(Enum):
    OUT_OF_STOCK = "OUT_OF_STOCK"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    WINDOW_EXPIRED = "WINDOW_EXPIRED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class StoreError(ValidationError):
    """A ValidationError that names which business rule refused the operation."""

    kind = ErrorKind.VALIDATION_ERROR
    default_field = "_entity"

    def __init__(self, messages: dict[str, list[str]] | str | None = None):
        if messages is None:
            messages = {self.default_field: [self.kind.value.replace("_", " ").capitalize()]}
        elif isinstance(messages, str):
            messages = {self.default_field: [messages]}
        super().__init__(messages)


class OutOfStockError(StoreError):
    kind = ErrorKind.OUT_OF_STOCK
    default_field = "quantity"

    def __init__(self, variant_id: str, requested: int, available: int):
        self.variant_id = variant_id
        self.requested = requested
        self.available = available
        super().__init__(
            {
                "quantity": [
                    f"Insufficient stock for variant {variant_id}: {available} available, {requested} requested"
                ]
            }
        )


class UnauthorizedError(StoreError):
    kind = ErrorKind.UNAUTHORIZED
    default_field = "email"


class WindowExpiredError(StoreError):
    kind = ErrorKind.WINDOW_EXPIRED
    default_field = "created_at"


class InvalidTransitionError(StoreError):
    kind = ErrorKind.INVALID_TRANSITION
    default_field = "status"


def error_kind(exc: Exception) -> ErrorKind:
    """Classify any exception raised by a storefront operation."""
    if isinstance(exc, StoreError):
        return exc.kind
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION_ERROR
    if isinstance(exc, ObjectNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, ExpectedVersionError):
        # Lost a compare-and-set on the aggregate version
        return ErrorKind.INVALID_TRANSITION
    return ErrorKind.INTERNAL


_STATUS_CODES = {
    ErrorKind.OUT_OF_STOCK: 409,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.WINDOW_EXPIRED: 400,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


def status_code_for(kind: ErrorKind) -> int:
    return _STATUS_CODES[kind]


def error_payload(exc: Exception) -> dict:
    """``{"error": KIND, "messages": {...}}`` for any storefront exception."""
    kind = error_kind(exc)
    if isinstance(exc, ValidationError) and isinstance(exc.messages, dict):
        messages = exc.messages
    elif kind == ErrorKind.NOT_FOUND:
        messages = {"_entity": [str(exc)]}
    elif kind == ErrorKind.INVALID_TRANSITION:
        messages = {"status": ["The record was modified concurrently; reload and retry"]}
    else:
        messages = {"_entity": ["Internal error"]}
    return {"error": kind.value, "messages": messages}


__all__ = [
    "DatabaseError",
    "ErrorKind",
    "InvalidTransitionError",
    "ObjectNotFoundError",
    "OutOfStockError",
    "StoreError",
    "TransactionError",
    "UnauthorizedError",
    "ValidationError",
    "WindowExpiredError",
    "error_kind",
    "error_payload",
    "status_code_for",
]
