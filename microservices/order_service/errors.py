"""
Order Service Errors

Error kinds, domain exceptions and the translator that turns any failure
into the uniform RpcError shape returned to callers.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Kinds of failure a caller can see"""
    INVALID_REFERENCE = "INVALID_REFERENCE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
    STORE_WRITE_FAILURE = "STORE_WRITE_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


STATUS_BY_KIND = {
    ErrorKind.INVALID_REFERENCE: 400,
    ErrorKind.INVALID_TRANSITION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.DEPENDENCY_UNAVAILABLE: 503,
    ErrorKind.STORE_WRITE_FAILURE: 500,
    ErrorKind.INTERNAL_ERROR: 500,
}


class RpcError(BaseModel):
    """Uniform remote error shape"""
    status: int
    message: str
    kind: ErrorKind

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> "RpcError":
        return cls(status=STATUS_BY_KIND[kind], message=message, kind=kind)


# ============================================================================
# Domain exceptions
# ============================================================================

class OrderServiceError(Exception):
    """Base exception for order service errors"""
    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_rpc_error(self) -> RpcError:
        return RpcError.of(self.kind, self.message)


class OrderNotFoundError(OrderServiceError):
    """Order not found error"""
    kind = ErrorKind.NOT_FOUND


class InvalidProductReferenceError(OrderServiceError):
    """Order references a product the catalog does not know"""
    kind = ErrorKind.INVALID_REFERENCE


class InvalidStatusTransitionError(OrderServiceError):
    """Invalid order state transition"""
    kind = ErrorKind.INVALID_TRANSITION


class DependencyUnavailableError(OrderServiceError):
    """Catalog or payment collaborator unreachable or timed out"""
    kind = ErrorKind.DEPENDENCY_UNAVAILABLE


class OrderValidationError(OrderServiceError):
    """Inbound message does not have the expected shape"""
    kind = ErrorKind.VALIDATION_ERROR


# ============================================================================
# Store-layer conditions (raised by the repository)
# ============================================================================

class RecordNotFoundError(Exception):
    """Update targeted a row that does not exist"""
    pass


class StoreWriteError(Exception):
    """Unexpected failure while writing to the store"""
    pass


# ============================================================================
# Translator
# ============================================================================

def translate_error(error: Exception, operation: Optional[str] = None) -> RpcError:
    """
    Map any failure onto the uniform RpcError shape.

    Domain errors pass through with their own kind and message. Store
    conditions and unexpected errors are logged with their cause and
    replaced by a sanitized message.
    """
    if isinstance(error, OrderServiceError):
        return error.to_rpc_error()

    context = f" during {operation}" if operation else ""

    if isinstance(error, RecordNotFoundError):
        logger.warning(f"Record missing on update{context}: {error}")
        return RpcError.of(ErrorKind.BAD_REQUEST, "Invalid data provided")

    if isinstance(error, StoreWriteError):
        logger.error(f"Store write failed{context}: {error}", exc_info=error)
        return RpcError.of(ErrorKind.STORE_WRITE_FAILURE, "Failed to persist order")

    logger.error(f"Unexpected error{context}: {error}", exc_info=error)
    return RpcError.of(ErrorKind.INTERNAL_ERROR, "Internal server error")
