"""Typed errors raised by the POS core.

Every error carries a human-readable message plus the offending field or
quantities, so the HTTP layer can map it to a status code without parsing text.
"""

import uuid
from typing import Any, Optional


class PosError(Exception):
    """Base exception for POS domain errors."""

    code = "pos_error"
    status_code = 400

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict:
        payload = {"detail": self.message, "code": self.code}
        payload.update({k: _jsonable(v) for k, v in self.context.items()})
        return payload


class ValidationError(PosError):
    """Malformed input. Raised before any write."""

    code = "validation_error"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.field = field


class ProductNotFound(PosError):
    code = "product_not_found"
    status_code = 404

    def __init__(self, product_id: uuid.UUID):
        super().__init__(f"Product with ID {product_id} not found", product_id=product_id)
        self.product_id = product_id


class InsufficientStock(PosError):
    code = "insufficient_stock"
    status_code = 409

    def __init__(
        self,
        product_id: uuid.UUID,
        available: int,
        requested: int,
        product_name: Optional[str] = None,
    ):
        label = product_name or str(product_id)
        super().__init__(
            f"Insufficient stock for {label}. Available: {available}, Requested: {requested}",
            product_id=product_id,
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class OrderNotFound(PosError):
    code = "order_not_found"
    status_code = 404

    def __init__(self, order_id: uuid.UUID):
        super().__init__("Order not found", order_id=order_id)
        self.order_id = order_id


class AlreadyCancelled(PosError):
    code = "already_cancelled"
    status_code = 409

    def __init__(self, order_id: uuid.UUID):
        super().__init__("Order is already cancelled", order_id=order_id)
        self.order_id = order_id


class CannotCancelCompleted(PosError):
    code = "cannot_cancel_completed"
    status_code = 409

    def __init__(self, order_id: uuid.UUID):
        super().__init__("Cannot cancel completed order", order_id=order_id)
        self.order_id = order_id


class InvalidStatusTransition(PosError):
    code = "invalid_status_transition"
    status_code = 409

    def __init__(self, order_id: uuid.UUID, current: str, requested: str):
        super().__init__(
            f"Cannot move order from {current} to {requested}",
            order_id=order_id,
            current_status=current,
            requested_status=requested,
        )
        self.current = current
        self.requested = requested


class TransactionFailure(PosError):
    """The store aborted the unit of work. Safe for the caller to retry."""

    code = "transaction_failure"
    status_code = 503

    def __init__(self, message: str = "The operation could not be completed"):
        super().__init__(message, retryable=True)


def _jsonable(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    return value
