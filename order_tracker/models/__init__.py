"""Domain models for order status tracking."""

from order_tracker.models.status import (
    INVALID,
    LOADING,
    ModelValidationError,
    OrderStatusSnapshot,
    ViewKind,
    ViewState,
)

__all__ = [
    "INVALID",
    "LOADING",
    "ModelValidationError",
    "OrderStatusSnapshot",
    "ViewKind",
    "ViewState",
]
