"""Typed models for order status tracking.

- ``OrderStatusSnapshot``: One successful status fetch, replaced wholesale
  on every poll.
- ``ViewKind`` / ``ViewState``: The read-only projection handed to the
  renderer.

Design notes:
- All models are frozen dataclasses; a snapshot is never partially
  updated.
- ``ViewState.derive`` is the single place the (snapshot, invalid flag)
  pair is turned into something renderable.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from order_tracker.core.constants import (
    FIELD_CREATED_TIME,
    FIELD_IS_DELIVERED,
    FIELD_ORDER,
    FIELD_STATUS_TEXT,
)
from order_tracker.core.exceptions import ContractError, TrackerError
from order_tracker.utils.helpers import parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime


class ModelValidationError(ValueError, TrackerError):
    """Raised when a model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        TrackerError.__init__(self, formatted)


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrderStatusSnapshot:
    """Result of one successful status fetch.

    Attributes:
        order_id: The order this status belongs to.
        created_at: When the order was placed (timezone-aware).
        status_label: Human-readable status (e.g. ``"Preparing"``).
        is_delivered: Terminal-state flag; polling stops once set.
        order: Opaque order contents (line items etc.), read-only.
    """

    order_id: int
    created_at: datetime
    status_label: str
    is_delivered: bool = False
    order: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if self.order_id <= 0:
            raise ModelValidationError(
                "OrderStatusSnapshot", "order_id", self.order_id, "must be > 0"
            )
        if self.created_at.tzinfo is None:
            raise ModelValidationError(
                "OrderStatusSnapshot", "created_at", self.created_at, "must be timezone-aware"
            )
        if not isinstance(self.order, MappingProxyType):
            object.__setattr__(self, "order", MappingProxyType(dict(self.order)))

    @classmethod
    def from_payload(cls, order_id: int, payload: object) -> OrderStatusSnapshot:
        """Decode a status service JSON body.

        Expected shape::

            {
                "order": {"createdTime": "2026-10-18T12:00:00Z", "items": [...]},
                "statusText": "Preparing",
                "isDelivered": false
            }

        Raises:
            ContractError: If a required field is missing or has the wrong type.
        """
        if not isinstance(payload, dict):
            msg = f"status payload must be a JSON object, got {type(payload).__name__}"
            raise ContractError(msg, stage="status_decode", code="STATUS_PAYLOAD_INVALID")

        order = payload.get(FIELD_ORDER)
        if not isinstance(order, dict):
            raise _missing(FIELD_ORDER, "object")

        status_text = payload.get(FIELD_STATUS_TEXT)
        if not isinstance(status_text, str):
            raise _missing(FIELD_STATUS_TEXT, "string")

        is_delivered = payload.get(FIELD_IS_DELIVERED)
        if not isinstance(is_delivered, bool):
            raise _missing(FIELD_IS_DELIVERED, "boolean")

        created_raw = order.get(FIELD_CREATED_TIME)
        if not isinstance(created_raw, str):
            raise _missing(f"{FIELD_ORDER}.{FIELD_CREATED_TIME}", "string")
        try:
            created_at = parse_timestamp(created_raw)
        except ValueError as exc:
            msg = f"{FIELD_ORDER}.{FIELD_CREATED_TIME} is not ISO 8601: {created_raw!r}"
            raise ContractError(
                msg, stage="status_decode", code="STATUS_PAYLOAD_INVALID"
            ) from exc

        try:
            return cls(
                order_id=order_id,
                created_at=created_at,
                status_label=status_text,
                is_delivered=is_delivered,
                order=order,
            )
        except ModelValidationError as exc:
            raise ContractError(
                str(exc), stage="status_decode", code="STATUS_PAYLOAD_INVALID"
            ) from exc


def _missing(field_name: str, expected: str) -> ContractError:
    msg = f"status payload field {field_name!r} is missing or not a {expected}"
    return ContractError(msg, stage="status_decode", code="STATUS_PAYLOAD_INVALID")


# ---------------------------------------------------------------------------
# View state
# ---------------------------------------------------------------------------


class ViewKind(enum.Enum):
    """What the renderer should show.

    Values:
        LOADING:  A session has started but nothing has been fetched yet.
        INVALID:  The last session ended in a query failure.
        TRACKING: A snapshot is available.
    """

    LOADING = "loading"
    INVALID = "invalid"
    TRACKING = "tracking"


@dataclass(frozen=True, slots=True)
class ViewState:
    """Read-only projection published to the renderer.

    Attributes:
        kind: Which of the three views applies.
        snapshot: The latest snapshot, only set when ``kind`` is TRACKING.
    """

    kind: ViewKind
    snapshot: OrderStatusSnapshot | None = None

    def __post_init__(self) -> None:
        if (self.kind is ViewKind.TRACKING) != (self.snapshot is not None):
            raise ModelValidationError(
                "ViewState",
                "snapshot",
                self.snapshot,
                "must be set exactly when kind is TRACKING",
            )

    @classmethod
    def derive(cls, snapshot: OrderStatusSnapshot | None, invalid: bool) -> ViewState:
        """Project the poller's (snapshot, invalid) pair into a view state."""
        if invalid:
            return INVALID
        if snapshot is None:
            return LOADING
        return cls(ViewKind.TRACKING, snapshot)


LOADING = ViewState(ViewKind.LOADING)
INVALID = ViewState(ViewKind.INVALID)
