"""Shared helper functions used by the models, the renderer and the CLI."""

from __future__ import annotations

import re
from datetime import UTC, datetime

from order_tracker.core.exceptions import ValidationError

# Trailing integer segment of a route such as ``/myorders/42`` or ``orders/42/``.
_ROUTE_ORDER_ID = re.compile(r"(?:^|/)(\d+)/?$")


class OrderIdError(ValidationError):
    """Raised when an order identifier cannot be parsed or is out of range.

    Attributes:
        raw: The rejected input.
    """

    default_stage = "route"
    default_code = "INVALID_ORDER_ID"

    def __init__(self, raw: object, message: str) -> None:
        self.raw = raw
        super().__init__(f"Invalid order identifier {raw!r}: {message}")


def parse_order_id(raw: str | int) -> int:
    """Parse an order identifier from an integer, a digit string or a route.

    Accepts ``42``, ``"42"``, ``"/myorders/42"`` and ``"orders/42/"``.

    Raises:
        OrderIdError: If no positive integer identifier can be extracted.
    """
    if isinstance(raw, bool):
        raise OrderIdError(raw, "must be an integer")

    if isinstance(raw, int):
        order_id = raw
    else:
        text = str(raw).strip()
        match = _ROUTE_ORDER_ID.search(text)
        if match is None:
            raise OrderIdError(raw, "expected an integer or a route ending in one")
        order_id = int(match.group(1))

    if order_id <= 0:
        raise OrderIdError(raw, "must be > 0")
    return order_id


def parse_timestamp(timestamp: str) -> datetime:
    """Parse an ISO 8601 timestamp string into a timezone-aware datetime.

    A trailing ``Z`` is accepted, and naive timestamps are taken to be UTC.

    Raises:
        ValueError: If *timestamp* is empty or not ISO 8601.
    """
    if not timestamp:
        msg = "timestamp must not be empty"
        raise ValueError(msg)
    parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
