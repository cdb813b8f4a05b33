"""Shared tracker constants.

Centralises the polling cadence, wire-format field names and the
status endpoint layout used by the service, the poller and the CLI.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Polling
# ---------------------------------------------------------------------------

DEFAULT_POLL_INTERVAL_MS: int = 4000
"""Delay between successful, non-terminal status fetches."""

DEFAULT_REQUEST_TIMEOUT_S: float = 30.0
"""Timeout applied to each status request."""

# ---------------------------------------------------------------------------
# Status endpoint
# ---------------------------------------------------------------------------

DEFAULT_API_BASE_URL: str = "http://localhost:5000"
DEFAULT_ORDERS_PATH: str = "orders"

# ---------------------------------------------------------------------------
# Wire-format field names (status payload)
# ---------------------------------------------------------------------------

FIELD_ORDER: str = "order"
FIELD_STATUS_TEXT: str = "statusText"
FIELD_IS_DELIVERED: str = "isDelivered"
FIELD_CREATED_TIME: str = "createdTime"
FIELD_ITEMS: str = "items"


def status_path(orders_path: str, order_id: int) -> str:
    """Return the relative URL of the status resource for *order_id*.

    Examples:
        >>> status_path("orders", 42)
        'orders/42'
        >>> status_path("/api/orders/", 7)
        'api/orders/7'
    """
    return f"{orders_path.strip('/')}/{order_id}"
