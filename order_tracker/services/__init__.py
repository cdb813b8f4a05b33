"""Order status service adapters.

- StatusQueryService: Abstract base class the poller depends on
- HttpStatusQueryService: JSON-over-HTTP implementation (``httpx``)
"""

from order_tracker.services.base import (
    QueryDecodeError,
    QueryError,
    QueryStatusError,
    QueryTransportError,
    StatusQueryService,
)
from order_tracker.services.http import HttpStatusQueryService

__all__ = [
    "HttpStatusQueryService",
    "QueryDecodeError",
    "QueryError",
    "QueryStatusError",
    "QueryTransportError",
    "StatusQueryService",
]
