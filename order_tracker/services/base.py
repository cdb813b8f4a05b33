"""StatusQueryService abstract base class.

Defines the contract every status backend implements.  The poller
interacts exclusively with this interface; it never knows which
transport sits behind it.

Contract:
    ``fetch_status(order_id)`` either returns a fully decoded
    ``OrderStatusSnapshot`` or raises a ``QueryError``.  Network
    failures, non-2xx responses and malformed payloads all surface as
    ``QueryError`` subclasses.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from order_tracker.core.exceptions import ContractError, TrackerError, TransientError

if TYPE_CHECKING:
    from order_tracker.models.status import OrderStatusSnapshot


class StatusQueryService(abc.ABC):
    """Abstract base class for order status backends."""

    @abc.abstractmethod
    async def fetch_status(self, order_id: int) -> OrderStatusSnapshot:
        """Fetch the current status of *order_id*.

        Args:
            order_id: A validated, positive order identifier.

        Returns:
            The decoded ``OrderStatusSnapshot``.

        Raises:
            QueryError: On transport failure, non-success status or a
                payload that cannot be decoded.
        """

    async def aclose(self) -> None:  # noqa: B027
        """Release any transport resources (no-op by default)."""


# ---------------------------------------------------------------------------
# Query exceptions
# ---------------------------------------------------------------------------


class QueryError(TrackerError):
    """Base exception for status query failures.

    Attributes:
        order_id: The order whose status was being fetched.
        message: Human-readable error description.
        retryable: Whether a later attempt could reasonably succeed.
    """

    default_stage = "status_query"
    default_code = "STATUS_QUERY_FAILED"

    def __init__(
        self,
        order_id: int,
        message: str,
        *,
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.order_id = order_id
        super().__init__(
            message,
            retryable=retryable,
            code=self.default_code,
            stage=self.default_stage,
            correlation_id=correlation_id,
        )

    def __str__(self) -> str:
        return f"[order {self.order_id}] {self.message}"


class QueryTransportError(QueryError, TransientError):
    """Network failure or timeout while talking to the status service."""

    default_code = "STATUS_QUERY_TRANSPORT"

    def __init__(self, order_id: int, message: str, **kwargs: str) -> None:
        super().__init__(order_id, message, retryable=True, **kwargs)


class QueryStatusError(QueryError):
    """The status service answered with a non-success HTTP status.

    Attributes:
        status_code: The HTTP status code received.
    """

    default_code = "STATUS_QUERY_HTTP_STATUS"

    def __init__(self, order_id: int, status_code: int, message: str, **kwargs: str) -> None:
        self.status_code = status_code
        super().__init__(order_id, message, retryable=status_code >= 500, **kwargs)


class QueryDecodeError(QueryError, ContractError):
    """The response body could not be decoded into a status snapshot."""

    default_code = "STATUS_QUERY_DECODE"

    def __init__(self, order_id: int, message: str, **kwargs: str) -> None:
        super().__init__(order_id, message, retryable=False, **kwargs)
