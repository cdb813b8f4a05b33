"""HTTP status service adapter.

Concrete ``StatusQueryService`` that issues
``GET {api_base_url}/{orders_path}/{order_id}`` with ``httpx`` and
decodes the JSON body into an ``OrderStatusSnapshot``.

Every failure mode is mapped onto the ``QueryError`` family:

- ``httpx.TimeoutException`` / ``httpx.TransportError`` → ``QueryTransportError``
- non-2xx response                                    → ``QueryStatusError``
- invalid JSON or missing/typed-wrong fields           → ``QueryDecodeError``
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from order_tracker.core.constants import status_path
from order_tracker.core.exceptions import ContractError
from order_tracker.models.status import OrderStatusSnapshot
from order_tracker.services.base import (
    QueryDecodeError,
    QueryStatusError,
    QueryTransportError,
    StatusQueryService,
)

if TYPE_CHECKING:
    from order_tracker.core.config import TrackerConfig

logger = logging.getLogger(__name__)


class HttpStatusQueryService(StatusQueryService):
    """Order status backend over HTTP/JSON.

    The adapter owns its ``httpx.AsyncClient`` unless one is passed in,
    in which case closing it stays the caller's job.
    """

    def __init__(
        self,
        config: TrackerConfig,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout_s,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )

    @property
    def config(self) -> TrackerConfig:
        """Return the tracker configuration (read-only)."""
        return self._config

    async def fetch_status(self, order_id: int) -> OrderStatusSnapshot:
        """Fetch and decode the status of *order_id*.

        Raises:
            QueryTransportError: Network failure or timeout.
            QueryStatusError: Non-2xx response.
            QueryDecodeError: Body is not JSON or lacks required fields.
        """
        path = status_path(self._config.orders_path, order_id)
        logger.debug("Status query | order_id=%s | path=%s", order_id, path)

        try:
            response = await self._client.get(path)
        except httpx.TimeoutException as exc:
            msg = f"Status request timed out after {self._config.request_timeout_s}s"
            raise QueryTransportError(order_id, msg) from exc
        except httpx.TransportError as exc:
            msg = f"Status request failed: {exc}"
            raise QueryTransportError(order_id, msg) from exc

        if not response.is_success:
            msg = f"Status service returned HTTP {response.status_code}"
            raise QueryStatusError(order_id, response.status_code, msg)

        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"Status response is not valid JSON: {exc}"
            raise QueryDecodeError(order_id, msg) from exc

        try:
            snapshot = OrderStatusSnapshot.from_payload(order_id, payload)
        except ContractError as exc:
            raise QueryDecodeError(order_id, exc.message) from exc

        logger.debug(
            "Status query completed | order_id=%s | status=%s | delivered=%s",
            order_id,
            snapshot.status_label,
            snapshot.is_delivered,
        )
        return snapshot

    async def aclose(self) -> None:
        """Close the underlying client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()
