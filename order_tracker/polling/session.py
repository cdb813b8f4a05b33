"""Poll session: one run of the status loop for one order."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class PollSession:
    """Handle for one running poll loop.

    A session is bound to exactly one order identifier and carries its
    own liveness flag.  Cancelling is cooperative: it flips the flag and
    wakes a pending inter-poll delay, but never interrupts a status
    request already in flight.

    Attributes:
        order_id: The order this session polls.
        session_id: Per-poller sequence number, used as a correlation id.
        task: The ``asyncio.Task`` running the loop (set by the poller).
    """

    def __init__(self, order_id: int, session_id: int) -> None:
        self.order_id = order_id
        self.session_id = session_id
        self.task: asyncio.Task[None] | None = None
        self._cancelled = asyncio.Event()

    def __repr__(self) -> str:
        state = "live" if self.is_live else "cancelled"
        return f"PollSession(order_id={self.order_id}, session_id={self.session_id}, {state})"

    @property
    def is_live(self) -> bool:
        """True until ``cancel()`` has been called."""
        return not self._cancelled.is_set()

    @property
    def correlation_id(self) -> str:
        return f"order-{self.order_id}/session-{self.session_id}"

    def cancel(self) -> None:
        """Mark the session dead (idempotent)."""
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        logger.debug("Poll session cancelled | %s", self.correlation_id)

    async def wait(self, seconds: float) -> bool:
        """Sleep for *seconds*, waking early if the session is cancelled.

        Returns:
            Whether the session is still live after the delay.
        """
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=seconds)
        except TimeoutError:
            pass
        return self.is_live
