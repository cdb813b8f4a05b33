"""Order status poller: the self-rescheduling fetch loop.

``OrderStatusPoller`` keeps at most one ``PollSession`` alive.  While a
session is live its task repeatedly fetches the order status, publishes
the resulting ``ViewState`` and either stops (order delivered, query
failed) or waits the poll interval before fetching again.

Guarantees:
    - ``start()`` cancels the previous session before creating the new
      one, and each publication re-checks the owning session's liveness
      right before it happens, so nothing fetched for a superseded
      session is ever published.
    - A query failure is terminal for its session: one INVALID
      publication, one diagnostic report, no further fetches.
    - Cancellation is not an error: it publishes nothing and reports
      nothing.

Lifecycle per session::

    Created → Fetching → Updated → (delivered ? Stopped : Fetching after delay)
                       ↘ Failed → Stopped
    (any state) → Superseded → Stopped   via start()/stop()/close()
"""

from __future__ import annotations

import asyncio
import functools
import itertools
import logging
from typing import TYPE_CHECKING

from order_tracker.core.constants import DEFAULT_POLL_INTERVAL_MS
from order_tracker.core.diagnostics import report_query_error
from order_tracker.models.status import ViewState
from order_tracker.polling.session import PollSession
from order_tracker.services.base import QueryError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from order_tracker.models.status import OrderStatusSnapshot
    from order_tracker.services.base import StatusQueryService

logger = logging.getLogger(__name__)


class OrderStatusPoller:
    """Drive a cancellable status loop for one order at a time.

    Args:
        service: Backend used to fetch order status.
        on_change: Called synchronously with the new ``ViewState`` after
            every mutation.  If it raises while publishing LOADING the
            error is logged and polling proceeds; if it raises inside the
            loop the session ends and the task's crash is logged.
        on_error: Diagnostic reporter; receives the ``QueryError`` that
            ended a session.  Must not block.  Exceptions it raises are
            logged and otherwise ignored.
        poll_interval_s: Delay between successful, non-terminal fetches.

    Example usage::

        poller = OrderStatusPoller(service, on_change=renderer)
        poller.start(42)
        await poller.join()
    """

    def __init__(
        self,
        service: StatusQueryService,
        *,
        on_change: Callable[[ViewState], None] | None = None,
        on_error: Callable[[QueryError], None] = report_query_error,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_MS / 1000.0,
    ) -> None:
        if poll_interval_s <= 0:
            msg = f"poll_interval_s must be > 0, got {poll_interval_s!r}"
            raise ValueError(msg)
        self._service = service
        self._on_change = on_change
        self._on_error = on_error
        self._poll_interval_s = poll_interval_s
        self._session: PollSession | None = None
        self._last_order_id: int | None = None
        self._snapshot: OrderStatusSnapshot | None = None
        self._invalid = False
        self._session_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def view_state(self) -> ViewState:
        """Current view, derived from the latest snapshot and invalid flag."""
        return ViewState.derive(self._snapshot, self._invalid)

    @property
    def session(self) -> PollSession | None:
        """The most recently started session (live or not)."""
        return self._session

    @property
    def order_id(self) -> int | None:
        """Identifier of the most recently started session."""
        return self._last_order_id

    @property
    def is_polling(self) -> bool:
        """True while a session is live."""
        return self._session is not None and self._session.is_live

    @property
    def poll_interval_s(self) -> float:
        return self._poll_interval_s

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self, order_id: int) -> PollSession:
        """Supersede any running session and start polling *order_id*.

        Must be called from code running on the event loop.  Returns
        immediately; the first fetch happens in the spawned task.
        """
        loop = asyncio.get_running_loop()
        self.stop()

        session = PollSession(order_id, next(self._session_ids))
        self._session = session
        self._last_order_id = order_id
        self._snapshot = None
        self._invalid = False

        # The task only runs at the next loop iteration, after LOADING.
        session.task = loop.create_task(
            self._run(session), name=f"poll-{session.correlation_id}"
        )
        session.task.add_done_callback(functools.partial(self._on_task_done, session))

        try:
            self._publish(session)
        except Exception:
            logger.exception("View listener raised on start | %s", session.correlation_id)

        logger.info(
            "Poll session started | order_id=%s | session=%d | interval=%.1fs",
            order_id,
            session.session_id,
            self._poll_interval_s,
        )
        return session

    def bind(self, order_id: int) -> PollSession | None:
        """Start polling *order_id* unless a live session already tracks it.

        Returns:
            The new session, or ``None`` when nothing changed.
        """
        if self.is_polling and self._last_order_id == order_id:
            return None
        return self.start(order_id)

    def refresh(self) -> PollSession:
        """Restart polling for the most recently started order.

        Raises:
            ValueError: If polling was never started.
        """
        if self._last_order_id is None:
            msg = "refresh() called before any order was started"
            raise ValueError(msg)
        return self.start(self._last_order_id)

    def stop(self) -> None:
        """Cancel the active session, if any (idempotent)."""
        session = self._session
        if session is None or not session.is_live:
            return
        session.cancel()
        logger.info(
            "Poll session stopped | order_id=%s | session=%d",
            session.order_id,
            session.session_id,
        )

    def close(self) -> None:
        """Tear down the poller; safe even if polling never started."""
        self.stop()

    async def join(self) -> None:
        """Wait for the current session's task to finish."""
        session = self._session
        if session is None or session.task is None:
            return
        await asyncio.shield(session.task)

    async def __aenter__(self) -> OrderStatusPoller:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def _run(self, session: PollSession) -> None:
        order_id = session.order_id
        poll_count = 0

        while session.is_live:
            self._invalid = False
            poll_count += 1

            try:
                snapshot = await self._fetch(session)
            except QueryError as exc:
                self._fail(session, exc)
                return

            if not session.is_live:
                logger.debug(
                    "Discarding stale status | %s | poll=%d",
                    session.correlation_id,
                    poll_count,
                )
                return

            self._snapshot = snapshot
            self._publish(session)

            if snapshot.is_delivered:
                session.cancel()
                logger.info(
                    "Order delivered, polling complete | order_id=%s | session=%d | polls=%d",
                    order_id,
                    session.session_id,
                    poll_count,
                )
                return

            logger.debug(
                "Order not yet delivered | order_id=%s | status=%s | next_poll_in=%.1fs",
                order_id,
                snapshot.status_label,
                self._poll_interval_s,
            )
            if not await session.wait(self._poll_interval_s):
                return

    async def _fetch(self, session: PollSession) -> OrderStatusSnapshot:
        """Fetch status, collapsing unexpected failures into ``QueryError``."""
        try:
            return await self._service.fetch_status(session.order_id)
        except QueryError as exc:
            if not exc.correlation_id:
                exc.correlation_id = session.correlation_id
            raise
        except Exception as exc:
            msg = f"Unexpected status query failure: {exc!r}"
            raise QueryError(
                session.order_id, msg, correlation_id=session.correlation_id
            ) from exc

    def _fail(self, session: PollSession, error: QueryError) -> None:
        if not session.is_live:
            logger.debug(
                "Discarding stale query failure | %s | error=%s",
                session.correlation_id,
                error,
            )
            return

        self._invalid = True
        session.cancel()
        logger.warning(
            "Poll session failed | order_id=%s | session=%d | code=%s",
            session.order_id,
            session.session_id,
            error.code,
        )
        self._publish(session)

        try:
            self._on_error(error)
        except Exception:
            logger.exception("Diagnostic reporter raised | %s", session.correlation_id)

    def _publish(self, session: PollSession) -> None:
        """Notify the listener, unless *session* is no longer the current one."""
        if session is not self._session:
            return
        if self._on_change is not None:
            self._on_change(self.view_state)

    def _on_task_done(self, session: PollSession, task: asyncio.Task[None]) -> None:
        session.cancel()
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Poll task crashed | task=%s",
                task.get_name(),
                exc_info=exc,
            )
