"""Plain-text rendering of a ``ViewState``.

The poller calls the renderer synchronously after every state change.
Nothing here feeds back into polling; it only turns the current view
into lines of text.
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TextIO

from order_tracker.core.constants import FIELD_ITEMS
from order_tracker.models.status import ViewKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from order_tracker.models.status import OrderStatusSnapshot, ViewState

LOADING_TEXT = "Loading..."
INVALID_TEXT = "Nope - we don't know that order (or the status service is unavailable)."

_SUB_ITEM_KEYS = ("toppings", "options")


def format_created(created_at: datetime, now: datetime | None = None) -> str:
    """Describe when an order was placed, relative to *now*.

    Examples:
        - ``"Placed just now"``
        - ``"Placed 5 minutes ago"``
        - ``"Placed 3 hours ago"``
        - ``"Placed on 2026-10-16 18:05 UTC"`` (a day or more ago)
    """
    now = now or datetime.now(UTC)
    seconds = int((now - created_at).total_seconds())

    if seconds < 60:
        return "Placed just now"
    if seconds < 3600:
        minutes = seconds // 60
        return f"Placed {minutes} minute{'s' if minutes != 1 else ''} ago"
    if seconds < 86400:
        hours = seconds // 3600
        return f"Placed {hours} hour{'s' if hours != 1 else ''} ago"
    return f"Placed on {created_at.astimezone(UTC):%Y-%m-%d %H:%M} UTC"


def render_view_state(state: ViewState, now: datetime | None = None) -> str:
    """Render *state* as a block of text."""
    if state.kind is ViewKind.LOADING:
        return LOADING_TEXT
    if state.kind is ViewKind.INVALID or state.snapshot is None:
        return INVALID_TEXT
    return render_snapshot(state.snapshot, now)


def render_snapshot(snapshot: OrderStatusSnapshot, now: datetime | None = None) -> str:
    lines = [
        f"Order #{snapshot.order_id}",
        f"Status: {snapshot.status_label}",
        format_created(snapshot.created_at, now),
    ]
    items = snapshot.order.get(FIELD_ITEMS) or []
    if items:
        lines.append("Items:")
        lines.extend(_render_items(items, indent=1))
    return "\n".join(lines)


def _render_items(items: Iterable[Any], indent: int) -> list[str]:
    pad = "  " * indent
    lines: list[str] = []
    for item in items:
        if not isinstance(item, dict):
            lines.append(f"{pad}- {item}")
            continue

        name = item.get("name") or item.get("title") or "(unnamed item)"
        quantity = item.get("quantity")
        label = f"{quantity} x {name}" if quantity not in (None, 1) else str(name)
        lines.append(f"{pad}- {label}")

        for key in _SUB_ITEM_KEYS:
            sub_items = item.get(key)
            if sub_items:
                lines.extend(_render_items(sub_items, indent + 1))
    return lines


class ConsoleRenderer:
    """``on_change`` hook that writes each distinct view to a text stream.

    Identical consecutive renders are suppressed so that a status that
    has not moved between polls does not repeat on screen.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout
        self._last: str | None = None

    def __call__(self, state: ViewState) -> None:
        text = render_view_state(state)
        if text == self._last:
            return
        self._last = text
        self._stream.write(text + "\n\n")
        self._stream.flush()
