"""Text rendering for order status views."""

from order_tracker.view.renderer import ConsoleRenderer, format_created, render_view_state

__all__ = ["ConsoleRenderer", "format_created", "render_view_state"]
