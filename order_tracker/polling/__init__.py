"""Order status polling state machine.

- PollSession: Liveness-flagged handle for one running loop
- OrderStatusPoller: Owns the single current session and publishes view states
"""

from order_tracker.polling.poller import OrderStatusPoller
from order_tracker.polling.session import PollSession

__all__ = ["OrderStatusPoller", "PollSession"]
