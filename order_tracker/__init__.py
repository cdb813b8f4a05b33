"""Order Status Tracker.

Polls a remote order status service for a single order and publishes
the latest known state to a renderer until the order is delivered or
the view is abandoned.
"""

__version__ = "0.1.0"
