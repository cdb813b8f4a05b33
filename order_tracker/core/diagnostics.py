"""Default diagnostic reporter for failed status queries.

The poller hands every session-ending error to a reporter callable.
This one writes the structured error payload to the log; callers can
substitute anything with the same signature (an alerting hook, a test
spy, ...).
"""

from __future__ import annotations

import logging

from order_tracker.core.exceptions import TrackerError

logger = logging.getLogger(__name__)


def report_query_error(error: Exception) -> None:
    """Log *error* with its structured context at ERROR level."""
    if isinstance(error, TrackerError):
        details = error.to_error_dict()
        logger.error(
            "Order status query failed | code=%s | category=%s | retryable=%s | "
            "correlation_id=%s | message=%s",
            details["code"],
            details["category"],
            details["retryable"],
            details["correlation_id"],
            details["message"],
            exc_info=error,
        )
        return

    logger.error("Order status query failed | error=%s", error, exc_info=error)
