"""Error types shared by every layer of the tracker.

All tracker exceptions derive from ``TrackerError`` and carry the stage
that raised them, a stable code and the poll session's correlation id,
which is what ``report_query_error`` logs when a session fails.

Categories
----------
- ``ValidationError``: a bad order id or config value; the CLI turns it
  into a usage error.
- ``TransientError``: the status service could not be reached
  (``QueryTransportError``).
- ``ContractError``: the service answered with a body we cannot decode
  (``QueryDecodeError`` and payload decoding in ``models.status``).

Anything else, notably ``QueryStatusError``, is categorised by its
``retryable`` flag: 5xx answers are transient, 4xx answers permanent.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all order-tracker errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (e.g. ``"status_query"``, ``"config"``).
        code: Machine-readable error code (e.g. ``"STATUS_QUERY_FAILED"``).
        retryable: Whether a fresh session could reasonably succeed.
        correlation_id: ``order-N/session-M`` of the failing poll session.
    """

    default_stage: str = ""
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return the fields the diagnostic reporter logs."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class ValidationError(TrackerError):
    """Rejected user input: order ids, config values, model fields."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(TrackerError):
    """The status service was unreachable; a later session may succeed."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(TrackerError):
    """The status body does not match the expected wire format."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
