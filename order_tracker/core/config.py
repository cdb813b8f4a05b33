"""Tracker configuration loaded from environment variables.

All configuration values have sensible defaults so the tracker runs
against a local status service with no environment at all.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range.  This catches bad configuration at startup
    instead of mid-poll.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from order_tracker.core.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_ORDERS_PATH,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_REQUEST_TIMEOUT_S,
)
from order_tracker.core.exceptions import TrackerError


class ConfigValidationError(TrackerError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.message = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class TrackerConfig:
    """Immutable tracker configuration.

    Attributes:
        api_base_url: Base URL of the order status service.
        orders_path: Path segment under which order resources live.
        poll_interval_ms: Delay between non-terminal fetches in milliseconds.
        request_timeout_s: Per-request timeout in seconds.
        log_level: Root logging level name used by the CLI.
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    orders_path: str = DEFAULT_ORDERS_PATH
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    log_level: str = "INFO"

    @property
    def poll_interval_s(self) -> float:
        """Poll interval in seconds, as ``asyncio`` expects it."""
        return self.poll_interval_ms / 1000.0

    @classmethod
    def from_env(cls) -> TrackerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or a required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``ORDER_STATUS_POLL_INTERVAL_MS=abc``).
        """
        config = cls(
            api_base_url=os.getenv("ORDER_STATUS_API_URL", DEFAULT_API_BASE_URL),
            orders_path=os.getenv("ORDER_STATUS_ORDERS_PATH", DEFAULT_ORDERS_PATH),
            poll_interval_ms=int(
                os.getenv("ORDER_STATUS_POLL_INTERVAL_MS", str(DEFAULT_POLL_INTERVAL_MS))
            ),
            request_timeout_s=float(
                os.getenv("ORDER_STATUS_REQUEST_TIMEOUT_S", str(DEFAULT_REQUEST_TIMEOUT_S))
            ),
            log_level=os.getenv("ORDER_TRACKER_LOG_LEVEL", "INFO").upper(),
        )
        validate_config(config)
        return config


def validate_config(config: TrackerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.api_base_url:
        raise ConfigValidationError(
            "ORDER_STATUS_API_URL",
            config.api_base_url,
            "must not be empty",
        )

    if not config.orders_path.strip("/"):
        raise ConfigValidationError(
            "ORDER_STATUS_ORDERS_PATH",
            config.orders_path,
            "must not be empty",
        )

    if config.poll_interval_ms <= 0:
        raise ConfigValidationError(
            "ORDER_STATUS_POLL_INTERVAL_MS",
            config.poll_interval_ms,
            "must be > 0 (milliseconds)",
        )

    if config.request_timeout_s <= 0:
        raise ConfigValidationError(
            "ORDER_STATUS_REQUEST_TIMEOUT_S",
            config.request_timeout_s,
            "must be > 0 (seconds)",
        )

    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ConfigValidationError(
            "ORDER_TRACKER_LOG_LEVEL",
            config.log_level,
            "must be a logging level name (DEBUG, INFO, WARNING, ERROR)",
        )
