"""Tests for order id / timestamp parsing helpers and status_path."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from order_tracker.core.constants import status_path
from order_tracker.utils.helpers import OrderIdError, parse_order_id, parse_timestamp


class TestParseOrderId:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (42, 42),
            ("42", 42),
            (" 7 ", 7),
            ("/myorders/42", 42),
            ("orders/42/", 42),
            ("https://pizza.example.com/myorders/1001", 1001),
        ],
    )
    def test_accepts(self, raw: str | int, expected: int) -> None:
        assert parse_order_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "/myorders/", "/myorders/42/items", "-3"])
    def test_rejects_unparseable(self, raw: str) -> None:
        with pytest.raises(OrderIdError):
            parse_order_id(raw)

    def test_rejects_zero(self) -> None:
        with pytest.raises(OrderIdError, match="must be > 0"):
            parse_order_id(0)

    def test_rejects_bool(self) -> None:
        with pytest.raises(OrderIdError):
            parse_order_id(True)


class TestParseTimestamp:
    def test_z_suffix(self) -> None:
        assert parse_timestamp("2026-10-18T12:00:00Z") == datetime(2026, 10, 18, 12, tzinfo=UTC)

    def test_naive_assumed_utc(self) -> None:
        assert parse_timestamp("2026-10-18T12:00:00").tzinfo is UTC

    def test_fractional_seconds(self) -> None:
        parsed = parse_timestamp("2026-10-18T12:00:00.123456+00:00")
        assert parsed.microsecond == 123456

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            parse_timestamp("")

    def test_garbage_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamp("not a date")


class TestStatusPath:
    def test_plain(self) -> None:
        assert status_path("orders", 42) == "orders/42"

    def test_strips_slashes(self) -> None:
        assert status_path("/api/orders/", 7) == "api/orders/7"
