"""Tests for OrderStatusSnapshot decoding and ViewState derivation."""

from __future__ import annotations

import unittest
from datetime import UTC, datetime, timedelta, timezone

import pytest

from order_tracker.core.exceptions import ContractError
from order_tracker.models.status import (
    INVALID,
    LOADING,
    ModelValidationError,
    OrderStatusSnapshot,
    ViewKind,
    ViewState,
)
from tests.fakes import make_payload, make_snapshot


class TestSnapshotFromPayload(unittest.TestCase):
    """Decoding a status service body."""

    def test_decodes_required_fields(self) -> None:
        snapshot = OrderStatusSnapshot.from_payload(42, make_payload("Out for delivery"))

        assert snapshot.order_id == 42
        assert snapshot.status_label == "Out for delivery"
        assert snapshot.is_delivered is False
        assert snapshot.created_at == datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
        assert snapshot.order["items"] == [{"name": "Margherita", "quantity": 2}]

    def test_delivered_flag(self) -> None:
        snapshot = OrderStatusSnapshot.from_payload(42, make_payload("Delivered", delivered=True))
        assert snapshot.is_delivered is True

    def test_naive_timestamp_is_utc(self) -> None:
        payload = make_payload(created="2026-10-18T12:00:00")
        snapshot = OrderStatusSnapshot.from_payload(42, payload)
        assert snapshot.created_at.tzinfo is not None
        assert snapshot.created_at.utcoffset() == timedelta(0)

    def test_offset_timestamp_kept(self) -> None:
        payload = make_payload(created="2026-10-18T14:00:00+02:00")
        snapshot = OrderStatusSnapshot.from_payload(42, payload)
        assert snapshot.created_at.tzinfo == timezone(timedelta(hours=2))
        assert snapshot.created_at == datetime(2026, 10, 18, 12, 0, tzinfo=UTC)

    def test_non_object_payload_rejected(self) -> None:
        with self.assertRaises(ContractError) as ctx:
            OrderStatusSnapshot.from_payload(42, ["not", "an", "object"])
        assert "JSON object" in ctx.exception.message

    def test_missing_status_text_rejected(self) -> None:
        payload = make_payload()
        del payload["statusText"]
        with self.assertRaises(ContractError) as ctx:
            OrderStatusSnapshot.from_payload(42, payload)
        assert "statusText" in ctx.exception.message

    def test_string_delivered_flag_rejected(self) -> None:
        payload = make_payload()
        payload["isDelivered"] = "false"
        with self.assertRaises(ContractError):
            OrderStatusSnapshot.from_payload(42, payload)

    def test_missing_order_rejected(self) -> None:
        payload = make_payload()
        payload["order"] = None
        with self.assertRaises(ContractError):
            OrderStatusSnapshot.from_payload(42, payload)

    def test_bad_timestamp_rejected(self) -> None:
        payload = make_payload(created="yesterday-ish")
        with self.assertRaises(ContractError) as ctx:
            OrderStatusSnapshot.from_payload(42, payload)
        assert "createdTime" in ctx.exception.message
        assert ctx.exception.category == "contract"

    def test_invalid_order_id_becomes_contract_error(self) -> None:
        with self.assertRaises(ContractError):
            OrderStatusSnapshot.from_payload(0, make_payload())


class TestSnapshotModel:
    """Snapshot invariants."""

    def test_frozen(self) -> None:
        snapshot = make_snapshot()
        with pytest.raises(AttributeError):
            snapshot.status_label = "Delivered"  # type: ignore[misc]

    def test_order_contents_read_only(self) -> None:
        snapshot = make_snapshot()
        with pytest.raises(TypeError):
            snapshot.order["items"] = []  # type: ignore[index]

    def test_order_contents_copied(self) -> None:
        source = {"items": []}
        snapshot = OrderStatusSnapshot(
            order_id=1,
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
            status_label="Preparing",
            order=source,
        )
        source["extra"] = True
        assert "extra" not in snapshot.order

    def test_naive_created_at_rejected(self) -> None:
        with pytest.raises(ModelValidationError, match="timezone-aware"):
            OrderStatusSnapshot(
                order_id=1,
                created_at=datetime(2026, 1, 1),  # noqa: DTZ001
                status_label="Preparing",
            )

    def test_non_positive_order_id_rejected(self) -> None:
        with pytest.raises(ModelValidationError, match="order_id"):
            make_snapshot(order_id=0)


class TestViewState:
    """ViewState is a pure function of (snapshot, invalid)."""

    def test_loading_without_snapshot(self) -> None:
        assert ViewState.derive(None, invalid=False) == LOADING

    def test_tracking_with_snapshot(self) -> None:
        snapshot = make_snapshot()
        state = ViewState.derive(snapshot, invalid=False)
        assert state.kind is ViewKind.TRACKING
        assert state.snapshot is snapshot

    def test_invalid_wins_over_snapshot(self) -> None:
        assert ViewState.derive(make_snapshot(), invalid=True) == INVALID
        assert ViewState.derive(None, invalid=True) == INVALID

    def test_tracking_requires_snapshot(self) -> None:
        with pytest.raises(ModelValidationError):
            ViewState(ViewKind.TRACKING)

    def test_loading_rejects_snapshot(self) -> None:
        with pytest.raises(ModelValidationError):
            ViewState(ViewKind.LOADING, make_snapshot())
