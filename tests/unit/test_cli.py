"""Tests for the order-tracker command line."""

from __future__ import annotations

import io
import logging
import os
from unittest.mock import patch

import pytest

from order_tracker.cli import (
    EXIT_DELIVERED,
    EXIT_INVALID,
    EXIT_USAGE,
    build_parser,
    load_config,
    main,
    track_order,
)
from order_tracker.core.config import ConfigValidationError, TrackerConfig
from order_tracker.models.status import ViewKind, ViewState
from order_tracker.services.base import QueryStatusError
from tests.fakes import ScriptedStatusService, make_snapshot


class TestLoadConfig:
    def test_overrides_apply(self) -> None:
        args = build_parser().parse_args(
            ["42", "--api-url", "https://pizza.test", "--interval-ms", "250"]
        )
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(args)
        assert config.api_base_url == "https://pizza.test"
        assert config.poll_interval_ms == 250

    def test_invalid_override_rejected(self) -> None:
        args = build_parser().parse_args(["42", "--interval-ms", "0"])
        with patch.dict(os.environ, {}, clear=True), pytest.raises(ConfigValidationError):
            load_config(args)


class TestTrackOrder:
    @pytest.mark.asyncio()
    async def test_delivered_exit_code_and_output(self) -> None:
        service = ScriptedStatusService(
            {
                42: [
                    make_snapshot(42, "Preparing"),
                    make_snapshot(42, "Delivered", delivered=True),
                ]
            }
        )
        stream = io.StringIO()
        config = TrackerConfig(poll_interval_ms=10)

        with patch("order_tracker.cli.HttpStatusQueryService", return_value=service):
            code = await track_order(42, config, stream=stream)

        assert code == EXIT_DELIVERED
        output = stream.getvalue()
        assert "Loading..." in output
        assert "Status: Preparing" in output
        assert "Status: Delivered" in output
        assert service.calls == [42, 42]

    @pytest.mark.asyncio()
    async def test_failure_exit_code(self) -> None:
        service = ScriptedStatusService({7: [QueryStatusError(7, 404, "not found")]})
        stream = io.StringIO()

        with patch("order_tracker.cli.HttpStatusQueryService", return_value=service):
            code = await track_order(7, TrackerConfig(), stream=stream)

        assert code == EXIT_INVALID
        assert "Nope" in stream.getvalue()
        assert service.calls == [7]

    @pytest.mark.asyncio()
    async def test_renderer_crash_exits_invalid(self, caplog: pytest.LogCaptureFixture) -> None:
        service = ScriptedStatusService({42: [make_snapshot(42, "Preparing")]})

        def render(state: ViewState) -> None:
            if state.kind is ViewKind.TRACKING:
                raise RuntimeError("terminal went away")

        with (
            patch("order_tracker.cli.HttpStatusQueryService", return_value=service),
            patch("order_tracker.cli.ConsoleRenderer", return_value=render),
            caplog.at_level(logging.ERROR, logger="order_tracker"),
        ):
            code = await track_order(42, TrackerConfig(poll_interval_ms=10))

        assert code == EXIT_INVALID
        assert service.calls == [42]
        assert "Tracking aborted by poll task crash" in caplog.text
        assert "terminal went away" in caplog.text


class TestMain:
    def test_bad_order_id_is_usage_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.dict(os.environ, {}, clear=True):
            code = main(["not-an-order"])
        assert code == EXIT_USAGE
        assert "Invalid order identifier" in capsys.readouterr().err

    def test_bad_env_is_usage_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.dict(os.environ, {"ORDER_STATUS_POLL_INTERVAL_MS": "abc"}, clear=True):
            code = main(["42"])
        assert code == EXIT_USAGE
        assert "order-tracker:" in capsys.readouterr().err

    def test_runs_tracking(self) -> None:
        service = ScriptedStatusService({42: [make_snapshot(42, "Delivered", delivered=True)]})
        with (
            patch.dict(os.environ, {}, clear=True),
            patch("order_tracker.cli.HttpStatusQueryService", return_value=service),
            patch("order_tracker.cli.logging.basicConfig"),
        ):
            code = main(["/myorders/42"])
        assert code == EXIT_DELIVERED
        assert service.calls == [42]
