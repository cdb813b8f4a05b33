"""Command-line entry point: track one order until it is delivered.

Usage::

    order-tracker 42
    order-tracker /myorders/42 --interval-ms 2000
    python -m order_tracker 42 --api-url https://pizza.example.com/api

Exit status:
    0  the order was delivered
    1  the status query failed (view ended INVALID) or the poll task crashed
    2  bad arguments or configuration
    130 interrupted
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from typing import TYPE_CHECKING

from order_tracker import __version__
from order_tracker.core.config import ConfigValidationError, TrackerConfig, validate_config
from order_tracker.models.status import ViewKind
from order_tracker.polling.poller import OrderStatusPoller
from order_tracker.services.http import HttpStatusQueryService
from order_tracker.utils.helpers import OrderIdError, parse_order_id
from order_tracker.view.renderer import ConsoleRenderer

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO

logger = logging.getLogger("order_tracker.cli")

EXIT_DELIVERED = 0
EXIT_INVALID = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="order-tracker",
        description="Poll an order's status until it is delivered.",
    )
    parser.add_argument("order", help="order number, or a route ending in one (e.g. /myorders/42)")
    parser.add_argument("--api-url", help="status service base URL (ORDER_STATUS_API_URL)")
    parser.add_argument(
        "--interval-ms",
        type=int,
        help="delay between polls in milliseconds (ORDER_STATUS_POLL_INTERVAL_MS)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> TrackerConfig:
    """Merge command-line overrides onto the environment configuration."""
    config = TrackerConfig.from_env()
    overrides: dict[str, object] = {}
    if args.api_url is not None:
        overrides["api_base_url"] = args.api_url
    if args.interval_ms is not None:
        overrides["poll_interval_ms"] = args.interval_ms
    if overrides:
        config = dataclasses.replace(config, **overrides)
        validate_config(config)
    return config


async def track_order(
    order_id: int,
    config: TrackerConfig,
    *,
    stream: TextIO | None = None,
) -> int:
    """Poll *order_id* until its session ends and return the exit status."""
    service = HttpStatusQueryService(config)
    try:
        async with OrderStatusPoller(
            service,
            on_change=ConsoleRenderer(stream),
            poll_interval_s=config.poll_interval_s,
        ) as poller:
            poller.start(order_id)
            try:
                await poller.join()
            except Exception as exc:
                logger.error(
                    "Tracking aborted by poll task crash | order_id=%s | error=%r",
                    order_id,
                    exc,
                )
                return EXIT_INVALID
            final = poller.view_state
    finally:
        await service.aclose()

    if final.kind is ViewKind.INVALID:
        return EXIT_INVALID
    return EXIT_DELIVERED


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
        order_id = parse_order_id(args.order)
    except (ConfigValidationError, OrderIdError) as exc:
        print(f"order-tracker: {exc.message}", file=sys.stderr)
        return EXIT_USAGE
    except ValueError as exc:
        print(f"order-tracker: {exc}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Tracking order | order_id=%s | api=%s | interval=%dms",
        order_id,
        config.api_base_url,
        config.poll_interval_ms,
    )

    try:
        return asyncio.run(track_order(order_id, config))
    except KeyboardInterrupt:
        logger.info("Tracking interrupted | order_id=%s", order_id)
        return EXIT_INTERRUPTED
