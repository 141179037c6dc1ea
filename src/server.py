"""Outbox processor runner for the orderflow domain.

Polls the outbox on a fixed interval and delivers PENDING events to the saga
participants registered at startup.

Usage:
    python src/server.py                  # Poll forever on the configured interval
    python src/server.py --once           # Process a single batch and exit
    python src/server.py --interval 1     # Override the poll interval (seconds)
"""

import argparse
import asyncio

import structlog

from orderflow.bootstrap import build_processor
from orderflow.domain import orderflow
from orderflow.outbox.processor import outbox_settings
from orderflow.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


def poll_interval(interval=None):
    """The interval to sleep between ticks; an explicit value, even 0, wins over config."""
    if interval is None:
        return outbox_settings()["poll_interval_seconds"]
    return interval


async def run(interval=None, once=False):
    orderflow.init()

    with orderflow.domain_context():
        processor = build_processor()
        interval = poll_interval(interval)
        logger.info("Outbox processor started", interval=interval, batch_size=processor.batch_size)

        while True:
            processed = processor.tick()
            if once:
                return processed
            await asyncio.sleep(interval)


def main():
    parser = argparse.ArgumentParser(description="Orderflow outbox processor")
    parser.add_argument("--once", action="store_true", help="Process one batch and exit")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds (default: from domain.toml)")
    args = parser.parse_args()

    configure_logging()
    try:
        asyncio.run(run(interval=args.interval, once=args.once))
    except KeyboardInterrupt:
        logger.info("Outbox processor stopped")


if __name__ == "__main__":
    main()
