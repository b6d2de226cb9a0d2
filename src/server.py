"""Headless maintenance worker runner.

Runs the log rotation and garbage collection loops without the HTTP surface:
- logs: compresses and truncates the operational log files every 24h
- gc: removes expired tokens and carts every hour

Usage:
    python src/server.py                # Run both workers
    python src/server.py --worker logs  # Run only log rotation
    python src/server.py --worker gc    # Run only garbage collection
"""

import argparse
import asyncio

import structlog

from bootstrap import build_services
from shared.config import get_settings
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)


async def run(worker_name=None):
    settings = get_settings()
    configure_logging(settings)
    services = build_services(settings)

    workers = services.workers.select(worker_name)
    logger.info("Starting maintenance workers", workers=[worker.name for worker in workers])
    try:
        await asyncio.gather(*(worker.run() for worker in workers))
    finally:
        logger.info("Maintenance workers stopped")


def main():
    parser = argparse.ArgumentParser(description="Pizza delivery maintenance worker runner")
    parser.add_argument(
        "--worker",
        choices=["logs", "gc"],
        help="Run a single worker loop (default: run all)",
    )
    args = parser.parse_args()

    try:
        asyncio.run(run(args.worker))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
