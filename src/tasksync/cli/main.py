# src/tasksync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the console session (store + API client), loads
the first page, then runs the console until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..client.actions import RequestReload
from ..config import Settings, get_settings
from ..logging_setup import setup_logging
from .bootstrap import create_session
from .console import run_console_loop

logger = logging.getLogger(__name__)


async def run(settings: Settings) -> None:
    session = create_session(settings=settings)
    try:
        session.store.dispatch(RequestReload())
        await session.store.wait_idle()
        await run_console_loop(session)
    finally:
        await session.aclose()


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(log_dir=settings.data_dir, console_level=settings.log_level)

    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
