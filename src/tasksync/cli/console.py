# src/tasksync/cli/console.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..client.actions import BeginCreate, EditDraft
from ..client.selectors import get_last_error_message
from ..client.state import LoadStatus, State
from .bootstrap import ConsoleSession
from .commands import registry as command_registry
from .commands import render_tasks

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _report_load_errors(old: State, new: State) -> None:
    if new.task_list.status == LoadStatus.ERROR and old.task_list.status != LoadStatus.ERROR:
        _print_ts(f"[TASKS] Loading failed: {get_last_error_message(new)}")


def submit_task(session: ConsoleSession, text: str) -> None:
    """Type `text` into the draft and submit it (optimistic create)."""
    session.store.dispatch(EditDraft(text=text))
    session.store.dispatch(BeginCreate(temp_id=session.new_temp_id()))


async def run_console_loop(session: ConsoleSession) -> None:
    logger.info("Console started (app=%s).", session.settings.app_name)
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    _print_ts(render_tasks(session.tasks()))

    unsubscribe = session.store.subscribe(_report_load_errors)
    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, "> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            before = session.store.get_state()
            reply = command_registry.handle(session, line)
            if reply is None:
                submit_task(session, line)
                _print_ts(render_tasks(session.tasks()))
            else:
                _print_ts(reply)

            # Show the settled list once the triggered requests are done.
            if session.store.in_flight:
                await session.store.wait_idle()
                if session.store.get_state() is not before:
                    _print_ts(render_tasks(session.tasks()))
    finally:
        unsubscribe()

    logger.info("Console finished.")
