# src/tasksync/cli/commands.py

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ..client.actions import DeleteTask, EditTask, RequestNextPage, RequestReload
from ..client.selectors import get_last_error_message, get_tasks_status, has_more_pages
from ..client.state import LoadStatus, Task, TaskPatch

if TYPE_CHECKING:
    from .bootstrap import ConsoleSession

CommandHandler = Callable[["ConsoleSession", list[str]], str]


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /reload, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, session: ConsoleSession, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(session, parts[1:])

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Anything else is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


def render_tasks(tasks: tuple[Task, ...]) -> str:
    if not tasks:
        return "No tasks."
    lines = []
    for i, task in enumerate(tasks, start=1):
        mark = "x" if task.is_complete else " "
        pending = " (saving...)" if task.is_pending else ""
        lines.append(f"{i:>3}. [{mark}] {task.text}{pending}")
    return "\n".join(lines)


def _pick(session: ConsoleSession, args: list[str]) -> Task | str:
    """Resolve "/cmd <n>" to the n-th listed task, or return a usage error."""
    if not args:
        return "Missing task number. Use /list to see numbers."
    try:
        index = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]}"
    tasks = session.tasks()
    if not 1 <= index <= len(tasks):
        return f"No task #{index}. Use /list to see numbers."
    return tasks[index - 1]


def cmd_help(session: ConsoleSession, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(session: ConsoleSession, args: list[str]) -> str:
    return render_tasks(session.tasks())


def cmd_status(session: ConsoleSession, args: list[str]) -> str:
    state = session.store.get_state()
    status = get_tasks_status(state)
    lines = [
        "Status:",
        f"  Tasks: {status.value} ({len(state.task_list.items)} loaded)",
        f"  More pages: {'yes' if has_more_pages(state) else 'no'}",
        f"  Requests in flight: {session.store.in_flight}",
    ]
    if status == LoadStatus.ERROR:
        lines.append(f"  Last error: {get_last_error_message(state)}")
    return "\n".join(lines)


def cmd_reload(session: ConsoleSession, args: list[str]) -> str:
    session.store.dispatch(RequestReload())
    return "Reloading tasks..."


def cmd_more(session: ConsoleSession, args: list[str]) -> str:
    if not has_more_pages(session.store.get_state()):
        return "No more pages."
    session.store.dispatch(RequestNextPage())
    return "Loading next page..."


def _set_complete(session: ConsoleSession, args: list[str], value: bool) -> str:
    task = _pick(session, args)
    if isinstance(task, str):
        return task
    session.store.dispatch(EditTask(id=task.id, patch=TaskPatch(is_complete=value)))
    return f"Marked {'done' if value else 'not done'}: {task.text}"


def cmd_done(session: ConsoleSession, args: list[str]) -> str:
    return _set_complete(session, args, True)


def cmd_undo(session: ConsoleSession, args: list[str]) -> str:
    return _set_complete(session, args, False)


def cmd_rm(session: ConsoleSession, args: list[str]) -> str:
    task = _pick(session, args)
    if isinstance(task, str):
        return task
    session.store.dispatch(DeleteTask(id=task.id))
    return f"Removed: {task.text}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show loaded tasks.", aliases=["ls"])
registry.register("status", cmd_status, help_text="Show load status and pending requests.")
registry.register("reload", cmd_reload, help_text="Reload the first page from the server.")
registry.register("more", cmd_more, help_text="Load the next page.")
registry.register("done", cmd_done, help_text="Mark task done: /done <n>.")
registry.register("undo", cmd_undo, help_text="Mark task not done: /undo <n>.")
registry.register("rm", cmd_rm, help_text="Remove task from the list: /rm <n>.", aliases=["del"])
