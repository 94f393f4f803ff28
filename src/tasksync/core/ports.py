# src/tasksync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) shared by the client engine and the server side.

The engine depends on Protocols instead of concrete implementations.
This keeps the transport and the storage swappable and makes testing easier.
"""

from typing import Any, Mapping, Protocol


class ApiResponse(Protocol):
    """A completed HTTP exchange, as seen by the effect orchestrator."""

    @property
    def ok(self) -> bool: ...

    @property
    def status(self) -> int: ...

    @property
    def status_text(self) -> str: ...

    def json(self) -> Any: ...


class ApiClient(Protocol):
    """
    Performs network requests against the task API.

    Returns a response for every completed exchange (including 4xx/5xx) and
    raises only when the request itself could not be completed.
    """

    async def fetch(
            self,
            path: str,
            *,
            method: str = "GET",
            params: Mapping[str, str] | None = None,
            json: Any = None,
    ) -> ApiResponse: ...


class TaskRepo(Protocol):
    """Server-side record storage keyed by permanent id."""

    def count_tasks(self) -> int: ...
    def add_task(self, text: str) -> Any: ...
    def get_task(self, task_id: str) -> Any | None: ...

    # Range read: ids <= max_id (when given), newest first.
    def list_tasks(self, *, limit: int, max_id: str | None = None) -> list[Any]: ...

    def update_task(
            self,
            task_id: str,
            *,
            text: str | None = None,
            is_complete: bool | None = None,
    ) -> bool: ...

    def delete_task(self, task_id: str) -> Any | None: ...
