# src/tasksync/client/state.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from .ids import PermanentId, TaskId


class LoadStatus(StrEnum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Task:
    id: TaskId
    text: str
    is_complete: bool = False
    # True only between optimistic creation and server confirmation.
    is_pending: bool = False

    @classmethod
    def from_wire(cls, raw: Any) -> Task:
        """
        Parse a task as sent by the API: {"id": ..., "text": ..., "isComplete": ...}.

        Raises ValueError when the payload has no usable id.
        """
        if not isinstance(raw, Mapping):
            raise ValueError(f"task must be an object, got {type(raw).__name__}")
        raw_id = raw.get("id")
        if not isinstance(raw_id, str) or not raw_id:
            raise ValueError("task has no 'id'")
        text = raw.get("text")
        return cls(
            id=PermanentId(raw_id),
            text=text if isinstance(text, str) else "",
            is_complete=bool(raw.get("isComplete", False)),
            is_pending=False,
        )


@dataclass(frozen=True, slots=True)
class TaskPatch:
    """Shallow edit of a task; None means "leave as is"."""

    text: str | None = None
    is_complete: bool | None = None

    def changes(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.text is not None:
            out["text"] = self.text
        if self.is_complete is not None:
            out["is_complete"] = self.is_complete
        return out


def frozen_items(items: Mapping[TaskId, Task] | None = None) -> Mapping[TaskId, Task]:
    """Read-only view over a private copy of `items`."""
    return MappingProxyType(dict(items or {}))


@dataclass(frozen=True, slots=True)
class Draft:
    text: str = ""


@dataclass(frozen=True, slots=True)
class TaskListState:
    status: LoadStatus = LoadStatus.UNLOADED
    items: Mapping[TaskId, Task] = field(default_factory=frozen_items)
    next_page_cursor: str | None = None
    last_error_message: str | None = None
    # Bumped by every reload that starts a new fetch; page results carrying an
    # older generation are ignored.
    load_generation: int = 0
    # LOADING because of RequestNextPage rather than RequestReload.
    loading_next_page: bool = False

    @property
    def reload_in_flight(self) -> bool:
        return self.status == LoadStatus.LOADING and not self.loading_next_page


@dataclass(frozen=True, slots=True)
class State:
    draft: Draft = field(default_factory=Draft)
    task_list: TaskListState = field(default_factory=TaskListState)


def initial_state() -> State:
    """The state every session starts from: empty draft, nothing loaded."""
    return State()
