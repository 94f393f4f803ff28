# src/tasksync/client/actions.py

"""
Actions: immutable descriptions of an intent or an event.

One class per kind, each carrying exactly the fields it needs. The reducer and
the effect orchestrator both consume them; nothing else mutates state.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ids import PermanentId, TaskId, TemporaryId
from .state import Task, TaskPatch


@dataclass(frozen=True, slots=True)
class RequestReload:
    """Drop everything loaded so far and fetch the first page again."""


@dataclass(frozen=True, slots=True)
class RequestNextPage:
    """Fetch the page after the current cursor and merge it in."""


@dataclass(frozen=True, slots=True)
class PageReceived:
    items: tuple[Task, ...]
    cursor: str | None
    # None: apply regardless of which load is current.
    load_generation: int | None = None


@dataclass(frozen=True, slots=True)
class PageLoadFailed:
    message: str | None = None
    load_generation: int | None = None


@dataclass(frozen=True, slots=True)
class EditDraft:
    text: str


@dataclass(frozen=True, slots=True)
class ClearDraft:
    pass


@dataclass(frozen=True, slots=True)
class BeginCreate:
    temp_id: TemporaryId


@dataclass(frozen=True, slots=True)
class CreateConfirmed:
    temp_id: TemporaryId
    real_id: PermanentId


@dataclass(frozen=True, slots=True)
class CreateFailed:
    temp_id: TemporaryId
    message: str | None = None


@dataclass(frozen=True, slots=True)
class EditTask:
    id: TaskId
    patch: TaskPatch


@dataclass(frozen=True, slots=True)
class DeleteTask:
    id: TaskId


Action = (
    RequestReload
    | RequestNextPage
    | PageReceived
    | PageLoadFailed
    | EditDraft
    | ClearDraft
    | BeginCreate
    | CreateConfirmed
    | CreateFailed
    | EditTask
    | DeleteTask
)
