# src/tasksync/client/ids.py

"""
Task identity on the client.

A task is known either by a temporary id (minted locally when it is created
optimistically, never sent to the server) or by the permanent id the server
assigned to it. The two never coexist for the same logical task: the reducer
swaps one for the other in a single step.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TemporaryId:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class PermanentId:
    value: str

    def __str__(self) -> str:
        return self.value


TaskId = TemporaryId | PermanentId


def task_id_sort_key(task_id: TaskId) -> tuple[int, str]:
    """Ascending order: confirmed tasks by permanent id, then pending ones."""
    if isinstance(task_id, PermanentId):
        return (0, task_id.value)
    return (1, task_id.value)


class TemporaryIdFactory:
    """Mints session-unique temporary ids: tmp-1, tmp-2, ..."""

    def __init__(self, prefix: str = "tmp") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> TemporaryId:
        return TemporaryId(f"{self._prefix}-{next(self._counter)}")
