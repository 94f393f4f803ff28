# src/tasksync/client/selectors.py

from __future__ import annotations

from collections.abc import Callable, Mapping

from .ids import TaskId, task_id_sort_key
from .state import LoadStatus, State, Task


def get_draft_text(state: State) -> str:
    return state.draft.text


def get_task_by_id(state: State, task_id: TaskId) -> Task | None:
    return state.task_list.items.get(task_id)


def get_tasks_status(state: State) -> LoadStatus:
    return state.task_list.status


def get_last_error_message(state: State) -> str | None:
    return state.task_list.last_error_message


def get_next_page_cursor(state: State) -> str | None:
    return state.task_list.next_page_cursor


def has_more_pages(state: State) -> bool:
    return state.task_list.next_page_cursor is not None


def make_get_tasks() -> Callable[[State], tuple[Task, ...]]:
    """
    Build a selector returning tasks ordered by ascending id.

    The result is cached against the identity of the items mapping: the
    reducer replaces the mapping on every change, so an unchanged mapping
    means an unchanged result. Each call returns an independent cache.
    """
    last_items: Mapping[TaskId, Task] | None = None
    last_result: tuple[Task, ...] = ()

    def get_tasks(state: State) -> tuple[Task, ...]:
        nonlocal last_items, last_result
        items = state.task_list.items
        if items is not last_items:
            last_result = tuple(items[k] for k in sorted(items, key=task_id_sort_key))
            last_items = items
        return last_result

    return get_tasks
