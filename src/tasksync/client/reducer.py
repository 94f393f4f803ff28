# src/tasksync/client/reducer.py

"""
The reducer: the only writer of client state.

reduce(state, action) -> state is pure and total:
- never raises, never performs I/O;
- never mutates its input: changed regions get new values, the rest is shared;
- actions referring to an id that is not present are no-ops.
"""

from __future__ import annotations

from dataclasses import replace

from .actions import (
    Action,
    BeginCreate,
    ClearDraft,
    CreateConfirmed,
    CreateFailed,
    DeleteTask,
    EditDraft,
    EditTask,
    PageLoadFailed,
    PageReceived,
    RequestNextPage,
    RequestReload,
)
from .state import Draft, LoadStatus, State, Task, TaskListState, frozen_items


def _with_items(state: State, items: dict) -> State:
    return replace(state, task_list=replace(state.task_list, items=frozen_items(items)))


def _is_stale(task_list: TaskListState, load_generation: int | None) -> bool:
    return load_generation is not None and load_generation != task_list.load_generation


def reduce(state: State, action: Action) -> State:
    task_list = state.task_list

    if isinstance(action, RequestReload):
        # A reload already in flight answers this one too; anything else
        # (including a next-page fetch) is superseded by a new generation.
        generation = task_list.load_generation
        if not task_list.reload_in_flight:
            generation += 1
        return replace(
            state,
            task_list=TaskListState(
                status=LoadStatus.LOADING,
                items=frozen_items(),
                next_page_cursor=None,
                last_error_message=None,
                load_generation=generation,
            ),
        )

    if isinstance(action, RequestNextPage):
        if task_list.status != LoadStatus.LOADED or task_list.next_page_cursor is None:
            return state
        return replace(
            state,
            task_list=replace(task_list, status=LoadStatus.LOADING, loading_next_page=True),
        )

    if isinstance(action, PageReceived):
        if _is_stale(task_list, action.load_generation):
            return state
        items = dict(task_list.items)
        for item in action.items:
            items[item.id] = item
        return replace(
            state,
            task_list=replace(
                task_list,
                status=LoadStatus.LOADED,
                items=frozen_items(items),
                next_page_cursor=action.cursor,
                last_error_message=None,
                loading_next_page=False,
            ),
        )

    if isinstance(action, PageLoadFailed):
        if _is_stale(task_list, action.load_generation):
            return state
        return replace(
            state,
            task_list=replace(
                task_list,
                status=LoadStatus.ERROR,
                last_error_message=action.message,
                loading_next_page=False,
            ),
        )

    if isinstance(action, EditDraft):
        return replace(state, draft=Draft(text=action.text))

    if isinstance(action, ClearDraft):
        if state.draft.text == "":
            return state
        return replace(state, draft=Draft(text=""))

    if isinstance(action, BeginCreate):
        items = dict(task_list.items)
        items[action.temp_id] = Task(
            id=action.temp_id,
            text=state.draft.text,
            is_complete=False,
            is_pending=True,
        )
        return _with_items(state, items)

    if isinstance(action, CreateConfirmed):
        local_task = task_list.items.get(action.temp_id)
        if local_task is None:
            return state
        items = dict(task_list.items)
        del items[action.temp_id]
        items[action.real_id] = replace(local_task, id=action.real_id, is_pending=False)
        return _with_items(state, items)

    if isinstance(action, CreateFailed):
        if action.temp_id not in task_list.items:
            return state
        items = dict(task_list.items)
        del items[action.temp_id]
        return _with_items(state, items)

    if isinstance(action, EditTask):
        task = task_list.items.get(action.id)
        changes = action.patch.changes()
        if task is None or not changes:
            return state
        items = dict(task_list.items)
        items[action.id] = replace(task, **changes)
        return _with_items(state, items)

    if isinstance(action, DeleteTask):
        if action.id not in task_list.items:
            return state
        items = dict(task_list.items)
        del items[action.id]
        return _with_items(state, items)

    # Unknown action
    return state
