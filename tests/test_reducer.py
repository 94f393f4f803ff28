# tests/test_reducer.py

from __future__ import annotations

from functools import reduce as fold

import pytest

from tasksync.client.actions import (
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
from tasksync.client.ids import PermanentId, TemporaryId
from tasksync.client.reducer import reduce
from tasksync.client.state import LoadStatus, Task, TaskPatch, initial_state

T1 = TemporaryId("tmp-1")
R1 = PermanentId("real-42")


def _task(id_value: str, text: str = "t") -> Task:
    return Task(id=PermanentId(id_value), text=text)


def test_initial_state() -> None:
    state = initial_state()
    assert state.draft.text == ""
    assert state.task_list.status == LoadStatus.UNLOADED
    assert dict(state.task_list.items) == {}
    assert state.task_list.next_page_cursor is None
    assert state.task_list.last_error_message is None


def test_reload_clears_items_and_sets_loading() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("a"),), cursor="tok"))
    state = reduce(state, PageLoadFailed("old"))

    state = reduce(state, RequestReload())

    assert state.task_list.status == LoadStatus.LOADING
    assert dict(state.task_list.items) == {}
    assert state.task_list.next_page_cursor is None
    assert state.task_list.last_error_message is None


def test_pages_merge_instead_of_replacing() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("b"), _task("a")), cursor="tok"))
    state = reduce(state, PageReceived(items=(_task("a", "renamed"),), cursor=None))

    assert state.task_list.status == LoadStatus.LOADED
    assert set(state.task_list.items) == {PermanentId("a"), PermanentId("b")}
    assert state.task_list.items[PermanentId("a")].text == "renamed"
    assert state.task_list.next_page_cursor is None


def test_page_load_failed_keeps_items() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("a"),), cursor="tok"))
    state = reduce(state, PageLoadFailed("HTTP Error: Bad Gateway (502)"))

    assert state.task_list.status == LoadStatus.ERROR
    assert state.task_list.last_error_message == "HTTP Error: Bad Gateway (502)"
    assert PermanentId("a") in state.task_list.items
    assert state.task_list.next_page_cursor == "tok"


def test_request_next_page_only_when_loaded_with_cursor() -> None:
    unloaded = initial_state()
    assert reduce(unloaded, RequestNextPage()) is unloaded

    last_page = reduce(unloaded, PageReceived(items=(_task("a"),), cursor=None))
    assert reduce(last_page, RequestNextPage()) is last_page

    more = reduce(unloaded, PageReceived(items=(_task("a"),), cursor="tok"))
    loading = reduce(more, RequestNextPage())
    assert loading.task_list.status == LoadStatus.LOADING
    assert loading.task_list.items == more.task_list.items
    assert loading.task_list.next_page_cursor == "tok"


def test_page_received_clears_a_previous_error() -> None:
    state = reduce(initial_state(), PageLoadFailed("HTTP Error: Bad Gateway (502)"))
    state = reduce(state, PageReceived(items=(_task("a"),), cursor=None))

    assert state.task_list.status == LoadStatus.LOADED
    assert state.task_list.last_error_message is None


def test_reload_supersedes_a_next_page_fetch() -> None:
    state = reduce(initial_state(), RequestReload())
    state = reduce(state, PageReceived(items=(_task("d"),), cursor="tok", load_generation=1))
    state = reduce(state, RequestNextPage())
    assert state.task_list.loading_next_page is True
    assert state.task_list.reload_in_flight is False

    state = reduce(state, RequestReload())
    assert state.task_list.load_generation == 2
    assert state.task_list.reload_in_flight is True

    # Late results of the next-page fetch change nothing.
    assert reduce(state, PageReceived(items=(_task("b"),), cursor=None, load_generation=1)) is state
    assert reduce(state, PageLoadFailed("late", load_generation=1)) is state

    fresh = reduce(state, PageReceived(items=(_task("d"),), cursor="tok", load_generation=2))
    assert list(fresh.task_list.items) == [PermanentId("d")]
    assert fresh.task_list.next_page_cursor == "tok"
    assert fresh.task_list.loading_next_page is False


def test_reload_during_reload_keeps_the_generation() -> None:
    first = reduce(initial_state(), RequestReload())
    again = reduce(first, RequestReload())

    assert again.task_list.load_generation == first.task_list.load_generation
    loaded = reduce(again, PageReceived(items=(_task("a"),), cursor=None, load_generation=1))
    assert loaded.task_list.status == LoadStatus.LOADED


def test_next_page_failure_clears_the_next_page_flag() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("a"),), cursor="tok"))
    state = reduce(state, RequestNextPage())
    state = reduce(state, PageLoadFailed("HTTP Error: Bad Gateway (502)", load_generation=0))

    assert state.task_list.status == LoadStatus.ERROR
    assert state.task_list.loading_next_page is False


def test_edit_and_clear_draft() -> None:
    state = reduce(initial_state(), EditDraft("buy milk"))
    assert state.draft.text == "buy milk"

    cleared = reduce(state, ClearDraft())
    assert cleared.draft.text == ""


def test_clear_draft_is_idempotent() -> None:
    state = reduce(initial_state(), EditDraft("x"))
    once = reduce(state, ClearDraft())
    twice = reduce(once, ClearDraft())
    assert twice == once
    assert twice is once


def test_begin_create_inserts_pending_task_from_draft() -> None:
    state = reduce(initial_state(), EditDraft("buy milk"))
    state = reduce(state, BeginCreate(T1))

    task = state.task_list.items[T1]
    assert task == Task(id=T1, text="buy milk", is_complete=False, is_pending=True)
    # The draft is cleared by the create workflow, not by the reducer.
    assert state.draft.text == "buy milk"


def test_create_then_confirm_moves_task_to_permanent_id() -> None:
    state = reduce(initial_state(), EditDraft("buy milk"))
    state = reduce(state, BeginCreate(T1))
    state = reduce(state, CreateConfirmed(T1, R1))

    assert T1 not in state.task_list.items
    assert list(state.task_list.items) == [R1]
    task = state.task_list.items[R1]
    assert task.id == R1
    assert task.text == "buy milk"
    assert task.is_pending is False


def test_create_failed_rolls_back() -> None:
    state = reduce(initial_state(), EditDraft("buy milk"))
    state = reduce(state, BeginCreate(T1))
    state = reduce(state, CreateFailed(T1, "HTTP Error: Internal Server Error (500)"))

    assert T1 not in state.task_list.items
    assert len(state.task_list.items) == 0


def test_confirm_or_fail_for_absent_temp_id_is_noop() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("a"),), cursor=None))
    assert reduce(state, CreateConfirmed(T1, R1)) is state
    assert reduce(state, CreateFailed(T1)) is state


def test_late_confirmation_does_not_resurrect_deleted_task() -> None:
    state = reduce(initial_state(), BeginCreate(T1))
    state = reduce(state, DeleteTask(T1))
    state = reduce(state, CreateConfirmed(T1, R1))
    assert dict(state.task_list.items) == {}


def test_edit_task_merges_patch() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("a", "old"),), cursor=None))

    state = reduce(state, EditTask(PermanentId("a"), TaskPatch(is_complete=True)))
    assert state.task_list.items[PermanentId("a")] == Task(
        id=PermanentId("a"), text="old", is_complete=True
    )

    state = reduce(state, EditTask(PermanentId("a"), TaskPatch(text="new")))
    assert state.task_list.items[PermanentId("a")].text == "new"
    assert state.task_list.items[PermanentId("a")].is_complete is True


def test_edit_task_absent_or_empty_patch_is_noop() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("a"),), cursor=None))
    assert reduce(state, EditTask(PermanentId("zzz"), TaskPatch(text="x"))) is state
    assert reduce(state, EditTask(PermanentId("a"), TaskPatch())) is state


def test_delete_task() -> None:
    state = reduce(initial_state(), PageReceived(items=(_task("a"), _task("b")), cursor=None))
    state = reduce(state, DeleteTask(PermanentId("a")))
    assert list(state.task_list.items) == [PermanentId("b")]

    assert reduce(state, DeleteTask(PermanentId("a"))) is state


def test_unknown_action_returns_same_state() -> None:
    state = initial_state()
    assert reduce(state, object()) is state  # type: ignore[arg-type]


def test_reducer_does_not_mutate_its_input() -> None:
    before = reduce(initial_state(), PageReceived(items=(_task("a"),), cursor=None))
    items_before = dict(before.task_list.items)

    after = reduce(before, EditDraft("x"))
    after = reduce(after, BeginCreate(T1))
    after = reduce(after, DeleteTask(PermanentId("a")))

    assert dict(before.task_list.items) == items_before
    assert before.draft.text == ""
    assert after.task_list.items is not before.task_list.items


def test_items_mapping_is_read_only() -> None:
    state = reduce(initial_state(), BeginCreate(T1))
    with pytest.raises(TypeError):
        state.task_list.items[R1] = Task(id=R1, text="sneaky")  # type: ignore[index]


def test_replaying_the_same_actions_gives_the_same_state() -> None:
    actions = [
        RequestReload(),
        PageReceived(items=(_task("b"), _task("a")), cursor="tok"),
        EditDraft("buy milk"),
        BeginCreate(T1),
        ClearDraft(),
        EditDraft("walk dog"),
        BeginCreate(TemporaryId("tmp-2")),
        CreateConfirmed(T1, R1),
        CreateFailed(TemporaryId("tmp-2")),
        EditTask(R1, TaskPatch(is_complete=True)),
        DeleteTask(PermanentId("b")),
        RequestNextPage(),
        PageLoadFailed("boom"),
    ]

    first = fold(reduce, actions, initial_state())
    second = fold(reduce, actions, initial_state())

    assert first == second
    assert set(first.task_list.items) == {PermanentId("a"), R1}
    assert first.task_list.status == LoadStatus.ERROR
