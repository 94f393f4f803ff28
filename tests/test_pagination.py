# tests/test_pagination.py

from __future__ import annotations

import pytest

from tasksync.server.cursor import CursorDecodeError, id_to_token
from tasksync.server.pagination import list_page
from tasksync.server.task_store import TaskStore


class FakeTaskRepo:
    """Only the range read, with the requested limits captured."""

    def __init__(self, ids: list[str]) -> None:
        self.ids = sorted(ids, reverse=True)
        self.limits: list[int] = []

    def list_tasks(self, *, limit: int, max_id: str | None = None):
        self.limits.append(limit)
        rows = [i for i in self.ids if max_id is None or i <= max_id]
        return [_Row(i) for i in rows[:limit]]


class _Row:
    def __init__(self, id: str) -> None:
        self.id = id


def _ids(n: int) -> list[str]:
    return [f"{i:024x}" for i in range(1, n + 1)]


def test_lookahead_reads_one_extra_record() -> None:
    repo = FakeTaskRepo(_ids(4))
    page = list_page(repo, 3)

    assert repo.limits == [4]
    assert [r.id for r in page.items] == [f"{i:024x}" for i in (4, 3, 2)]
    assert page.next_page_token == id_to_token(f"{1:024x}")


@pytest.mark.parametrize("available", [0, 1, 3])
def test_no_token_when_everything_fits(available: int) -> None:
    page = list_page(FakeTaskRepo(_ids(available)), 3)
    assert len(page.items) == available
    assert page.next_page_token is None


def test_walks_all_pages_without_gaps_or_repeats(task_store: TaskStore) -> None:
    ids = {task_store.add_task(f"t{i}").id for i in range(7)}

    seen: list[str] = []
    token = None
    pages = 0
    while True:
        page = list_page(task_store, 3, token)
        seen.extend(t.id for t in page.items)
        pages += 1
        token = page.next_page_token
        if token is None:
            break

    assert pages == 3
    assert seen == sorted(ids, reverse=True)


def test_empty_collection(task_store: TaskStore) -> None:
    page = list_page(task_store, 10)
    assert page.items == []
    assert page.next_page_token is None


def test_bad_token_is_rejected(task_store: TaskStore) -> None:
    with pytest.raises(CursorDecodeError):
        list_page(task_store, 10, "not*a*token")
