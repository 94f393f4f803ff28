# src/tasksync/server/pagination.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.ports import TaskRepo
from .cursor import id_to_token, token_to_id


@dataclass(frozen=True, slots=True)
class Page:
    items: list[Any]
    next_page_token: str | None


def list_page(repo: TaskRepo, page_size: int, page_token: str | None = None) -> Page:
    """
    Read one page, newest first.

    Fetches page_size + 1 records: the extra one is not returned, it only
    tells whether another page exists, and its id becomes the next token
    (the next page starts with it). Raises CursorDecodeError for bad tokens.
    """
    page_size = max(1, int(page_size))
    boundary = token_to_id(page_token) if page_token else None

    rows = repo.list_tasks(limit=page_size + 1, max_id=boundary)
    items = rows[:page_size]
    next_page_token = id_to_token(rows[page_size].id) if len(rows) > page_size else None

    return Page(items=items, next_page_token=next_page_token)
