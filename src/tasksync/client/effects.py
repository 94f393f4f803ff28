# src/tasksync/client/effects.py

from __future__ import annotations

"""
Effect orchestrator.

Effects are the only place where the engine talks to the network. Each effect
is an async handler registered for an action type; the store starts one
handler run per matching dispatched action, after the reducer has applied it.

Handlers never touch state directly: they read immutable snapshots from the
context and report outcomes by dispatching further actions.

Workflows:
- RequestReload   -> GET /tasks                 -> PageReceived | PageLoadFailed
- RequestNextPage -> GET /tasks?pageToken=...   -> PageReceived | PageLoadFailed
- BeginCreate     -> ClearDraft, POST /tasks    -> CreateConfirmed | RequestReload | CreateFailed
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from ..core.ports import ApiClient
from .actions import (
    Action,
    BeginCreate,
    ClearDraft,
    CreateConfirmed,
    CreateFailed,
    PageLoadFailed,
    PageReceived,
    RequestNextPage,
    RequestReload,
)
from .api_client import ApiError, ensure_ok
from .ids import PermanentId
from .state import LoadStatus, State, Task

logger = logging.getLogger(__name__)

TASKS_PATH = "/tasks"

# Everything a single request can fail with: transport errors, non-2xx
# statuses, and bodies that are not JSON.
REQUEST_ERRORS = (httpx.HTTPError, ApiError, ValueError)


@dataclass(frozen=True, slots=True)
class EffectContext:
    """
    What a handler gets for one triggering action.

    previous_state / state are the snapshots immediately before and after the
    reducer applied `action`; get_state() reads the live state.
    """

    action: Action
    previous_state: State
    state: State
    get_state: Callable[[], State]
    dispatch: Callable[[Action], None]
    api: ApiClient
    page_size: int


EffectHandler = Callable[[EffectContext], Awaitable[None]]


class EffectRegistry:
    """Maps action types to the async handlers they trigger."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[EffectHandler]] = {}

    def register(self, action_type: type, handler: EffectHandler) -> None:
        self._handlers.setdefault(action_type, []).append(handler)

    def handlers_for(self, action: Action) -> list[EffectHandler]:
        return list(self._handlers.get(type(action), ()))


def _error_message(e: BaseException) -> str:
    return str(e) or e.__class__.__name__


def _parse_page(body: Any, generation: int) -> PageReceived:
    """
    Turn a GET /tasks body into PageReceived for load `generation`.

    Malformed shapes fall back instead of failing the load:
    - items missing / not a list -> empty page, no cursor
    - nextPageToken missing      -> items, no cursor
    """
    raw_items = body.get("items") if isinstance(body, Mapping) else None
    if not isinstance(raw_items, list):
        logger.error("Missing or invalid 'items' field in the API response")
        return PageReceived(items=(), cursor=None, load_generation=generation)

    items: list[Task] = []
    for raw in raw_items:
        try:
            items.append(Task.from_wire(raw))
        except ValueError as e:
            logger.error("Skipping malformed task in the API response: %s", e)

    if "nextPageToken" not in body:
        logger.error("Missing 'nextPageToken' field in the API response")
        return PageReceived(items=tuple(items), cursor=None, load_generation=generation)

    cursor = body["nextPageToken"]
    if cursor is not None and not isinstance(cursor, str):
        logger.error("Invalid 'nextPageToken' field in the API response: %r", cursor)
        cursor = None
    return PageReceived(items=tuple(items), cursor=cursor, load_generation=generation)


async def _fetch_page(ctx: EffectContext, page_token: str | None) -> None:
    generation = ctx.state.task_list.load_generation
    params = {"pageSize": str(ctx.page_size)}
    if page_token is not None:
        params["pageToken"] = page_token

    try:
        response = ensure_ok(await ctx.api.fetch(TASKS_PATH, params=params))
        body = response.json()
    except REQUEST_ERRORS as e:
        logger.warning("Loading tasks failed: %s", e)
        ctx.dispatch(PageLoadFailed(message=_error_message(e), load_generation=generation))
        return
    except Exception as e:
        logger.exception("Loading tasks failed unexpectedly")
        ctx.dispatch(PageLoadFailed(message=_error_message(e), load_generation=generation))
        return

    page = _parse_page(body, generation)
    if ctx.get_state().task_list.load_generation != generation:
        logger.info("Page for load #%d arrived after a reload, it will be ignored", generation)
    else:
        logger.debug("Page received: %d items, more=%s", len(page.items), page.cursor is not None)
    ctx.dispatch(page)


async def load_tasks_effect(ctx: EffectContext) -> None:
    if ctx.previous_state.task_list.reload_in_flight:
        logger.debug("Reload suppressed: a reload is already in flight")
        return
    await _fetch_page(ctx, page_token=None)


async def load_next_page_effect(ctx: EffectContext) -> None:
    task_list = ctx.previous_state.task_list
    if task_list.status != LoadStatus.LOADED or task_list.next_page_cursor is None:
        logger.debug("Next page skipped: status=%s cursor=%s", task_list.status, task_list.next_page_cursor)
        return
    await _fetch_page(ctx, page_token=task_list.next_page_cursor)


async def create_task_effect(ctx: EffectContext) -> None:
    action = ctx.action
    if not isinstance(action, BeginCreate):
        raise TypeError(f"create_task_effect cannot handle {action.__class__.__name__}")
    temp_id = action.temp_id
    text = ctx.state.draft.text

    # The input resets right away, whatever the request ends with.
    ctx.dispatch(ClearDraft())

    try:
        response = ensure_ok(await ctx.api.fetch(TASKS_PATH, method="POST", json={"text": text}))
        body = response.json()
    except REQUEST_ERRORS as e:
        logger.warning("Creating task %s failed: %s", temp_id, e)
        ctx.dispatch(CreateFailed(temp_id=temp_id, message=_error_message(e)))
        return
    except Exception as e:
        logger.exception("Creating task %s failed unexpectedly", temp_id)
        ctx.dispatch(CreateFailed(temp_id=temp_id, message=_error_message(e)))
        return

    item = body.get("item") if isinstance(body, Mapping) else None
    if not isinstance(item, Mapping):
        logger.error("Missing 'item' field in the API response")
    elif not isinstance(item.get("id"), str) or not item["id"]:
        logger.error("Missing 'id' field in the API response")
    else:
        logger.info("Task %s created as %s", temp_id, item["id"])
        ctx.dispatch(CreateConfirmed(temp_id=temp_id, real_id=PermanentId(item["id"])))
        return

    logger.error("Reloading to get correct task id...")
    ctx.dispatch(RequestReload())


def build_effects() -> EffectRegistry:
    registry = EffectRegistry()
    registry.register(RequestReload, load_tasks_effect)
    registry.register(RequestNextPage, load_next_page_effect)
    registry.register(BeginCreate, create_task_effect)
    return registry
