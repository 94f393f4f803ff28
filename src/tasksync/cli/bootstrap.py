# src/tasksync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- picks the API backend (remote base URL, or the in-process server over the
  local SQLite store when no URL is configured),
- wires the API client into a Store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..client.api_client import HttpApiClient
from ..client.ids import TemporaryIdFactory
from ..client.selectors import make_get_tasks
from ..client.state import State, Task
from ..client.store import Store, configure_store
from ..config import Settings, get_settings
from ..server.routes import TaskRoutes
from ..server.task_store import TaskStore

logger = logging.getLogger(__name__)

LOCAL_BASE_URL = "http://tasksync.local"


@dataclass
class ConsoleSession:
    settings: Settings
    api: HttpApiClient
    store: Store
    new_temp_id: TemporaryIdFactory = field(default_factory=TemporaryIdFactory)
    get_tasks: Callable[[State], tuple[Task, ...]] = field(default_factory=make_get_tasks)

    def tasks(self) -> tuple[Task, ...]:
        return self.get_tasks(self.store.get_state())

    async def aclose(self) -> None:
        await self.api.aclose()


def build_api_client(settings: Settings) -> HttpApiClient:
    if settings.uses_local_server:
        task_store = TaskStore(settings.tasks_db_path)
        routes = TaskRoutes(task_store, default_page_size=settings.page_size)
        logger.info("Using in-process task server db=%s", settings.tasks_db_path)
        return HttpApiClient(
            LOCAL_BASE_URL,
            timeout=settings.http_timeout_seconds,
            transport=routes.transport(),
        )

    logger.info("Using task API at %s", settings.api_base_url)
    return HttpApiClient(settings.api_base_url, timeout=settings.http_timeout_seconds)


def create_session(*, settings: Settings | None = None) -> ConsoleSession:
    """
    Create a ConsoleSession from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    api = build_api_client(settings)
    store = configure_store(api, page_size=settings.page_size)
    return ConsoleSession(settings=settings, api=api, store=store)
