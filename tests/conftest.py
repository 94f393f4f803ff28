# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasksync.client.effects import build_effects
from tasksync.client.store import Store
from tasksync.server.routes import TaskRoutes
from tasksync.server.task_store import TaskStore

from .fakes import FakeApiClient, RecordingReducer


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the CLI session.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="tasksync-test",
        log_level="DEBUG",
        api_base_url="",
        http_timeout_seconds=5.0,
        page_size=5,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        uses_local_server=True,
    )


@pytest.fixture()
def task_store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def routes(task_store: TaskStore) -> TaskRoutes:
    return TaskRoutes(task_store, default_page_size=10)


@pytest.fixture()
def fake_api() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture()
def recorder() -> RecordingReducer:
    return RecordingReducer()


@pytest.fixture()
def store(fake_api: FakeApiClient, recorder: RecordingReducer) -> Store:
    """Store with the real reducer and effects, talking to the scripted API."""
    return Store(recorder, build_effects(), fake_api, page_size=5)
