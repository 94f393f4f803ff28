# src/tasksync/server/routes.py

from __future__ import annotations

"""
/tasks API handler.

TaskRoutes.handle() maps an httpx.Request to an httpx.Response, so the whole
API can run in-process behind httpx.MockTransport (see transport()):
- GET    /tasks?pageSize=&pageToken=  -> 200 {items, nextPageToken}
- POST   /tasks {text}                -> 201 {item}
- PATCH  /tasks/{id} {text?, isComplete?} -> 204
- DELETE /tasks/{id}                  -> 200 {item}

Errors are JSON bodies {"error": message}: 400 for invalid input, 404 for
unknown ids/routes, 405 for unsupported methods, 500 for anything unexpected.
"""

import json
import logging
from typing import Any

import httpx

from ..core.ports import TaskRepo
from .cursor import CursorDecodeError
from .errors import HTTPError, NotFoundError
from .object_ids import is_valid_object_id
from .pagination import list_page
from .schemas import ListQuery, TaskCreate, TaskEdit, validate

logger = logging.getLogger(__name__)

COLLECTION = "tasks"


def _json_response(status: int, payload: Any) -> httpx.Response:
    return httpx.Response(status, json=payload)


def _read_body(request: httpx.Request) -> Any:
    raw = request.content
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise HTTPError(400, "Invalid request: Body is not valid JSON") from e


def _task_id_param(raw: str) -> str:
    if not is_valid_object_id(raw):
        raise HTTPError(400, f'Invalid request: Path Params.taskId "{raw}" is not a valid id')
    return raw


class TaskRoutes:
    def __init__(self, store: TaskRepo, *, default_page_size: int = 10) -> None:
        self._store = store
        self._default_page_size = max(1, int(default_page_size))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method.upper()
        parts = [p for p in request.url.path.split("/") if p]

        try:
            if not parts or parts[0] != COLLECTION or len(parts) > 2:
                raise NotFoundError(f"No route for {method} {request.url.path}")

            if len(parts) == 1:
                if method == "GET":
                    return self.list_tasks(request)
                if method == "POST":
                    return self.create_task(request)
                raise HTTPError(405, f"Method {method} not allowed on /{COLLECTION}")

            task_id = parts[1]
            if method == "PATCH":
                return self.edit_task(request, task_id)
            if method == "DELETE":
                return self.delete_task(request, task_id)
            raise HTTPError(405, f"Method {method} not allowed on /{COLLECTION}/{{taskId}}")

        except HTTPError as e:
            logger.info("%s %s -> %s %s", method, request.url.path, e.status, e.message)
            return _json_response(e.status, {"error": e.message})
        except Exception:
            logger.exception("Unhandled error on %s %s", method, request.url.path)
            return _json_response(500, {"error": "Internal server error"})

    # ---- handlers ----

    def list_tasks(self, request: httpx.Request) -> httpx.Response:
        query = validate(ListQuery, dict(request.url.params), "Query")
        page_size = int(query.page_size) if query.page_size else self._default_page_size

        try:
            page = list_page(self._store, page_size, query.page_token)
        except CursorDecodeError as e:
            raise HTTPError(400, f"Invalid request: Query.pageToken {e}") from e

        return _json_response(
            200,
            {
                "items": [t.to_wire() for t in page.items],
                "nextPageToken": page.next_page_token,
            },
        )

    def create_task(self, request: httpx.Request) -> httpx.Response:
        body = validate(TaskCreate, _read_body(request), "Body")

        task = self._store.add_task(body.text)
        logger.info("Task created id=%s", task.id)
        return _json_response(201, {"item": task.to_wire()})

    def edit_task(self, request: httpx.Request, raw_id: str) -> httpx.Response:
        task_id = _task_id_param(raw_id)
        body = validate(TaskEdit, _read_body(request), "Body")

        if not self._store.update_task(task_id, text=body.text, is_complete=body.is_complete):
            raise NotFoundError(f'No task with id "{task_id}"')
        return httpx.Response(204)

    def delete_task(self, request: httpx.Request, raw_id: str) -> httpx.Response:
        task_id = _task_id_param(raw_id)

        task = self._store.delete_task(task_id)
        if task is None:
            raise NotFoundError(f'No task with id "{task_id}"')
        logger.info("Task deleted id=%s", task_id)
        return _json_response(200, {"item": task.to_wire()})
