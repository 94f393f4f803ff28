# src/tasksync/server/schemas.py

"""Request shapes accepted by the /tasks API."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import HTTPError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, populate_by_name=True)


class TaskCreate(_Strict):
    text: str


class TaskEdit(_Strict):
    text: str | None = None
    is_complete: bool | None = Field(default=None, alias="isComplete")


class ListQuery(_Strict):
    page_size: str | None = Field(default=None, alias="pageSize", pattern=r"^\d+$")
    page_token: str | None = Field(default=None, alias="pageToken", pattern=r"^[A-Za-z0-9_-]+$")


def _describe(where: str, err: Any) -> str:
    loc = ".".join([where, *(str(p) for p in err.get("loc", ()))])
    return f"{loc} {err.get('msg', 'is invalid')}"


def validate(model: type[ModelT], data: Any, where: str) -> ModelT:
    """
    Validate `data` against `model`.

    Raises HTTPError(400) naming the first offending field, e.g.
    "Invalid request: Body.text Field required".
    """
    if data is None:
        data = {}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        first = _describe(where, errors[0]) if errors else f"{where} is invalid"
        raise HTTPError(400, f"Invalid request: {first}") from e
