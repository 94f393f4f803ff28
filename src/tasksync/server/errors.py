# src/tasksync/server/errors.py

from __future__ import annotations


class HTTPError(Exception):
    """An error that maps to a client-visible HTTP status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = int(status)
        self.message = message

    def __repr__(self) -> str:
        return f"HTTPError({self.status}, {self.message!r})"


class NotFoundError(HTTPError):
    def __init__(self, message: str) -> None:
        super().__init__(404, message)
