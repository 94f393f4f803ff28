"""
Server side of the task API.

Components:
- object_ids.py: ordered 12-byte ids (24 hex chars)
- cursor.py: URL-safe page tokens
- task_store.py: SQLite-backed storage
- pagination.py: lookahead-by-one page reads
- schemas.py / errors.py: request validation and HTTP errors
- routes.py: /tasks handler usable as an httpx transport
"""
