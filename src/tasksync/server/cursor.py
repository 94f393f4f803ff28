# src/tasksync/server/cursor.py

"""
Page tokens.

A token is the URL-safe base64 (no padding) of a record's 12 id bytes. Only
the canonical encoding decodes, so id_to_token(token_to_id(t)) == t for
every token accepted here.
"""

from __future__ import annotations

import base64
import binascii
import re

from .object_ids import OBJECT_ID_BYTES, is_valid_object_id

URLSAFE_BASE64_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class CursorDecodeError(ValueError):
    """The token is not a page token produced by id_to_token()."""


def id_to_token(object_id: str) -> str:
    if not is_valid_object_id(object_id):
        raise ValueError(f"not an object id: {object_id!r}")
    return base64.urlsafe_b64encode(bytes.fromhex(object_id)).rstrip(b"=").decode("ascii")


def token_to_id(token: str) -> str:
    if not isinstance(token, str) or not URLSAFE_BASE64_RE.match(token):
        raise CursorDecodeError(f"invalid page token: {token!r}")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise CursorDecodeError(f"invalid page token: {token!r}") from e

    if len(raw) != OBJECT_ID_BYTES:
        raise CursorDecodeError(f"invalid page token: {token!r}")

    object_id = raw.hex()
    if id_to_token(object_id) != token:
        # Non-canonical spelling of the same bytes (stray low bits).
        raise CursorDecodeError(f"invalid page token: {token!r}")
    return object_id
