# src/tasksync/server/object_ids.py

"""
Permanent task ids.

12 bytes rendered as 24 lowercase hex chars:
- 4 bytes: creation time, seconds since epoch (big-endian)
- 5 bytes: random, fixed per process
- 3 bytes: counter, random start

Fixed-width lowercase hex sorts the same way as the underlying bytes, so ids
compare (as strings) in creation order within a process.
"""

from __future__ import annotations

import os
import re
import secrets
import threading
import time

OBJECT_ID_BYTES = 12

_OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$")

_PROCESS_RANDOM = os.urandom(5)
_counter = secrets.randbelow(0xFFFFFF)
_counter_lock = threading.Lock()


def new_object_id(now_ts: float | None = None) -> str:
    global _counter
    if now_ts is None:
        now_ts = time.time()

    with _counter_lock:
        _counter = (_counter + 1) % 0x1000000
        count = _counter

    raw = (
        int(now_ts).to_bytes(4, "big")
        + _PROCESS_RANDOM
        + count.to_bytes(3, "big")
    )
    return raw.hex()


def is_valid_object_id(value: object) -> bool:
    return isinstance(value, str) and bool(_OBJECT_ID_RE.match(value))
