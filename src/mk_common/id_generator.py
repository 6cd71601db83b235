"""Snowflake-style IDs for orders ("ord_…") and invoices ("inv_…").

Layout (63 bits, decimal string):
  41 bits  ms since 2025-01-01T00:00:00Z
  10 bits  worker id (ID_WORKER_ID, distinct per API replica)
  12 bits  per-ms sequence

IDs from one worker sort by creation time. If the wall clock steps back,
the last seen timestamp is reused so IDs stay monotonic.
"""

import threading
import time

from config.settings import settings

_EPOCH_MS = 1_735_689_600_000
_WORKER_BITS = 10
_SEQUENCE_BITS = 12
_MAX_WORKER = (1 << _WORKER_BITS) - 1
_MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1


class SnowflakeIdGenerator:
    def __init__(self, worker_id: int = 0) -> None:
        if not 0 <= worker_id <= _MAX_WORKER:
            raise ValueError(f"worker_id must be 0-{_MAX_WORKER}, got {worker_id}")
        self._worker_id = worker_id
        self._last_ms = -1
        self._sequence = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now = max(int(time.time() * 1000), self._last_ms)
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & _MAX_SEQUENCE
                if self._sequence == 0:
                    # 4096 ids in one ms: borrow the next millisecond
                    now += 1
            else:
                self._sequence = 0
            self._last_ms = now
            value = (
                (now - _EPOCH_MS) << (_WORKER_BITS + _SEQUENCE_BITS)
                | self._worker_id << _SEQUENCE_BITS
                | self._sequence
            )
        return str(value)


_generator = SnowflakeIdGenerator(settings.ID_WORKER_ID)


def generate_id(prefix: str = "") -> str:
    return f"{prefix}{_generator.next_id()}"
