"""TTL cache for analysis results, keyed by a dataset fingerprint."""
from __future__ import annotations

import hashlib
import json
import threading
import time
from collections.abc import Callable, Sequence
from typing import Any

from chartwise.models.dataset import ColumnDescriptor, Row


def make_cache_key(rows: Sequence[Row], columns: Sequence[ColumnDescriptor | str]) -> str:
    """sha256 over row count, column count, sorted column names and the first row."""
    names = sorted(c if isinstance(c, str) else c.name for c in columns)
    fingerprint = {
        "rowCount": len(rows),
        "columnCount": len(columns),
        "columns": ",".join(names),
        "firstRow": rows[0] if rows else None,
    }
    encoded = json.dumps(fingerprint, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class InsightCache:
    def __init__(
        self,
        ttl: float = 1800.0,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.enabled = enabled
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at > self.ttl:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
