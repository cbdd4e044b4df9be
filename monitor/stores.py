from __future__ import annotations

import threading
from typing import Dict, Iterator, Optional

from models import ResolvedRecord


class RecordStore:
    """Last-observed record per monitor key ('domain:TYPE').

    Owned by one Monitor for the process lifetime. Entries are replaced,
    never merged. Writes are guarded so lookups may run on worker threads.
    """

    def __init__(self):
        self._records: Dict[str, ResolvedRecord] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[ResolvedRecord]:
        with self._lock:
            return self._records.get(key)

    def put(self, key: str, record: ResolvedRecord) -> None:
        with self._lock:
            self._records[key] = record

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def keys(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._records))
