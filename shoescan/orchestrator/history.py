import os
from typing import List
from shoescan.orchestrator.contracts import ScanResult

# product constant; override with HISTORY_LIMIT env or the constructor
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "5"))


class SessionHistory:
    """Most-recent-first log of scans, never longer than `limit`."""

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"history limit must be >= 1, got {limit}")
        self.limit = limit
        self._items: List[ScanResult] = []

    def record(self, result: ScanResult):
        self._items.insert(0, result)
        del self._items[self.limit:]

    def snapshot(self) -> List[ScanResult]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
