
import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from app.core.formatting import Count, Timestamp, format_value
from app.core.inspection import signatures
from app.core.inspection.signatures import Category

logger = logging.getLogger(__name__)

Counter = Callable[[], Dict[Category, int]]

@dataclass(frozen=True)
class StatsSnapshot:
    counts: Mapping[Category, int]
    refreshed_at: datetime

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def count(self, category: Category) -> Count:
        return Count(self.counts.get(category, 0))

    def describe(self) -> Dict[str, str]:
        summary = {category.value: format_value(self.count(category)) for category in Category}
        summary["total"] = format_value(Count(self.total))
        summary["refreshed"] = format_value(Timestamp(self.refreshed_at))
        return summary


class StatsCache:
    """
    Read-mostly cache of artifact counts per category.
    Callers get immutable snapshots, refresh() replaces the current one.
    """

    def __init__(self, counter: Counter):
        self._counter = counter
        self._snapshot: Optional[StatsSnapshot] = None
        self._lock = threading.Lock()

    def refresh(self) -> StatsSnapshot:
        """
        Recounts and stores a new snapshot.
        A failing counter raises and leaves the previous snapshot in place.
        """
        counts = self._counter()
        snapshot = StatsSnapshot(counts=MappingProxyType(dict(counts)), refreshed_at=datetime.now())
        with self._lock:
            self._snapshot = snapshot
        logger.info(f"Statistics refreshed: {snapshot.total} artifacts")
        return snapshot

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            current = self._snapshot
        if current is None:
            return self.refresh()
        return current


def directory_counter(download_dir: str) -> Counter:
    """Counts the files of a download directory by signature category."""
    def count() -> Dict[Category, int]:
        totals = {category: 0 for category in Category}
        with os.scandir(download_dir) as it:
            for entry in it:
                if not entry.is_file():
                    continue
                sign = signatures.classify_file_prefix(entry.path)
                totals[sign.category()] += 1
        return totals
    return count
