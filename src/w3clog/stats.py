"""
Process-wide counters & timings.
W3C lines only carry per-request values; totals across requests live here.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional

from pydantic import BaseModel


class TimingStat(BaseModel):
    count: int = 0
    total: int = 0
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0

    def add(self, duration_ms: int) -> None:
        self.count += 1
        self.total += duration_ms
        self.minimum = duration_ms if self.minimum is None else min(self.minimum, duration_ms)
        self.maximum = duration_ms if self.maximum is None else max(self.maximum, duration_ms)

    def merge(self, other: "TimingStat") -> None:
        if not other.count:
            return
        self.count += other.count
        self.total += other.total
        self.minimum = other.minimum if self.minimum is None else min(self.minimum, other.minimum)
        self.maximum = other.maximum if self.maximum is None else max(self.maximum, other.maximum)


class StatsRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = {}
        self._timings: Dict[str, TimingStat] = {}

    def incr(self, name: str, count: int = 1) -> int:
        with self._lock:
            value = self._counters.get(name, 0) + count
            self._counters[name] = value
            return value

    def add_timing(self, name: str, duration_ms: int) -> int:
        """Record one sample; returns the sample count for ``name``."""
        with self._lock:
            stat = self._timings.setdefault(name, TimingStat())
            stat.add(duration_ms)
            return stat.count

    def add_timing_stat(self, name: str, timing: TimingStat) -> int:
        with self._lock:
            stat = self._timings.setdefault(name, TimingStat())
            stat.merge(timing)
            return stat.count

    def get_counter_stats(self, reset: bool = False) -> Dict[str, int]:
        with self._lock:
            snapshot = dict(self._counters)
            if reset:
                self._counters.clear()
            return snapshot

    def get_timing_stats(self, reset: bool = False) -> Dict[str, TimingStat]:
        with self._lock:
            snapshot = {k: v.model_copy() for k, v in self._timings.items()}
            if reset:
                self._timings.clear()
            return snapshot


STATS = StatsRegistry()
