"""
Per-request W3C field accumulation.
Collects field writes for one unit of work and emits them as a single W3C line.
File: src/w3clog/accumulator.py
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, TypeVar, Union

from .config import W3CConfig
from .reporter import DEFAULT_HEADER_REPEAT_MS, W3CReporter
from .schemas import FieldSet, FieldValue, IntValue, StringValue, coerce_value
from .sinks import FileSink, Sink
from .stats import STATS, StatsRegistry, TimingStat

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class _WorkUnit:
    """Fields of one unit of work, bound to the thread and asyncio task that created it."""
    __slots__ = ("thread_id", "task", "values")

    def __init__(self) -> None:
        self.thread_id = threading.get_ident()
        self.task = _current_task()
        self.values: Dict[str, FieldValue] = {}

    def owned_here(self) -> bool:
        # task identity, not id(): ids of finished tasks get reused
        return self.thread_id == threading.get_ident() and self.task is _current_task()


class FieldAccumulator:
    """
    Implements a W3C Extended Log with convenience methods for counting
    and timing, coalescing everything recorded during one unit of work
    into a single line.

    Each thread / asyncio task sees its own field values. Header state is
    shared through the reporter.

    Args:
        fields: column names, in output order.
        sink: where lines go (ignored when ``reporter`` is given).
        stats: registry that counters and timings are also forwarded to.
        on_unknown_field: called with the name when an unregistered field is
            written; defaults to an error log entry.
    """

    def __init__(
        self,
        fields: Union[FieldSet, Iterable[str]],
        sink: Optional[Sink] = None,
        reporter: Optional[W3CReporter] = None,
        stats: Optional[StatsRegistry] = None,
        header_repeat_ms: int = DEFAULT_HEADER_REPEAT_MS,
        clock: Optional[Callable[[], datetime]] = None,
        on_unknown_field: Optional[Callable[[str], None]] = None,
    ):
        self.fields = fields if isinstance(fields, FieldSet) else FieldSet(names=tuple(fields))
        if reporter is None:
            if sink is None:
                raise ValueError("FieldAccumulator needs a sink or a reporter")
            reporter = W3CReporter(sink, header_repeat_ms=header_repeat_ms, clock=clock)
        self.reporter = reporter
        self.stats = stats if stats is not None else STATS
        self.on_unknown_field = on_unknown_field or self._log_unknown_field
        self._state: ContextVar[Optional[_WorkUnit]] = ContextVar(
            f"w3clog_fields_{id(self)}", default=None
        )

    @classmethod
    def from_config(
        cls,
        cfg: Optional[W3CConfig] = None,
        sink: Optional[Sink] = None,
        stats: Optional[StatsRegistry] = None,
    ) -> "FieldAccumulator":
        cfg = cfg or W3CConfig()
        return cls(
            cfg.fields,
            sink=sink or FileSink(cfg.log_path),
            stats=stats,
            header_repeat_ms=cfg.header_repeat_ms,
        )

    # ---------- work-unit state ----------

    def _values(self) -> Dict[str, FieldValue]:
        unit = self._state.get()
        if unit is None or not unit.owned_here():
            # Copied contexts (new tasks/threads) must not write into the parent's map.
            unit = _WorkUnit()
            self._state.set(unit)
        return unit.values

    def get(self) -> Dict[str, FieldValue]:
        """Snapshot of this context's recorded fields."""
        return dict(self._values())

    def clear_all(self) -> None:
        self._values().clear()

    # ---------- recording ----------

    def record(self, name: str, value: Any) -> None:
        """
        Merge ``value`` into the current unit's entry for ``name``.

        strings append as a comma list, ints sum, everything else overwrites.
        """
        values = self._values()
        values[name] = self._merge(name, values.get(name), coerce_value(value))
        if name not in self.fields:
            self.on_unknown_field(name)

    def _merge(self, name: str, old: Optional[FieldValue], new: FieldValue) -> FieldValue:
        if old is None:
            return new
        if old.kind != new.kind:
            logger.warning(f"[W3C] Field {name} changed type {old.kind} -> {new.kind}; overwriting")
            return new
        if isinstance(new, StringValue):
            return StringValue(value=old.value + "," + new.value)
        if isinstance(new, IntValue):
            return IntValue(value=old.value + new.value)
        return new

    @staticmethod
    def _log_unknown_field(name: str) -> None:
        logger.error("trying to log unregistered field: %s", name)

    def incr(self, name: str, count: int = 1) -> int:
        self.record(name, count)
        return self.stats.incr(name, count)

    def add_timing(self, name: str, duration_ms: int) -> int:
        self.record(name, duration_ms)
        return self.stats.add_timing(name, duration_ms)

    def add_timing_stat(self, name: str, timing: TimingStat) -> int:
        # an aggregate has no single-column form
        return self.stats.add_timing_stat(name, timing)

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        start = time.monotonic()
        try:
            yield
        finally:
            self.add_timing(name, int((time.monotonic() - start) * 1000))

    def get_counter_stats(self, reset: bool = False) -> Dict[str, int]:
        return self.stats.get_counter_stats(reset)

    def get_timing_stats(self, reset: bool = False) -> Dict[str, TimingStat]:
        return self.stats.get_timing_stats(reset)

    # ---------- output ----------

    def current_line(self) -> str:
        """W3C line for everything recorded so far in this context."""
        return self.reporter.generate_line(self.fields.names, self._values())

    def emit(self) -> None:
        """Write the header (if due) and the current line, then reset the unit."""
        try:
            self.reporter.report_line(self.fields.names, self._values())
        finally:
            self.clear_all()

    @contextmanager
    def scoped(self) -> Iterator["FieldAccumulator"]:
        """
        Start a fresh unit of work and write it as one line when the
        block exits, including when it raises. The unit is empty afterwards.
        """
        self.clear_all()
        try:
            yield self
        finally:
            self.emit()

    def run_scoped(self, body: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        with self.scoped():
            return body(*args, **kwargs)
