"""
W3C header/line reporter.
Owns the shared header state and decides when a header block is due.
File: src/w3clog/reporter.py
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional

from .formatter import DEFAULT_FORMATTER, LineFormatter
from .schemas import HeaderState
from .sinks import Sink

logger = logging.getLogger(__name__)

DEFAULT_HEADER_REPEAT_MS = 60 * 1000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class W3CReporter:
    """
    Writes W3C data lines to a sink, preceded by a header block when needed.

    A header is written when the fields line changes (by CRC) or when
    ``header_repeat_ms`` has passed since the last one, so that a parser
    that starts reading mid-stream can resynchronize.
    """

    def __init__(
        self,
        sink: Sink,
        formatter: Optional[LineFormatter] = None,
        header_repeat_ms: int = DEFAULT_HEADER_REPEAT_MS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.sink = sink
        self.formatter = formatter or DEFAULT_FORMATTER
        self.header_repeat_ms = header_repeat_ms
        self.clock = clock or utc_now
        self.header_state = HeaderState()
        self._lock = threading.Lock()

    @property
    def header_repeat_interval(self) -> timedelta:
        return timedelta(milliseconds=self.header_repeat_ms)

    def generate_line(self, ordered_names: Iterable[str], values: Mapping[str, Any]) -> str:
        return self.formatter.data_line(ordered_names, values)

    def report(self, stats: Mapping[str, Any]) -> None:
        """Write ``stats`` as one line, columns being its keys in sorted order."""
        self.report_line(sorted(stats.keys()), stats)

    def report_line(self, ordered_names: Iterable[str], values: Mapping[str, Any]) -> None:
        """
        Write one data line, preceded by a header block when one is due.

        Header and line go out under the same lock, so a line always sits
        under the #Fields header it was formatted for.
        """
        names: List[str] = list(ordered_names)
        line = self.generate_line(names, values)
        with self._lock:
            self._check_header_locked(names)
            self.sink.write(line)

    def check_header(self, ordered_names: Iterable[str]) -> bool:
        """Write a header block if one is due. Returns True when one was written."""
        with self._lock:
            return self._check_header_locked(ordered_names)

    def _check_header_locked(self, ordered_names: Iterable[str]) -> bool:
        fields_header = self.formatter.fields_header_line(ordered_names)
        crc = self.formatter.checksum(fields_header)
        now = self.clock()
        if self.header_state.is_current(crc, now):
            return False
        self._log_header(fields_header, crc, now)
        return True

    def _log_header(self, fields_header: str, crc: int, now: datetime) -> None:
        if self.header_state.last_checksum not in (None, crc):
            logger.info(f"[W3C] Fields changed (crc {self.header_state.last_checksum} -> {crc})")
        self.sink.write(self.formatter.header_block(fields_header, crc, now))
        self.header_state.mark_emitted(crc, now, self.header_repeat_interval)
