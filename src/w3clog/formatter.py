"""
W3C Extended Log line formatting.
Pure functions over (ordered field names, value mapping); writing is the caller's job.
File: src/w3clog/formatter.py
"""

from __future__ import annotations

import zlib
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, Mapping, Optional

from .schemas import coerce_value

# %b follows the process locale; the log format wants English months.
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

VERSION_LINE = "#Version: 1.0"
FIELDS_PREFIX = "#Fields: "
MISSING = "-"


class LineFormatter:
    """
    Turns field names and values into header blocks and data lines.

    Timestamps render as dd-MMM-yyyy HH:mm:ss in ``tz`` (UTC unless told
    otherwise). Naive datetimes are read as already being in UTC.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz or timezone.utc

    def format_timestamp(self, dt: datetime) -> str:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(self.tz)
        return "%02d-%s-%04d %02d:%02d:%02d" % (
            dt.day, _MONTHS[dt.month - 1], dt.year, dt.hour, dt.minute, dt.second,
        )

    def stringify(self, value: Any) -> str:
        if value is None:
            return MISSING
        return coerce_value(value).stringify(self)

    def fields_header_line(self, names: Iterable[str]) -> str:
        return FIELDS_PREFIX + " ".join(names)

    def data_line(self, names: Iterable[str], values: Mapping[str, Any]) -> str:
        return " ".join(self.stringify(values.get(name)) for name in names)

    @staticmethod
    def checksum(text: str) -> int:
        """CRC-32 of the UTF-8 bytes, as an unsigned int."""
        return zlib.crc32(text.encode("utf-8")) & 0xFFFFFFFF

    def header_block(self, fields_header_line: str, checksum: int, now: datetime) -> str:
        return "".join([
            VERSION_LINE, "\n",
            "#Date: ", self.format_timestamp(now), "\n",
            "#CRC: ", str(checksum), "\n",
            fields_header_line, "\n",
        ])


DEFAULT_FORMATTER = LineFormatter()
