"""
w3clog package.

Design goals:
- one W3C Extended Log line per unit of work (request, job, task)
- self-describing output: header block with CRC of the fields line
- header re-emitted on field change or on a fixed cadence so tailing parsers resync
"""

from .accumulator import FieldAccumulator
from .formatter import LineFormatter
from .reporter import W3CReporter
from .schemas import FieldSet, HeaderState
from .sinks import FileSink, LoggingSink, StreamSink
from .stats import STATS, StatsRegistry, TimingStat

__all__ = [
    "FieldAccumulator",
    "LineFormatter",
    "W3CReporter",
    "FieldSet",
    "HeaderState",
    "FileSink",
    "LoggingSink",
    "StreamSink",
    "STATS",
    "StatsRegistry",
    "TimingStat",
]
