from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, TextIO


class Sink(Protocol):
    def write(self, text: str) -> None: ...


@dataclass
class FileSink:
    """
    Append-only W3C log file.

    - one write per header block or data line
    - every write ends with exactly one newline
    - safe to share between threads
    """
    log_path: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    def write(self, text: str) -> None:
        if not text.endswith("\n"):
            text += "\n"
        with self._lock:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with self.log_path.open("a", encoding="utf-8") as f:
                f.write(text)


@dataclass
class LoggingSink:
    """Forwards lines to a stdlib logger at INFO (the handler adds the newline)."""
    logger: logging.Logger

    def write(self, text: str) -> None:
        self.logger.info(text.rstrip("\n"))


@dataclass
class StreamSink:
    """Writes to a text stream; stdout (looked up at write time) by default."""
    stream: Optional[TextIO] = None

    def write(self, text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(text if text.endswith("\n") else text + "\n")
        stream.flush()
