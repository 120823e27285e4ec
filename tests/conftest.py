from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List

import pytest


class ListSink:
    def __init__(self) -> None:
        self.writes: List[str] = []

    def write(self, text: str) -> None:
        self.writes.append(text)

    @property
    def headers(self) -> List[str]:
        return [w for w in self.writes if w.startswith("#Version: 1.0")]

    @property
    def lines(self) -> List[str]:
        return [w for w in self.writes if not w.startswith("#")]


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += timedelta(milliseconds=ms)


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2009, 3, 1, 12, 5, 7, tzinfo=timezone.utc))
