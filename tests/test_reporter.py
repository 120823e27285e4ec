from __future__ import annotations

import threading
import time
import zlib

from w3clog.reporter import W3CReporter


def test_first_report_writes_header(sink, clock):
    reporter = W3CReporter(sink, clock=clock)
    reporter.report({"b": 2, "a": "x"})
    crc = zlib.crc32(b"#Fields: a b")
    assert sink.writes == [
        f"#Version: 1.0\n#Date: 01-Mar-2009 12:05:07\n#CRC: {crc}\n#Fields: a b\n",
        "x 2",
    ]


def test_header_repeats_after_interval(sink, clock):
    reporter = W3CReporter(sink, header_repeat_ms=1000, clock=clock)
    reporter.report({"a": 1})
    clock.advance(1500)
    reporter.report({"a": 1})
    assert len(sink.headers) == 2


def test_header_not_repeated_within_interval(sink, clock):
    reporter = W3CReporter(sink, header_repeat_ms=1000, clock=clock)
    reporter.report({"a": 1})
    clock.advance(500)
    reporter.report({"a": 1})
    assert len(sink.headers) == 1
    assert sink.lines == ["1", "1"]


def test_header_due_exactly_at_deadline(sink, clock):
    reporter = W3CReporter(sink, header_repeat_ms=1000, clock=clock)
    reporter.report({"a": 1})
    clock.advance(1000)
    reporter.report({"a": 1})
    assert len(sink.headers) == 2


def test_changed_keys_force_header(sink, clock):
    reporter = W3CReporter(sink, clock=clock)
    reporter.report({"a": 1})
    reporter.report({"a": 1, "b": 2})
    reporter.report({"a": 1, "b": 2})
    assert [h.splitlines()[-1] for h in sink.headers] == ["#Fields: a", "#Fields: a b"]


def test_header_state_tracks_last_emission(sink, clock):
    reporter = W3CReporter(sink, header_repeat_ms=1000, clock=clock)
    assert reporter.header_state.last_checksum is None
    assert reporter.check_header(["x"]) is True
    assert reporter.header_state.last_checksum == zlib.crc32(b"#Fields: x")
    assert reporter.header_state.next_header_at == clock.now + reporter.header_repeat_interval
    assert reporter.check_header(["x"]) is False


class SlowLineSink:
    """Holds the first data line write open until released."""

    def __init__(self):
        self.writes = []
        self.entered = threading.Event()
        self.release = threading.Event()

    def write(self, text):
        if text == "1":
            self.entered.set()
            self.release.wait(5)
        self.writes.append(text)


def test_line_stays_under_its_own_header(clock):
    sink = SlowLineSink()
    reporter = W3CReporter(sink, clock=clock)

    first = threading.Thread(target=reporter.report, args=({"a": 1},))
    first.start()
    assert sink.entered.wait(5)

    second = threading.Thread(target=reporter.report, args=({"b": 2},))
    second.start()
    time.sleep(0.05)
    sink.release.set()
    first.join()
    second.join()

    tails = [w.splitlines()[-1] for w in sink.writes]
    assert tails == ["#Fields: a", "1", "#Fields: b", "2"]
