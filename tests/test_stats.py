from __future__ import annotations

from w3clog.stats import StatsRegistry, TimingStat


def test_counters_and_reset():
    stats = StatsRegistry()
    assert stats.incr("hits") == 1
    assert stats.incr("hits", 4) == 5
    assert stats.get_counter_stats(reset=True) == {"hits": 5}
    assert stats.get_counter_stats() == {}


def test_timings_aggregate():
    stats = StatsRegistry()
    stats.add_timing("db", 10)
    assert stats.add_timing("db", 30) == 2
    t = stats.get_timing_stats()["db"]
    assert (t.count, t.minimum, t.maximum, t.average) == (2, 10, 30, 20.0)


def test_timing_stat_merge():
    stats = StatsRegistry()
    stats.add_timing("db", 5)
    other = TimingStat()
    other.add(1)
    other.add(9)
    assert stats.add_timing_stat("db", other) == 3
    t = stats.get_timing_stats(reset=True)["db"]
    assert (t.minimum, t.maximum, t.total) == (1, 9, 15)
    assert stats.get_timing_stats() == {}
