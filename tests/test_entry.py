"""
tests/test_entry.py
Frecency scoring and record parsing.
"""

import pytest

from core.entry import (
    BASE_WEIGHT, Entry, age, eviction_key, rank_key, score,
)

NOW = 1_700_000_000


class TestScore:

    def test_fresh_entry_score(self):
        """Age 0 → hits / 0.25."""
        e = Entry("/a", hits=3, last_access=NOW)
        assert score(e, NOW) == pytest.approx(3 / BASE_WEIGHT)

    def test_known_value(self):
        e = Entry("/a", hits=10, last_access=NOW - 1_000_000)
        assert score(e, NOW) == pytest.approx(10 / (0.25 + 3.0))

    def test_strictly_increasing_in_hits(self):
        for a in (0, 60, 86_400, 10_000_000):
            scores = [score(Entry("/a", hits=h, last_access=NOW - a), NOW)
                      for h in range(1, 20)]
            assert all(x < y for x, y in zip(scores, scores[1:]))

    def test_strictly_decreasing_in_age(self):
        for hits in (1, 5, 1000):
            ages = [0, 1, 10, 3600, 86_400, 30 * 86_400, 10_000_000]
            scores = [score(Entry("/a", hits=hits, last_access=NOW - a), NOW)
                      for a in ages]
            assert all(x > y for x, y in zip(scores, scores[1:]))

    def test_future_timestamp_clamps_to_zero_age(self):
        """Clock skew must never produce a negative age or a boosted score."""
        future = Entry("/a", hits=2, last_access=NOW + 5000)
        fresh = Entry("/a", hits=2, last_access=NOW)
        assert age(future, NOW) == 0
        assert score(future, NOW) == score(fresh, NOW)


class TestOrdering:

    def test_rank_prefers_higher_score(self):
        a = Entry("/a", hits=10, last_access=NOW)
        b = Entry("/b", hits=10, last_access=NOW - 1_000_000)
        ranked = sorted([b, a], key=lambda e: rank_key(e, NOW))
        assert [e.path for e in ranked] == ["/a", "/b"]

    def test_rank_ties_broken_by_path(self):
        a = Entry("/b", hits=1, last_access=NOW)
        b = Entry("/a", hits=1, last_access=NOW)
        ranked = sorted([a, b], key=lambda e: rank_key(e, NOW))
        assert [e.path for e in ranked] == ["/a", "/b"]

    def test_rank_by_hits(self):
        busy_old = Entry("/old", hits=50, last_access=NOW - 50_000_000)
        fresh = Entry("/new", hits=2, last_access=NOW)
        ranked = sorted([fresh, busy_old], key=lambda e: rank_key(e, NOW, "hits"))
        assert ranked[0].path == "/old"

    def test_rank_by_atime(self):
        busy_old = Entry("/old", hits=50, last_access=NOW - 100)
        fresh = Entry("/new", hits=1, last_access=NOW)
        ranked = sorted([busy_old, fresh], key=lambda e: rank_key(e, NOW, "atime"))
        assert ranked[0].path == "/new"

    def test_eviction_key_lowest_first(self):
        keep = Entry("/keep", hits=5, last_access=NOW)
        drop = Entry("/drop", hits=1, last_access=NOW - 1000)
        assert min([keep, drop], key=lambda e: eviction_key(e, NOW)) is drop

    def test_eviction_tie_goes_to_oldest_access(self):
        # Same score is only possible at equal hits and age, so compare via
        # clamped future timestamps: both age 0, different last_access
        a = Entry("/a", hits=1, last_access=NOW + 10)
        b = Entry("/b", hits=1, last_access=NOW + 20)
        assert min([b, a], key=lambda e: eviction_key(e, NOW)) is a


class TestFromDict:

    def test_roundtrip(self):
        e = Entry("/home/me", hits=4, last_access=NOW)
        assert Entry.from_dict(e.to_dict()) == e

    @pytest.mark.parametrize("record", [
        {"path": "/a", "hits": 0, "atime": NOW},
        {"path": "/a", "hits": -3, "atime": NOW},
        {"path": "/a", "hits": "3", "atime": NOW},
        {"path": "/a", "hits": True, "atime": NOW},
        {"path": "", "hits": 1, "atime": NOW},
        {"path": 7, "hits": 1, "atime": NOW},
        {"path": "/a", "hits": 1, "atime": "yesterday"},
    ])
    def test_rejects_invalid_records(self, record):
        with pytest.raises((ValueError, TypeError)):
            Entry.from_dict(record)

    def test_missing_field(self):
        with pytest.raises(KeyError):
            Entry.from_dict({"path": "/a", "hits": 1})
