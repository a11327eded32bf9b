"""Tests for stat stores and the leaderboard."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from math_dungeon.sim.persistence import (
    InMemoryStatStore,
    JsonFileStatStore,
    Leaderboard,
    LeaderboardEntry,
    sort_entries,
)


def _entry(name: str, score: int, level: int = 1) -> LeaderboardEntry:
    return LeaderboardEntry(player_name=name, score=score, level=level)


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

class TestInMemoryStatStore:
    def test_missing_key(self):
        assert InMemoryStatStore().get("nope") is None

    def test_records_are_copied(self):
        store = InMemoryStatStore()
        record = {"gold": 5}
        store.put("k", record)
        record["gold"] = 999
        fetched = store.get("k")
        fetched["gold"] = 111
        assert store.get("k") == {"gold": 5}


class TestJsonFileStatStore:
    def test_round_trip_on_disk(self, tmp_path):
        path = tmp_path / "saves" / "game.json"
        store = JsonFileStatStore(path)
        store.put("hero_stats", {"level": 3})
        store.put("leaderboard", [])

        assert path.exists()
        assert json.loads(path.read_text()) == {"hero_stats": {"level": 3}, "leaderboard": []}
        assert JsonFileStatStore(path).get("hero_stats") == {"level": 3}

    def test_missing_file(self, tmp_path):
        assert JsonFileStatStore(tmp_path / "none.json").get("hero_stats") is None


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

class TestLeaderboard:
    def test_ranks_by_score_then_level(self):
        board = Leaderboard(InMemoryStatStore())
        board.add_entry(_entry("a", 100, level=1))
        board.add_entry(_entry("b", 300, level=1))
        board.add_entry(_entry("c", 100, level=4))

        assert [e.player_name for e in board.top()] == ["b", "c", "a"]

    def test_add_entry_returns_rank(self):
        board = Leaderboard(InMemoryStatStore())
        assert board.add_entry(_entry("a", 50)) == 1
        assert board.add_entry(_entry("b", 80)) == 1
        assert board.add_entry(_entry("c", 10)) == 3

    def test_ties_keep_insertion_order(self):
        board = Leaderboard(InMemoryStatStore())
        board.add_entry(_entry("first", 70))
        assert board.add_entry(_entry("second", 70)) == 2
        assert [e.player_name for e in board.top()] == ["first", "second"]

    def test_max_entries(self):
        board = Leaderboard(InMemoryStatStore(), max_entries=2)
        board.add_entry(_entry("a", 10))
        board.add_entry(_entry("b", 20))
        assert board.add_entry(_entry("c", 5)) == 0
        assert board.add_entry(_entry("d", 30)) == 1
        assert [e.player_name for e in board.entries()] == ["d", "b"]

    def test_top_n(self):
        board = Leaderboard(InMemoryStatStore())
        for i in range(15):
            board.add_entry(_entry(f"p{i}", i))
        top = board.top(3)
        assert [e.score for e in top] == [14, 13, 12]

    def test_persisted_under_key(self):
        store = InMemoryStatStore()
        Leaderboard(store, key="scores").add_entry(_entry("a", 1))
        assert "scores" in store
        assert Leaderboard(store, key="scores").top()[0].player_name == "a"

    def test_completion_percentage_bounds(self):
        with pytest.raises(ValidationError):
            LeaderboardEntry(player_name="a", score=1, completion_percentage=120)

    def test_sort_entries_is_pure(self):
        entries = [_entry("a", 1), _entry("b", 2)]
        assert [e.player_name for e in sort_entries(entries)] == ["b", "a"]
        assert [e.player_name for e in entries] == ["a", "b"]
