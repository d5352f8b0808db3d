# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for agent memory and mood."""

from __future__ import annotations

import pytest

from molthotel.turns.memory import AgentMemory, MemoryStore, update_mood

pytestmark = pytest.mark.unit


class TestAgentMemory:

    def test_remember_formats_and_truncates(self):
        mem = AgentMemory()
        mem.remember("pool", "x" * 300)
        assert mem.memories[0] == "[pool] " + "x" * 180

    def test_keeps_last_fifteen(self):
        mem = AgentMemory()
        for i in range(20):
            mem.remember("lobby", f"m{i}")
        assert len(mem.memories) == 15
        assert mem.memories[0] == "[lobby] m5"
        assert mem.recent(2) == ["[lobby] m18", "[lobby] m19"]


class TestUpdateMood:

    def test_angry_needs_two_words(self, seq_random):
        assert update_mood("Tabarnak, chu tanné!", seq_random()) == "angry"
        assert update_mood("Ostie que c'est long", seq_random()) == "neutral"

    def test_happy(self, seq_random):
        assert update_mood("Haha, parfait!", seq_random()) == "happy"

    def test_neutral(self, seq_random):
        assert update_mood("Bon.", seq_random()) == "neutral"

    def test_random_drift(self, seq_random):
        rng = seq_random([0.1], choices=[1])
        assert update_mood("Tabarnak ostie", rng) == "calm"

    def test_no_drift_above_threshold(self, seq_random):
        assert update_mood("Haha", seq_random([0.15])) == "happy"


class TestMemoryStore:

    def test_missing_is_fresh(self, tmp_path):
        mem = MemoryStore(tmp_path).load("marie")
        assert mem.memories == []
        assert mem.mood == "neutral"

    def test_round_trip(self, tmp_path):
        store = MemoryStore(tmp_path / "memory")
        mem = AgentMemory(mood="happy")
        mem.remember("pool", "Allo")
        store.save("marie", mem)
        assert store.path_for("marie").exists()
        assert store.load("marie") == mem

    def test_corrupt_file_starts_fresh(self, tmp_path):
        store = MemoryStore(tmp_path)
        store.path_for("marie").write_text("{not json", encoding="utf-8")
        assert store.load("marie").memories == []
