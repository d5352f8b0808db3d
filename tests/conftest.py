# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Root conftest — shared venue fixtures and a scripted random source.

Integration tests are skipped when no Ollama server is reachable.
"""

from __future__ import annotations

import copy
from typing import Sequence

import httpx
import pytest

from molthotel.simulation.agents import Agent, AgentRoster, Job
from molthotel.venue.location_graph import LocationGraph


def _ollama_reachable() -> bool:
    """Check if Ollama API is reachable."""
    try:
        httpx.get("http://localhost:11434/api/tags", timeout=3)
        return True
    except httpx.HTTPError:
        return False


def pytest_collection_modifyitems(config, items):
    if not any("integration" in item.keywords for item in items):
        return
    if _ollama_reachable():
        return
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(pytest.mark.skip(reason="Ollama not reachable"))


# ---------------------------------------------------------------------------
# Random source
# ---------------------------------------------------------------------------


class SequenceRandom:
    """Deterministic stand-in for ``random.Random``.

    ``random()`` returns the scripted values in order, then ``default``.
    ``choice()`` picks by the scripted indices in order, then index 0.
    """

    def __init__(
        self,
        values: Sequence[float] = (),
        choices: Sequence[int] = (),
        default: float = 0.99,
    ) -> None:
        self.values = list(values)
        self.choices = list(choices)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default

    def choice(self, seq):
        index = self.choices.pop(0) if self.choices else 0
        return list(seq)[index]


@pytest.fixture
def seq_random():
    return SequenceRandom


# ---------------------------------------------------------------------------
# Venues
# ---------------------------------------------------------------------------


HOTEL = {
    "lobby": {"floor": 1, "connections": ["hall_1", "restaurant", "outside_smoking_area"]},
    "hall_1": {"floor": 1, "connections": ["lobby", "room_a1", "room_a2"]},
    "room_a1": {
        "floor": 1, "is_private_room": True, "owner": "marie",
        "is_locked": True, "connections": ["hall_1"],
    },
    "room_a2": {"floor": 1, "is_private_room": True, "connections": ["hall_1"]},
    "restaurant": {"floor": 1, "connections": ["lobby", "kitchen"]},
    "kitchen": {"floor": 1, "staff_only": True, "connections": ["restaurant"]},
    "outside_smoking_area": {"floor": 1, "connections": ["lobby"]},
    "hall_2": {"floor": 2, "connections": ["room_b1"]},
    "room_b1": {"floor": 2, "is_private_room": True, "connections": ["hall_2"]},
}


@pytest.fixture
def hotel_data() -> dict:
    return copy.deepcopy(HOTEL)


@pytest.fixture
def hotel_graph() -> LocationGraph:
    return LocationGraph.from_mapping(HOTEL)


@pytest.fixture
def line_graph() -> LocationGraph:
    """A <-> B <-> C on one floor."""
    return LocationGraph.from_mapping({
        "A": {"floor": 1, "connections": ["B"]},
        "B": {"floor": 1, "connections": ["A", "C"]},
        "C": {"floor": 1, "connections": ["B"]},
    })


@pytest.fixture
def jobs() -> dict[str, Job]:
    return {
        "guest": Job(id="guest", title="Client", location="lobby"),
        "barmaid": Job(id="barmaid", title="Barmaid", location="restaurant",
                       description="Sert les drinks"),
        "cook": Job(id="cook", title="Cuisinier", location="kitchen"),
    }


@pytest.fixture
def hotel_roster() -> AgentRoster:
    return AgentRoster([
        Agent(name="marie", location="restaurant", job="barmaid", gender="female",
              diversion_eligible=True),
        Agent(name="jacques", location="lobby"),
        Agent(name="bob", location="lobby", job="cook"),
    ])
