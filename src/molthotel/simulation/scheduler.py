# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""TickScheduler — fair, randomized selection of agents to act each tick.

Every cycle the clock advances by one and a subset of the active agents is
picked to act:

1. Draw a target count ``k`` from weighted tiers (by default 5, 3 or 2
   agents), so the crowd size varies from tick to tick.
2. Rotate the active list by ``tick % len(active)``.  Over ``len(active)``
   consecutive ticks each agent leads the rotation exactly once, which
   bounds how long anyone waits for a turn.
3. Keep each of the first ``k`` rotated candidates with a fixed
   probability.  If the filter drops everyone, the rotation's first
   candidate is returned alone.

The result keeps the rotated order and never contains duplicates.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Protocol, Sequence

from molthotel.simulation.agents import Agent, AgentRoster
from molthotel.venue.location_graph import LocationGraph

log = logging.getLogger(__name__)


class RandomSource(Protocol):
    """The slice of ``random.Random`` the simulation relies on."""

    def random(self) -> float: ...

    def choice(self, seq: Sequence): ...


@dataclass(frozen=True)
class SelectionTier:
    weight: float
    count: int


# 30% / 42% / 28% split between 5, 3 and 2 agents.
DEFAULT_TIERS: tuple[SelectionTier, ...] = (
    SelectionTier(weight=0.30, count=5),
    SelectionTier(weight=0.42, count=3),
    SelectionTier(weight=0.28, count=2),
)


class TickClock:
    """Monotonic tick counter.  Starts at zero and only ever increments."""

    def __init__(self) -> None:
        self._tick = 0

    @property
    def tick(self) -> int:
        return self._tick

    def advance(self) -> int:
        self._tick += 1
        return self._tick


class TickScheduler:
    """Selects which agents act on each tick."""

    def __init__(
        self,
        roster: AgentRoster,
        clock: TickClock,
        rng: RandomSource | None = None,
        graph: LocationGraph | None = None,
        tiers: Sequence[SelectionTier] = DEFAULT_TIERS,
        include_probability: float = 0.7,
    ) -> None:
        if not tiers:
            raise ValueError("at least one selection tier is required")
        if any(t.weight < 0 or t.count < 1 for t in tiers):
            raise ValueError("tiers need non-negative weights and counts >= 1")
        self._roster = roster
        self._clock = clock
        self._rng = rng or random.Random()
        self._graph = graph
        self._tiers = tuple(tiers)
        self._include_probability = include_probability

    @property
    def tick(self) -> int:
        return self._clock.tick

    def advance_tick(self) -> list[str]:
        """Advance the clock and return the names of agents to process."""
        tick = self._clock.advance()
        active = self._eligible()
        if not active:
            log.debug("tick %d: no active agents", tick)
            return []

        k = self._draw_count()
        rotated = self.rotation(tick, active)
        selected = [
            name for name in rotated[:k]
            if self._rng.random() < self._include_probability
        ]
        if not selected:
            selected = [rotated[0]]

        log.debug("tick %d: k=%d selected %s", tick, k, selected)
        return selected

    def rotation(self, tick: int, active: Sequence[str] | None = None) -> list[str]:
        """Active agent names rotated so index ``tick % n`` comes first."""
        names = list(active) if active is not None else self._eligible()
        if not names:
            return []
        offset = tick % len(names)
        return names[offset:] + names[:offset]

    # -- Internal --

    def _eligible(self) -> list[str]:
        names = []
        for agent in self._roster.active():
            if not self._placed(agent):
                log.warning("Agent %s is at unknown location %r; skipped", agent.name, agent.location)
                continue
            names.append(agent.name)
        return names

    def _placed(self, agent: Agent) -> bool:
        return self._graph is None or self._graph.exists(agent.location)

    def _draw_count(self) -> int:
        total = sum(t.weight for t in self._tiers)
        if total <= 0:
            return self._tiers[0].count
        r = self._rng.random() * total
        for tier in self._tiers:
            if r < tier.weight:
                return tier.count
            r -= tier.weight
        return self._tiers[-1].count
