# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Periodic diversions (smoke breaks) and the wander back afterwards."""

from __future__ import annotations

import random

from molthotel.simulation.agents import Agent
from molthotel.simulation.movement import MovementController, MoveOutcome
from molthotel.simulation.scheduler import RandomSource
from molthotel.venue.access import AccessController
from molthotel.venue.location_graph import LocationGraph


class DiversionPolicy:
    """Sends eligible idle agents to the diversion spot on a cooldown.

    Once ``interval`` ticks have passed since an agent's last diversion, each
    consultation grants a new one with ``probability``.
    """

    def __init__(
        self,
        location: str = "outside_smoking_area",
        interval: int = 6,
        probability: float = 0.6,
        rng: RandomSource | None = None,
    ) -> None:
        self.location = location
        self.interval = interval
        self.probability = probability
        self._rng = rng or random.Random()

    def should_divert(self, agent: Agent, tick: int) -> bool:
        if not agent.diversion_eligible:
            return False
        elapsed = tick - agent.last_diversion_tick
        if elapsed < self.interval:
            return False
        return self._rng.random() < self.probability

    def divert(self, agent: Agent, tick: int, movement: MovementController) -> MoveOutcome:
        """Request the diversion move and restart the cooldown."""
        # NOTE: the cooldown restarts on every attempt, even when no route
        # was started (already there, unreachable, unknown location).
        try:
            return movement.request_move(agent, self.location)
        finally:
            agent.stamp_diversion(tick)


class ReturnPolicy:
    """After a turn at the diversion spot, sometimes wander somewhere else."""

    def __init__(
        self,
        graph: LocationGraph,
        access: AccessController,
        location: str = "outside_smoking_area",
        probability: float = 0.4,
        rng: RandomSource | None = None,
    ) -> None:
        self._graph = graph
        self._access = access
        self.location = location
        self.probability = probability
        self._rng = rng or random.Random()

    def pick_destination(self, agent: Agent) -> str | None:
        if agent.location != self.location or agent.en_route:
            return None
        if self._rng.random() >= self.probability:
            return None
        floor = self._graph.floor(agent.location)
        options = [
            loc.name for loc in self._graph.locations_on_floor(floor)
            if loc.name != agent.location and self._access.can_enter(agent.name, loc.name)
        ]
        if not options:
            return None
        return self._rng.choice(options)
