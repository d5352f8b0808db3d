# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Agents, jobs and the roster that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from molthotel.errors import AdminError, AgentNotFound
from molthotel.simulation.movement import IDLE, MovementState


@dataclass
class Job:
    """A role an agent holds in the hotel; ``location`` is its home post."""

    id: str
    title: str
    location: str = ""
    description: str = ""
    duties: list[str] = field(default_factory=list)


@dataclass
class Agent:
    """A simulated resident or employee."""

    name: str
    location: str
    job: str = "guest"
    gender: str = "male"
    diversion_eligible: bool = False
    active: bool = True
    movement: MovementState = IDLE
    last_diversion_tick: int = 0

    @property
    def en_route(self) -> bool:
        return self.movement.en_route

    def stamp_diversion(self, tick: int) -> None:
        """Record a diversion attempt.  The stamp never moves backwards."""
        self.last_diversion_tick = max(self.last_diversion_tick, tick)


class AgentRoster:
    """Agents keyed by name, kept in insertion order.

    Insertion order is the stable enumeration the scheduler rotates over.
    """

    def __init__(self, agents: list[Agent] | None = None) -> None:
        self._agents: dict[str, Agent] = {}
        for agent in agents or []:
            self.add(agent)

    def add(self, agent: Agent) -> Agent:
        if agent.name in self._agents:
            raise AdminError(f"Agent {agent.name!r} already exists")
        self._agents[agent.name] = agent
        return agent

    def remove(self, name: str) -> Agent:
        try:
            return self._agents.pop(name)
        except KeyError:
            raise AgentNotFound(name) from None

    def get(self, name: str) -> Agent:
        try:
            return self._agents[name]
        except KeyError:
            raise AgentNotFound(name) from None

    def find(self, name: str) -> Agent | None:
        return self._agents.get(name)

    def active(self) -> list[Agent]:
        return [a for a in self._agents.values() if a.active]

    def at(self, location: str) -> list[Agent]:
        """Agents currently standing in ``location``."""
        return [a for a in self._agents.values() if a.location == location]

    def names(self) -> list[str]:
        return list(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(list(self._agents.values()))

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, name: object) -> bool:
        return name in self._agents
