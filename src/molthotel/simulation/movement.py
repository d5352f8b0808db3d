# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Agent movement state machine.

Each agent is either ``Idle`` or ``EnRoute``.  A move request computes a
route once; afterwards the agent advances exactly one hop per processed
tick until the route is consumed, at which point it is placed on the
destination and returns to ``Idle``.

States and transitions:

    Idle    --request_move(dest)--> EnRoute   (route found, dest != here)
    EnRoute --advance-------------> EnRoute   (hop event)
    EnRoute --advance-------------> Idle      (arrival event, last hop)

A request made while EnRoute is refused with ``MoveOutcome.BUSY`` and
leaves the current route untouched.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from molthotel.venue.pathfinder import PathFinder, PathStatus

if TYPE_CHECKING:
    from molthotel.simulation.agents import Agent


@dataclass(frozen=True)
class Idle:
    """Not moving."""

    @property
    def en_route(self) -> bool:
        return False


@dataclass(frozen=True)
class EnRoute:
    """Travelling toward ``destination``; ``remaining_path`` excludes the current location."""

    destination: str
    remaining_path: tuple[str, ...]
    total_steps: int

    def __post_init__(self) -> None:
        if not self.remaining_path:
            raise ValueError("EnRoute requires at least one remaining hop")
        if self.total_steps < len(self.remaining_path):
            raise ValueError("total_steps cannot be smaller than the remaining path")

    @property
    def en_route(self) -> bool:
        return True

    @property
    def steps_remaining(self) -> int:
        return len(self.remaining_path)

    @property
    def next_hop(self) -> str:
        return self.remaining_path[0]


MovementState = Union[Idle, EnRoute]

IDLE = Idle()


class MoveOutcome(enum.Enum):
    STARTED = "started"
    BUSY = "busy"
    ALREADY_THERE = "already_there"
    UNREACHABLE = "unreachable"
    CROSS_FLOOR = "cross_floor"

    @property
    def started(self) -> bool:
        return self is MoveOutcome.STARTED


class EventKind(str, enum.Enum):
    HOP = "hop"
    ARRIVAL = "arrival"


@dataclass(frozen=True)
class MovementEvent:
    """Emitted for every hop; the final hop is reported as an arrival."""

    agent_id: str
    tick: int
    from_location: str
    to_location: str
    kind: EventKind
    destination: str
    progress: int  # percent of the journey completed, 0-100

    def to_dict(self) -> dict:
        return {
            "agent_id": self.agent_id,
            "tick": self.tick,
            "from_location": self.from_location,
            "to_location": self.to_location,
            "kind": self.kind.value,
            "destination": self.destination,
            "progress": self.progress,
        }


class MovementController:
    """Starts and advances agent journeys using a PathFinder."""

    def __init__(self, pathfinder: PathFinder) -> None:
        self._pathfinder = pathfinder

    def request_move(self, agent: Agent, destination: str) -> MoveOutcome:
        """Try to put ``agent`` on a route to ``destination``.

        Raises LocationNotFound for an unknown destination.  Every other
        refusal is returned as a MoveOutcome and leaves the agent as it was.
        """
        if agent.movement.en_route:
            return MoveOutcome.BUSY
        if agent.location == destination:
            # Still validate the name so typos surface as errors.
            self._pathfinder.find_path(destination, destination, agent.name)
            return MoveOutcome.ALREADY_THERE

        result = self._pathfinder.find_path(agent.location, destination, agent.name)
        if result.status is PathStatus.CROSS_FLOOR:
            return MoveOutcome.CROSS_FLOOR
        if not result.found or len(result.path) < 2:
            return MoveOutcome.UNREACHABLE

        remaining = result.path[1:]
        agent.movement = EnRoute(
            destination=destination,
            remaining_path=remaining,
            total_steps=len(remaining),
        )
        return MoveOutcome.STARTED

    def advance(self, agent: Agent, tick: int) -> MovementEvent | None:
        """Move ``agent`` one hop along its route.  No-op for idle agents."""
        state = agent.movement
        if not isinstance(state, EnRoute):
            return None

        origin = agent.location
        hop = state.next_hop
        rest = state.remaining_path[1:]
        done = state.total_steps - len(rest)
        progress = round(done * 100 / state.total_steps)

        if rest:
            agent.location = hop
            agent.movement = EnRoute(state.destination, rest, state.total_steps)
            return MovementEvent(
                agent_id=agent.name,
                tick=tick,
                from_location=origin,
                to_location=hop,
                kind=EventKind.HOP,
                destination=state.destination,
                progress=progress,
            )

        # Last hop: land exactly on the destination.
        agent.location = state.destination
        agent.movement = IDLE
        return MovementEvent(
            agent_id=agent.name,
            tick=tick,
            from_location=origin,
            to_location=state.destination,
            kind=EventKind.ARRIVAL,
            destination=state.destination,
            progress=100,
        )
