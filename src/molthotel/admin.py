# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""VenueAdmin — administrative mutations between ticks.

Hiring and firing, smoker status, jobs, room assignment and manual moves.
Every successful mutation calls the optional ``on_change`` hook, which the
CLI uses to write the roster and hotel files back to disk.
"""

from __future__ import annotations

from typing import Callable, Optional

from loguru import logger

from molthotel.errors import AdminError, JobNotFound
from molthotel.simulation.agents import Agent, Job
from molthotel.simulation.engine import SimulationEngine
from molthotel.simulation.movement import EnRoute, MoveOutcome

GENDERS = ("male", "female")


class VenueAdmin:
    """Administrative operations over a running SimulationEngine."""

    def __init__(
        self,
        engine: SimulationEngine,
        jobs: dict[str, Job],
        hotel_name: str = "Hotel",
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.engine = engine
        self.jobs = jobs
        self.hotel_name = hotel_name
        self._on_change = on_change

    @property
    def roster(self):
        return self.engine.roster

    @property
    def graph(self):
        return self.engine.graph

    # -- Roster --

    def add_agent(
        self,
        name: str,
        gender: str = "male",
        job: str = "guest",
        smoker: bool = False,
        location: Optional[str] = None,
    ) -> Agent:
        if name in self.roster:
            raise AdminError(f"Agent {name!r} already exists")
        self._require_job(job)
        _check_gender(gender)
        if location is None:
            location = self._default_location(job)
        else:
            self.graph.get(location)
        agent = self.roster.add(Agent(
            name=name,
            location=location,
            job=job,
            gender=gender,
            diversion_eligible=smoker,
            last_diversion_tick=self.engine.tick,
        ))
        logger.info(f"Added {name} ({gender}) as {job} at {location}")
        self._changed()
        return agent

    def remove_agent(self, name: str) -> Agent:
        agent = self.roster.remove(name)
        for room in self.graph.owned_by(name):
            self.graph.set_owner(room.name, None, locked=False)
        logger.info(f"Removed {name}")
        self._changed()
        return agent

    def assign_job(self, name: str, job: str) -> Agent:
        agent = self.roster.get(name)
        self._require_job(job)
        agent.job = job
        self._changed()
        return agent

    def set_gender(self, name: str, gender: str) -> Agent:
        agent = self.roster.get(name)
        _check_gender(gender)
        agent.gender = gender
        self._changed()
        return agent

    def set_diversion_eligible(self, name: str, eligible: bool) -> Agent:
        agent = self.roster.get(name)
        agent.diversion_eligible = eligible
        self._changed()
        return agent

    def set_active(self, name: str, active: bool) -> Agent:
        """Fire (False) or rehire (True).  Position and route are kept."""
        agent = self.roster.get(name)
        agent.active = active
        logger.info(f"{name} {'activated' if active else 'deactivated'}")
        self._changed()
        return agent

    # -- Venue --

    def assign_room(self, name: str, room: str) -> None:
        """Give ``room`` to agent ``name``, releasing the room they held before."""
        self.roster.get(name)
        target = self.graph.get(room)
        if not target.is_private_room:
            raise AdminError(f"{room!r} is not a private room")
        for previous in self.graph.owned_by(name):
            if previous.name != room:
                self.graph.set_owner(previous.name, None, locked=False)
        self.graph.set_owner(room, name, locked=True)
        logger.info(f"Room {room} assigned to {name}")
        self._changed()

    def move_agent(self, name: str, destination: str) -> MoveOutcome:
        agent = self.roster.get(name)
        outcome = self.engine.movement.request_move(agent, destination)
        if outcome.started:
            self._changed()
        return outcome

    # -- Listings --

    def list_agents(self) -> list[dict]:
        rows = []
        for agent in self.roster:
            job = self.jobs.get(agent.job)
            row = {
                "name": agent.name,
                "gender": agent.gender,
                "job": agent.job,
                "job_title": job.title if job else agent.job,
                "smoker": agent.diversion_eligible,
                "active": agent.active,
                "location": agent.location,
                "moving_to": None,
                "steps_remaining": 0,
            }
            if isinstance(agent.movement, EnRoute):
                row["moving_to"] = agent.movement.destination
                row["steps_remaining"] = agent.movement.steps_remaining
            rows.append(row)
        return rows

    def list_jobs(self) -> list[Job]:
        return list(self.jobs.values())

    def list_locations(self) -> list[dict]:
        return [
            {
                "name": loc.name,
                "floor": loc.floor,
                "is_private_room": loc.is_private_room,
                "owner": loc.owner,
                "locked": loc.locked,
            }
            for loc in self.graph
        ]

    # -- Internal --

    def _require_job(self, job: str) -> Job:
        try:
            return self.jobs[job]
        except KeyError:
            raise JobNotFound(job) from None

    def _default_location(self, job: str) -> str:
        post = self.jobs[job].location
        if post and self.graph.exists(post):
            return post
        public = [loc.name for loc in self.graph if not loc.is_private_room]
        if not public:
            raise AdminError("venue has no public location to place a new agent")
        return self.engine.rng.choice(public)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


def _check_gender(gender: str) -> None:
    if gender not in GENDERS:
        raise AdminError(f"gender must be one of {', '.join(GENDERS)}")
