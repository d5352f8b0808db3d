# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Settings and on-disk configuration for the hotel simulation.

Runtime knobs come from ``Settings`` (environment variables prefixed with
``MOLT_`` or a ``.env`` file).  The venue itself lives in three JSON files:

    hotel.json          {"name": ..., "locations": {name: {...}}}
    agents-config.json  {name: {"name", "gender", "isSmoker", "job", ...}}
    jobs.json           [{"id", "title", "location", "description", "duties"}]

The roster file keeps the camelCase keys written by the management tool
and also stores each agent's position and in-flight route so a restart
resumes journeys where they stopped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from molthotel.simulation.agents import Agent, AgentRoster, Job
from molthotel.simulation.movement import IDLE, EnRoute
from molthotel.simulation.scheduler import RandomSource
from molthotel.venue.location_graph import Location, LocationGraph


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MOLT_",
        env_file=".env",
        extra="ignore",
    )

    # Files
    hotel_file: Path = Path("hotel.json")
    agents_file: Path = Path("agents-config.json")
    jobs_file: Path = Path("jobs.json")
    agents_dir: Path = Path("agents")
    memory_dir: Path = Path("memory")
    log_path: Path = Path("logs/hotel.log")
    log_level: str = "INFO"

    # Timing (seconds)
    min_tick_interval: float = 8.0
    max_tick_interval: float = 30.0
    min_turn_gap: float = 1.0
    max_turn_gap: float = 3.0

    # Scheduling and diversions
    include_probability: float = Field(0.7, ge=0.0, le=1.0)
    diversion_interval: int = Field(6, ge=0)
    diversion_probability: float = Field(0.6, ge=0.0, le=1.0)
    diversion_location: str = "outside_smoking_area"
    return_probability: float = Field(0.4, ge=0.0, le=1.0)
    start_floor: int = Field(1, ge=1)
    seed: Optional[int] = None

    # Outbound collaborators
    webhook_url: Optional[str] = None
    llm_base_url: str = "http://localhost:11434"
    llm_model: str = "gemma3:4b"
    llm_temperature: float = 0.85
    llm_max_tokens: int = 150
    llm_timeout: float = 60.0

    # Budget
    cost_per_turn: float = 0.0011
    budget: float = 15.0
    budget_margin: float = 0.5

    # Admin API
    api_host: str = "127.0.0.1"
    api_port: Optional[int] = None


settings = Settings()


# ---------------------------------------------------------------------------
# File models
# ---------------------------------------------------------------------------


class LocationEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    floor: int = Field(1, ge=1)
    staff_only: bool = False
    is_private_room: bool = False
    description: str = ""
    connections: list[str] = Field(default_factory=list)
    is_locked: Optional[bool] = None
    owner: Optional[str] = None


class HotelFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = "Hotel"
    locations: dict[str, LocationEntry] = Field(default_factory=dict)


class AgentEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    gender: str = "male"
    is_smoker: bool = Field(False, alias="isSmoker")
    job: str = "guest"
    is_active: bool = Field(True, alias="isActive")
    last_smoke: int = Field(0, alias="lastSmoke")
    location: Optional[str] = None
    is_moving: bool = Field(False, alias="isMoving")
    moving_to: Optional[str] = Field(None, alias="movingTo")
    movement_path: Optional[list[str]] = Field(None, alias="movementPath")
    movement_total: Optional[int] = Field(None, alias="movementTotal")


class JobEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    location: str = ""
    description: str = ""
    duties: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _read_json(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: Path, data) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    tmp.replace(path)


def load_hotel(path: Path) -> tuple[str, LocationGraph]:
    """Read the hotel file; returns ``(hotel_name, graph)``."""
    hotel = HotelFile.model_validate(_read_json(path))
    locations = []
    for name, entry in hotel.locations.items():
        # Ownership on a public location is ignored rather than fatal.
        owner = entry.owner if entry.is_private_room else None
        if entry.owner and not entry.is_private_room:
            logger.warning(f"Ignoring owner {entry.owner!r} on public location {name!r}")
        locations.append(Location(
            name=name,
            floor=entry.floor,
            staff_only=entry.staff_only,
            is_private_room=entry.is_private_room,
            description=entry.description,
            connections=tuple(entry.connections),
            locked=bool(entry.is_locked),
            owner=owner,
        ))
    graph = LocationGraph(locations)
    logger.info(f"Hotel {hotel.name!r} loaded: {len(graph)} locations")
    return hotel.name, graph


def load_jobs(path: Path) -> dict[str, Job]:
    """Read the jobs file.  A missing file yields an empty registry."""
    path = Path(path)
    if not path.exists():
        logger.warning(f"Jobs file {path} not found; no jobs defined")
        return {}
    entries = [JobEntry.model_validate(item) for item in _read_json(path)]
    return {
        e.id: Job(id=e.id, title=e.title, location=e.location,
                  description=e.description, duties=list(e.duties))
        for e in entries
    }


def load_roster(
    path: Path,
    graph: LocationGraph,
    jobs: dict[str, Job],
    rng: RandomSource,
    start_floor: int = 1,
) -> AgentRoster:
    """Read the roster file and place every agent in the venue.

    Placement order: the saved location, else the job's post when it is on
    ``start_floor``, else a random ``start_floor`` location.
    """
    raw = _read_json(path)
    entries = [AgentEntry.model_validate({**value, "name": key}) for key, value in raw.items()]
    floor_locations = [
        loc.name for loc in graph.locations_on_floor(start_floor) if not loc.is_private_room
    ]
    if not floor_locations:
        raise ValueError(f"No locations available on floor {start_floor}")

    roster = AgentRoster()
    for entry in entries:
        location = _initial_location(entry, graph, jobs, floor_locations, rng, start_floor)
        agent = Agent(
            name=entry.name,
            location=location,
            job=entry.job,
            gender=entry.gender,
            diversion_eligible=entry.is_smoker,
            active=entry.is_active,
            # Saved ticks belong to the previous run; the clock restarts at 0.
            last_diversion_tick=min(entry.last_smoke, 0),
        )
        agent.movement = _restore_movement(entry, graph, location)
        roster.add(agent)
    logger.info(f"Roster loaded: {len(roster)} agents, {len(roster.active())} active")
    return roster


def _initial_location(
    entry: AgentEntry,
    graph: LocationGraph,
    jobs: dict[str, Job],
    floor_locations: list[str],
    rng: RandomSource,
    start_floor: int,
) -> str:
    if entry.location and graph.exists(entry.location):
        return entry.location
    job = jobs.get(entry.job)
    if job is not None and graph.exists(job.location) and graph.floor(job.location) == start_floor:
        return job.location
    return rng.choice(floor_locations)


def _restore_movement(entry: AgentEntry, graph: LocationGraph, location: str):
    if not entry.is_moving or not entry.moving_to or not entry.movement_path:
        return IDLE
    path = tuple(entry.movement_path)
    if not all(graph.exists(name) for name in path) or not graph.exists(entry.moving_to):
        logger.warning(f"Discarding saved route for {entry.name}: unknown locations")
        return IDLE
    # Each hop must follow an edge, starting from where the agent was placed.
    hops = zip((location,) + path, path)
    if path[-1] != entry.moving_to or any(b not in graph.neighbors(a) for a, b in hops):
        logger.warning(f"Discarding saved route for {entry.name}: not a route from {location}")
        return IDLE
    total = max(entry.movement_total or len(path), len(path))
    return EnRoute(destination=entry.moving_to, remaining_path=path, total_steps=total)


# ---------------------------------------------------------------------------
# Saving
# ---------------------------------------------------------------------------


def roster_to_dict(roster: AgentRoster) -> dict[str, dict]:
    data: dict[str, dict] = {}
    for agent in roster:
        entry = {
            "name": agent.name,
            "gender": agent.gender,
            "isSmoker": agent.diversion_eligible,
            "job": agent.job,
            "isActive": agent.active,
            "lastSmoke": agent.last_diversion_tick,
            "location": agent.location,
        }
        if isinstance(agent.movement, EnRoute):
            entry.update({
                "isMoving": True,
                "movingTo": agent.movement.destination,
                "movementPath": list(agent.movement.remaining_path),
                "movementProgress": agent.movement.steps_remaining,
                "movementTotal": agent.movement.total_steps,
            })
        data[agent.name] = entry
    return data


def save_roster(path: Path, roster: AgentRoster) -> None:
    _write_json(path, roster_to_dict(roster))


def save_hotel(path: Path, name: str, graph: LocationGraph) -> None:
    _write_json(path, {"name": name, "locations": graph.to_dict()})
