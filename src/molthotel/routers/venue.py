# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Venue administration API — roster, jobs, rooms and manual moves."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from molthotel.admin import VenueAdmin
from molthotel.errors import AdminError, NotFound

router = APIRouter(prefix="/api/venue", tags=["venue"])


class AgentCreate(BaseModel):
    name: str
    gender: str = "male"
    job: str = "guest"
    smoker: bool = False
    location: Optional[str] = None


class AgentUpdate(BaseModel):
    job: Optional[str] = None
    gender: Optional[str] = None
    smoker: Optional[bool] = None
    active: Optional[bool] = None


class MoveRequest(BaseModel):
    destination: str


class RoomRequest(BaseModel):
    room: str


def _get_admin(request: Request) -> VenueAdmin:
    admin = getattr(request.app.state, "venue_admin", None)
    if admin is None:
        raise HTTPException(503, "Venue not available")
    return admin


def _fail(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(404, str(exc))
    return HTTPException(400, str(exc))


def _agent_row(admin: VenueAdmin, name: str) -> dict:
    return next(row for row in admin.list_agents() if row["name"] == name)


@router.get("/status")
async def venue_status(request: Request):
    admin = _get_admin(request)
    return {
        "hotel": admin.hotel_name,
        "tick": admin.engine.tick,
        "running": admin.engine.running,
        "agents": len(admin.roster),
        "active_agents": len(admin.roster.active()),
    }


@router.get("/agents")
async def list_agents(request: Request):
    return {"agents": _get_admin(request).list_agents()}


@router.post("/agents", status_code=201)
async def add_agent(body: AgentCreate, request: Request):
    admin = _get_admin(request)
    try:
        agent = admin.add_agent(
            body.name, gender=body.gender, job=body.job,
            smoker=body.smoker, location=body.location,
        )
    except (NotFound, AdminError) as exc:
        raise _fail(exc) from None
    return _agent_row(admin, agent.name)


@router.patch("/agents/{name}")
async def update_agent(name: str, body: AgentUpdate, request: Request):
    admin = _get_admin(request)
    try:
        if body.job is not None:
            admin.assign_job(name, body.job)
        if body.gender is not None:
            admin.set_gender(name, body.gender)
        if body.smoker is not None:
            admin.set_diversion_eligible(name, body.smoker)
        if body.active is not None:
            admin.set_active(name, body.active)
        admin.roster.get(name)
    except (NotFound, AdminError) as exc:
        raise _fail(exc) from None
    return _agent_row(admin, name)


@router.delete("/agents/{name}")
async def remove_agent(name: str, request: Request):
    try:
        _get_admin(request).remove_agent(name)
    except NotFound as exc:
        raise _fail(exc) from None
    return {"removed": name}


@router.post("/agents/{name}/move")
async def move_agent(name: str, body: MoveRequest, request: Request):
    admin = _get_admin(request)
    try:
        outcome = admin.move_agent(name, body.destination)
    except NotFound as exc:
        raise _fail(exc) from None
    return {"agent": name, "destination": body.destination, "outcome": outcome.value}


@router.post("/agents/{name}/room")
async def assign_room(name: str, body: RoomRequest, request: Request):
    admin = _get_admin(request)
    try:
        admin.assign_room(name, body.room)
    except (NotFound, AdminError) as exc:
        raise _fail(exc) from None
    return {"agent": name, "room": body.room}


@router.get("/jobs")
async def list_jobs(request: Request):
    jobs = _get_admin(request).list_jobs()
    return {
        "jobs": [
            {"id": j.id, "title": j.title, "location": j.location,
             "description": j.description, "duties": list(j.duties)}
            for j in jobs
        ]
    }


@router.get("/locations")
async def list_locations(request: Request):
    return {"locations": _get_admin(request).list_locations()}
