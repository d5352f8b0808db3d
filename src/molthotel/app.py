# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""FastAPI application for the venue admin API."""

from __future__ import annotations

from fastapi import FastAPI

from molthotel import __version__
from molthotel.admin import VenueAdmin
from molthotel.routers.venue import router as venue_router


def create_app(admin: VenueAdmin | None = None) -> FastAPI:
    app = FastAPI(title="Molt Hotel", version=__version__)
    app.state.venue_admin = admin
    app.include_router(venue_router)
    return app
