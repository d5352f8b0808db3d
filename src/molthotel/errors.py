# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Exception types shared across the venue, simulation and admin layers.

Only lookup failures and administrative misuse are exceptions. Routine
refusals (busy, unreachable, cross-floor) are reported as values.
"""

from __future__ import annotations


class NotFound(LookupError):
    """A referenced location, agent or job does not exist."""

    kind = "entity"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown {self.kind}: {name!r}")
        self.name = name


class LocationNotFound(NotFound):
    kind = "location"


class AgentNotFound(NotFound):
    kind = "agent"


class JobNotFound(NotFound):
    kind = "job"


class AdminError(ValueError):
    """An administrative operation was refused (duplicate agent, bad room)."""
