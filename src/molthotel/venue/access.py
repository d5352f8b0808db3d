# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Access control for venue locations."""

from __future__ import annotations

from molthotel.venue.location_graph import LocationGraph


class AccessController:
    """Decides whether an agent may enter a location.

    Public locations are open to everyone.  A private room admits only its
    owner; an unowned private room admits nobody.  ``staff_only`` is kept on
    the location but does not gate movement.
    """

    def __init__(self, graph: LocationGraph) -> None:
        self._graph = graph

    def can_enter(self, agent: str, location: str) -> bool:
        loc = self._graph.get(location)
        if not loc.is_private_room:
            return True
        return loc.owner is not None and loc.owner == agent
