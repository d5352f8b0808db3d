# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Location graph for the hotel venue.

Builds a NetworkX directed graph from the hotel's location table: every
named location is a node, every entry in a location's ``connections`` list
is an edge.  Adjacency is stored exactly as configured, so a one-way
listing produces a one-way edge.

The graph is read-only during a run.  The one exception is room ownership
(``owner`` / ``locked``), which the administrative room-assignment
operation updates through :meth:`LocationGraph.set_owner`.

Usage:
    graph = LocationGraph.from_mapping(hotel["locations"])
    graph.neighbors("lobby")   # ('hall_1', 'restaurant', ...)
    graph.floor("room_a1")     # 1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional

import networkx as nx
from loguru import logger

from molthotel.errors import LocationNotFound


@dataclass
class Location:
    """A named place in the venue."""

    name: str
    floor: int = 1
    staff_only: bool = False
    is_private_room: bool = False
    description: str = ""
    connections: tuple[str, ...] = ()
    locked: bool = False
    owner: Optional[str] = None

    def __post_init__(self) -> None:
        if self.floor < 1:
            raise ValueError(f"Location {self.name!r}: floor must be >= 1, got {self.floor}")
        if self.owner is not None and not self.is_private_room:
            raise ValueError(f"Location {self.name!r}: only private rooms can have an owner")
        self.connections = tuple(self.connections)

    def to_dict(self) -> dict[str, Any]:
        return {
            "floor": self.floor,
            "staff_only": self.staff_only,
            "is_private_room": self.is_private_room,
            "description": self.description,
            "connections": list(self.connections),
            "is_locked": self.locked,
            "owner": self.owner,
        }


class LocationGraph:
    """Adjacency structure over the venue's locations.

    Nodes carry their :class:`Location` under the ``location`` attribute.
    Successor order follows each location's configured ``connections``
    order.
    """

    def __init__(self, locations: Iterable[Location] = ()) -> None:
        self.graph: nx.DiGraph = nx.DiGraph()
        self._locations: dict[str, Location] = {}
        for loc in locations:
            self._locations[loc.name] = loc
        self._build()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "LocationGraph":
        """Build from a ``{name: {floor, connections, ...}}`` mapping."""
        locations = []
        for name, raw in data.items():
            locations.append(Location(
                name=name,
                floor=int(raw.get("floor", 1)),
                staff_only=bool(raw.get("staff_only", False)),
                is_private_room=bool(raw.get("is_private_room", False)),
                description=raw.get("description", ""),
                connections=tuple(raw.get("connections", ())),
                locked=bool(raw.get("is_locked") or False),
                owner=raw.get("owner"),
            ))
        return cls(locations)

    # -- Queries --

    def exists(self, name: str) -> bool:
        return name in self._locations

    def get(self, name: str) -> Location:
        """Return the location called ``name`` or raise LocationNotFound."""
        try:
            return self._locations[name]
        except KeyError:
            raise LocationNotFound(name) from None

    def floor(self, name: str) -> int:
        return self.get(name).floor

    def neighbors(self, name: str) -> tuple[str, ...]:
        """Locations directly reachable from ``name`` via listed edges."""
        self.get(name)
        return tuple(self.graph.successors(name))

    def locations_on_floor(self, floor: int) -> list[Location]:
        return [loc for loc in self._locations.values() if loc.floor == floor]

    def names(self) -> list[str]:
        return list(self._locations)

    def owned_by(self, owner: str) -> list[Location]:
        """Private rooms currently assigned to ``owner``."""
        return [loc for loc in self._locations.values() if loc.owner == owner]

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations.values())

    def __len__(self) -> int:
        return len(self._locations)

    def __contains__(self, name: object) -> bool:
        return name in self._locations

    # -- Mutation (room assignment only) --

    def set_owner(self, name: str, owner: Optional[str], locked: bool) -> Location:
        """Assign or clear the owner of a private room."""
        loc = self.get(name)
        if owner is not None and not loc.is_private_room:
            raise ValueError(f"{name!r} is not a private room")
        loc.owner = owner
        loc.locked = locked
        return loc

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: loc.to_dict() for name, loc in self._locations.items()}

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _build(self) -> None:
        G = nx.DiGraph()
        for name, loc in self._locations.items():
            G.add_node(name, location=loc, floor=loc.floor)

        dropped = 0
        for name, loc in self._locations.items():
            for target in loc.connections:
                if target not in self._locations:
                    dropped += 1
                    logger.warning(f"Location {name!r} lists unknown connection {target!r}; ignored")
                    continue
                if target == name:
                    continue
                G.add_edge(name, target)

        self.graph = G
        logger.debug(
            f"Location graph built: {len(G.nodes)} locations, {len(G.edges)} edges"
            + (f", {dropped} dangling connections dropped" if dropped else "")
        )
