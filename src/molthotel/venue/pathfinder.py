# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Single-floor, access-aware route search over the location graph.

Routes are shortest in hop count.  The search runs on a filtered view of
the graph: a location is admitted to the BFS frontier only if it is on the
origin's floor and the requesting agent may enter it.  Inaccessible rooms
are therefore never queued, not even as waypoints.

Cross-floor requests are rejected before any search runs; floors are not
connected in this model.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

import networkx as nx
from loguru import logger

from molthotel.venue.access import AccessController
from molthotel.venue.location_graph import LocationGraph


class PathStatus(enum.Enum):
    FOUND = "found"
    UNREACHABLE = "unreachable"
    CROSS_FLOOR = "cross_floor"


@dataclass(frozen=True)
class PathResult:
    """Outcome of a route query.  ``path`` is empty unless FOUND."""

    status: PathStatus
    path: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.status is PathStatus.FOUND

    @property
    def hops(self) -> int:
        return max(len(self.path) - 1, 0)


class PathFinder:
    """Computes routes for agents through the venue."""

    def __init__(self, graph: LocationGraph, access: AccessController) -> None:
        self._graph = graph
        self._access = access

    def find_path(self, origin: str, destination: str, agent: str) -> PathResult:
        """Shortest accessible same-floor route from ``origin`` to ``destination``.

        Both endpoints are included in the returned path.  Unknown names
        raise LocationNotFound.
        """
        start = self._graph.get(origin)
        end = self._graph.get(destination)

        if origin == destination:
            return PathResult(PathStatus.FOUND, (destination,))

        if start.floor != end.floor:
            logger.debug(f"{agent}: {origin} -> {destination} spans floors {start.floor}/{end.floor}")
            return PathResult(PathStatus.CROSS_FLOOR)

        admit = self._admission(origin, start.floor, agent)
        if not admit(destination):
            return PathResult(PathStatus.UNREACHABLE)

        view = nx.subgraph_view(self._graph.graph, filter_node=admit)
        try:
            path = nx.shortest_path(view, origin, destination)
        except nx.NetworkXNoPath:
            return PathResult(PathStatus.UNREACHABLE)
        return PathResult(PathStatus.FOUND, tuple(path))

    def reachable(self, origin: str, agent: str) -> frozenset[str]:
        """Every location ``agent`` can walk to from ``origin`` (origin included)."""
        start = self._graph.get(origin)
        view = nx.subgraph_view(
            self._graph.graph,
            filter_node=self._admission(origin, start.floor, agent),
        )
        return frozenset(nx.descendants(view, origin) | {origin})

    def _admission(self, origin: str, floor: int, agent: str) -> Callable[[str], bool]:
        """Frontier predicate: same floor and enterable.  The origin always passes."""
        graph = self._graph.graph

        def admit(node: str) -> bool:
            if node == origin:
                return True
            return graph.nodes[node]["floor"] == floor and self._access.can_enter(agent, node)

        return admit
