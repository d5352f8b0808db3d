"""Venue model: locations, access rules and route search."""

from .access import AccessController
from .location_graph import Location, LocationGraph
from .pathfinder import PathFinder, PathResult, PathStatus

__all__ = [
    "AccessController",
    "Location",
    "LocationGraph",
    "PathFinder",
    "PathResult",
    "PathStatus",
]
