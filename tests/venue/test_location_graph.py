# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for LocationGraph — construction, adjacency and room ownership."""

from __future__ import annotations

import pytest

from molthotel.errors import LocationNotFound
from molthotel.venue.location_graph import Location, LocationGraph

pytestmark = pytest.mark.unit


class TestLocation:

    def test_defaults(self):
        loc = Location(name="lobby")
        assert loc.floor == 1
        assert not loc.is_private_room
        assert loc.owner is None
        assert loc.connections == ()

    def test_floor_must_be_positive(self):
        with pytest.raises(ValueError):
            Location(name="basement", floor=0)

    def test_owner_only_on_private_room(self):
        with pytest.raises(ValueError):
            Location(name="lobby", owner="marie")

    def test_connections_become_tuple(self):
        loc = Location(name="lobby", connections=["hall_1"])
        assert loc.connections == ("hall_1",)

    def test_to_dict_uses_file_keys(self):
        d = Location(name="room", is_private_room=True, owner="marie", locked=True).to_dict()
        assert d["is_locked"] is True
        assert d["owner"] == "marie"
        assert "name" not in d


class TestLocationGraphBuild:

    def test_len_and_contains(self, hotel_graph):
        assert len(hotel_graph) == 9
        assert "lobby" in hotel_graph
        assert "attic" not in hotel_graph

    def test_neighbors_follow_configured_order(self, hotel_graph):
        assert hotel_graph.neighbors("lobby") == ("hall_1", "restaurant", "outside_smoking_area")

    def test_one_way_edge_is_kept_one_way(self):
        g = LocationGraph.from_mapping({
            "a": {"connections": ["b"]},
            "b": {"connections": []},
        })
        assert g.neighbors("a") == ("b",)
        assert g.neighbors("b") == ()

    def test_dangling_connection_dropped(self):
        g = LocationGraph.from_mapping({"a": {"connections": ["ghost", "b"]}, "b": {}})
        assert g.neighbors("a") == ("b",)
        assert "ghost" not in g

    def test_self_loop_ignored(self):
        g = LocationGraph.from_mapping({"a": {"connections": ["a"]}})
        assert g.neighbors("a") == ()

    def test_nodes_carry_floor(self, hotel_graph):
        assert hotel_graph.graph.nodes["hall_2"]["floor"] == 2
        assert hotel_graph.graph.nodes["lobby"]["location"].name == "lobby"


class TestLocationGraphQueries:

    def test_get_unknown_raises(self, hotel_graph):
        with pytest.raises(LocationNotFound) as exc:
            hotel_graph.get("attic")
        assert exc.value.name == "attic"

    def test_unknown_is_lookup_error(self, hotel_graph):
        with pytest.raises(LookupError):
            hotel_graph.neighbors("attic")

    def test_floor(self, hotel_graph):
        assert hotel_graph.floor("room_b1") == 2

    def test_locations_on_floor(self, hotel_graph):
        names = {loc.name for loc in hotel_graph.locations_on_floor(2)}
        assert names == {"hall_2", "room_b1"}

    def test_owned_by(self, hotel_graph):
        assert [loc.name for loc in hotel_graph.owned_by("marie")] == ["room_a1"]
        assert hotel_graph.owned_by("bob") == []

    def test_owner_loaded_from_mapping(self, hotel_graph):
        room = hotel_graph.get("room_a1")
        assert room.owner == "marie"
        assert room.locked is True


class TestSetOwner:

    def test_assign_and_clear(self, hotel_graph):
        hotel_graph.set_owner("room_a2", "bob", locked=True)
        assert hotel_graph.get("room_a2").owner == "bob"
        hotel_graph.set_owner("room_a2", None, locked=False)
        room = hotel_graph.get("room_a2")
        assert room.owner is None
        assert room.locked is False

    def test_public_location_refused(self, hotel_graph):
        with pytest.raises(ValueError):
            hotel_graph.set_owner("lobby", "bob", locked=True)

    def test_to_dict_round_trips_ownership(self, hotel_graph):
        hotel_graph.set_owner("room_a2", "bob", locked=True)
        rebuilt = LocationGraph.from_mapping(hotel_graph.to_dict())
        assert rebuilt.get("room_a2").owner == "bob"
        assert rebuilt.neighbors("lobby") == hotel_graph.neighbors("lobby")
