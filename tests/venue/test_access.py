# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for AccessController."""

from __future__ import annotations

import pytest

from molthotel.errors import LocationNotFound
from molthotel.venue.access import AccessController

pytestmark = pytest.mark.unit


class TestCanEnter:

    def test_public_open_to_everyone(self, hotel_graph):
        access = AccessController(hotel_graph)
        assert access.can_enter("bob", "lobby")
        assert access.can_enter("marie", "lobby")

    def test_staff_only_does_not_gate(self, hotel_graph):
        assert AccessController(hotel_graph).can_enter("jacques", "kitchen")

    def test_private_room_admits_owner(self, hotel_graph):
        assert AccessController(hotel_graph).can_enter("marie", "room_a1")

    def test_private_room_refuses_others(self, hotel_graph):
        assert not AccessController(hotel_graph).can_enter("bob", "room_a1")

    def test_unowned_private_room_refuses_everyone(self, hotel_graph):
        access = AccessController(hotel_graph)
        assert not access.can_enter("marie", "room_a2")
        assert not access.can_enter("bob", "room_a2")

    def test_follows_ownership_changes(self, hotel_graph):
        access = AccessController(hotel_graph)
        hotel_graph.set_owner("room_a2", "bob", locked=True)
        assert access.can_enter("bob", "room_a2")
        hotel_graph.set_owner("room_a2", None, locked=False)
        assert not access.can_enter("bob", "room_a2")

    def test_unknown_location_raises(self, hotel_graph):
        with pytest.raises(LocationNotFound):
            AccessController(hotel_graph).can_enter("bob", "attic")
