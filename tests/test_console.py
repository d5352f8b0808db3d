# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for the operator CommandConsole."""

from __future__ import annotations

import asyncio
import io
import random
from unittest.mock import MagicMock

import pytest

from molthotel.admin import VenueAdmin
from molthotel.console import HELP, CommandConsole
from molthotel.simulation.engine import SimulationEngine

pytestmark = pytest.mark.unit


@pytest.fixture
def console(hotel_graph, hotel_roster, jobs):
    engine = SimulationEngine(hotel_graph, hotel_roster, rng=random.Random(0))
    return CommandConsole(VenueAdmin(engine, jobs))


class TestExecute:

    def test_blank_line(self, console):
        assert console.execute("   ") == ""

    def test_unknown_command(self, console):
        assert console.execute("dance bob") == "Unknown: dance"

    def test_usage_on_wrong_arity(self, console):
        assert console.execute("move bob") == "Usage: move <agent> <location>"
        assert console.execute("add luc").startswith("Usage: add")

    def test_help(self, console):
        assert console.execute("help") == HELP

    def test_list(self, console):
        console.execute("move bob kitchen")
        out = console.execute("list")
        assert "marie - Barmaid [active, smoker] @ restaurant" in out
        assert "bob - Cuisinier [active] @ lobby -> kitchen (2 steps)" in out

    def test_move_reports_outcome(self, console):
        assert console.execute("move bob kitchen") == "bob -> kitchen: started"
        assert console.execute("move bob lobby") == "bob -> lobby: busy"
        assert console.execute("move jacques hall_2") == "jacques -> hall_2: cross_floor"

    def test_errors_reported(self, console):
        assert console.execute("move bob attic") == "Error: Unknown location: 'attic'"
        assert console.execute("fire nobody") == "Error: Unknown agent: 'nobody'"
        assert console.execute("room bob lobby").startswith("Error:")

    def test_fire_and_rehire(self, console):
        assert console.execute("fire bob") == "bob deactivated"
        assert not console.admin.roster.get("bob").active
        assert console.execute("rehire bob") == "bob activated"
        assert console.admin.roster.get("bob").active

    def test_smoker(self, console):
        assert console.execute("smoker bob true") == "bob smoker: yes"
        assert console.admin.roster.get("bob").diversion_eligible
        assert console.execute("smoker bob no") == "bob smoker: no"

    def test_assign_and_room(self, console):
        assert console.execute("assign bob barmaid") == "bob assigned to Barmaid"
        assert console.execute("room bob room_a2") == "room_a2 now belongs to bob"

    def test_add_and_remove(self, console):
        out = console.execute("add luc male cook true")
        assert out == "Added luc (male) as Cuisinier @ kitchen"
        assert console.admin.roster.get("luc").diversion_eligible
        assert console.execute("remove luc") == "Removed luc"

    def test_jobs_and_locations(self, console):
        assert "barmaid - Barmaid (restaurant)" in console.execute("jobs")
        assert "room_a1 (Floor 1) [owner: marie]" in console.execute("locations")

    def test_quoted_arguments(self, console):
        assert console.execute('move "bob" kitchen') == "bob -> kitchen: started"

    def test_quit(self, hotel_graph, hotel_roster, jobs):
        on_quit = MagicMock()
        engine = SimulationEngine(hotel_graph, hotel_roster, rng=random.Random(0))
        console = CommandConsole(VenueAdmin(engine, jobs), on_quit=on_quit)
        assert console.execute("quit") == "Bye!"
        assert console.closed
        on_quit.assert_called_once()


class TestRun:

    def test_reads_until_quit(self, console, capsys):
        stream = io.StringIO("fire bob\nquit\nrehire bob\n")
        asyncio.run(console.run(stream))
        out = capsys.readouterr().out
        assert "bob deactivated" in out
        assert "Bye!" in out
        assert not console.admin.roster.get("bob").active

    def test_stops_at_end_of_input(self, console):
        asyncio.run(console.run(io.StringIO("fire bob\n")))
        assert not console.closed
        assert not console.admin.roster.get("bob").active
