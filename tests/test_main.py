# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for the command-line entry point."""

from __future__ import annotations

import asyncio
import json

import pytest

from molthotel.__main__ import apply_args, build_parser, run
from molthotel.config import Settings

pytestmark = pytest.mark.unit


class TestArgs:

    def test_overrides_only_given_values(self):
        args = build_parser().parse_args(["--seed", "7", "--port", "8080"])
        s = apply_args(Settings(_env_file=None), args)
        assert s.seed == 7
        assert s.api_port == 8080
        assert s.hotel_file.name == "hotel.json"


class TestRun:

    def test_headless_run_saves_state(self, tmp_path, hotel_data):
        hotel = tmp_path / "hotel.json"
        agents = tmp_path / "agents.json"
        jobs = tmp_path / "jobs.json"
        hotel.write_text(json.dumps({"name": "Molt", "locations": hotel_data}), encoding="utf-8")
        agents.write_text(json.dumps({
            "marie": {"gender": "female", "job": "barmaid", "isSmoker": True},
            "bob": {"job": "cook"},
        }), encoding="utf-8")
        jobs.write_text(json.dumps([
            {"id": "barmaid", "title": "Barmaid", "location": "restaurant"},
            {"id": "cook", "title": "Cuisinier", "location": "kitchen"},
        ]), encoding="utf-8")

        settings = Settings(
            _env_file=None,
            hotel_file=hotel, agents_file=agents, jobs_file=jobs,
            agents_dir=tmp_path / "personas", memory_dir=tmp_path / "memory",
            log_path=tmp_path / "logs" / "hotel.log",
            min_tick_interval=0, max_tick_interval=0,
            min_turn_gap=0, max_turn_gap=0, seed=3,
        )
        ticks = asyncio.run(run(settings, max_ticks=4, console=False))
        assert ticks == 4

        saved = json.loads(agents.read_text(encoding="utf-8"))
        assert set(saved) == {"marie", "bob"}
        assert all("location" in entry for entry in saved.values())
