# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for TranscriptLog."""

from __future__ import annotations

import pytest

from molthotel.comms.transcript import TranscriptLog
from molthotel.simulation.movement import EventKind, MovementEvent

pytestmark = pytest.mark.unit


def _log(tmp_path) -> TranscriptLog:
    return TranscriptLog(
        tmp_path / "logs" / "hotel.log",
        job_title=lambda agent: {"marie": "Barmaid"}.get(agent, ""),
        clock=lambda: "2026-01-01T12:00:00.000+00:00",
    )


def _event(kind: EventKind) -> MovementEvent:
    return MovementEvent(
        agent_id="marie", tick=3, from_location="lobby", to_location="restaurant",
        kind=kind, destination="restaurant", progress=100,
    )


class TestTranscriptLog:

    def test_append_creates_file_with_header(self, tmp_path):
        log = _log(tmp_path)
        log.append("marie", "restaurant", "**[essuie le comptoir]** Salut!")
        text = log.path.read_text(encoding="utf-8")
        assert "[2026-01-01T12:00:00.000+00:00] [MARIE | Barmaid | restaurant]" in text
        assert "**[essuie le comptoir]** Salut!" in text

    def test_arrival_recorded(self, tmp_path):
        log = _log(tmp_path)
        log.record_event(_event(EventKind.ARRIVAL))
        assert "**[arrive à restaurant]**" in log.path.read_text(encoding="utf-8")

    def test_hop_not_recorded(self, tmp_path):
        log = _log(tmp_path)
        log.record_event(_event(EventKind.HOP))
        assert not log.path.exists()

    def test_recent_tail(self, tmp_path):
        log = _log(tmp_path)
        for i in range(20):
            log.append("marie", "restaurant", f"ligne {i}")
        tail = log.recent(4).splitlines()
        assert len(tail) == 4
        assert tail[-1] == "ligne 19"
        assert "" not in tail

    def test_recent_without_file(self, tmp_path):
        assert _log(tmp_path).recent() == ""
