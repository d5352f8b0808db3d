# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Append-only hotel transcript (``logs/hotel.log``)."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from molthotel.simulation.movement import EventKind, MovementEvent


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class TranscriptLog:
    """Writes turn lines and arrivals; also serves the recent tail as context.

    Entry format::

        [2026-01-01T12:00:00.000+00:00] [MARIE | Barmaid | restaurant]
        <text>
    """

    def __init__(
        self,
        path: Path,
        job_title: Callable[[str], str] | None = None,
        clock: Callable[[], str] = _now,
    ) -> None:
        self.path = Path(path)
        self._job_title = job_title or (lambda agent: "")
        self._clock = clock

    def append(self, agent: str, location: str, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        header = f"[{self._clock()}] [{agent.upper()} | {self._job_title(agent)} | {location}]"
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(f"\n{header}\n{text}\n")

    def record_event(self, event: MovementEvent) -> None:
        """Event sink: arrivals are written, intermediate hops are not."""
        if event.kind is not EventKind.ARRIVAL:
            return
        self.append(event.agent_id, event.destination, f"**[arrive à {event.destination}]**")

    def recent(self, lines: int = 15) -> str:
        if not self.path.exists():
            return ""
        text = self.path.read_text(encoding="utf-8")
        kept = [line for line in text.splitlines() if line.strip()]
        return "\n".join(kept[-lines:])
