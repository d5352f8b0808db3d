# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Chat webhook poster (Discord-style embeds).

Two kinds of posts:
  - movement progress for agents in transit (hop events), with a 10-block
    progress bar;
  - an agent's turn text, coloured by location.

Posting is best effort: a missing URL disables it and HTTP failures are
logged, never raised into the tick loop.
"""

from __future__ import annotations

import asyncio
import re
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
from loguru import logger

from molthotel.simulation.movement import EventKind, MovementEvent

_BAR_LENGTH = 10
_TRANSIT_COLOR = 0xF39C12
_DEFAULT_COLOR = 0x95A5A6

LOCATION_COLORS: dict[str, int] = {
    "lobby": 0x3498DB,
    "pool": 0x1ABC9C,
    "gym": 0xE74C3C,
    "restaurant": 0xF39C12,
    "outside_smoking_area": 0x7F8C8D,
    "hall_1": 0x95A5A6,
    "room_a1": 0xECF0F1,
}

_ACTION_RE = re.compile(r"\*\*\[([^\]]+)\]\*\*")


def progress_bar(percent: int, length: int = _BAR_LENGTH) -> str:
    percent = min(max(percent, 0), 100)
    filled = round(percent / 100 * length)
    return "█" * filled + "░" * (length - filled)


def location_color(location: str) -> int:
    return LOCATION_COLORS.get(location.lower().replace(" ", "_"), _DEFAULT_COLOR)


def format_actions(text: str) -> str:
    """``**[action]**`` becomes bold-italic ``***[action]***``."""
    return _ACTION_RE.sub(r"***[\1]***", text)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class WebhookPoster:
    """Posts embeds to a chat webhook with an httpx.AsyncClient."""

    def __init__(
        self,
        url: Optional[str],
        job_title: Callable[[str], str] | None = None,
        client: httpx.AsyncClient | None = None,
        pause: float = 0.3,
        timeout: float = 10.0,
    ) -> None:
        self.url = url or None
        self._job_title = job_title or (lambda agent: "")
        self._client = client
        self._owns_client = client is None
        self._pause = pause
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return self.url is not None

    def movement_embed(self, event: MovementEvent) -> dict:
        return {
            "author": {"name": self._author(event.agent_id)},
            "description": (
                f"🚶 **En route vers {event.destination}**\n\n"
                f"`{progress_bar(event.progress)}` {event.progress}%"
            ),
            "color": _TRANSIT_COLOR,
            "fields": [
                {"name": "De", "value": event.to_location, "inline": True},
                {"name": "Vers", "value": event.destination, "inline": True},
            ],
            "footer": {"text": "En transit"},
            "timestamp": _timestamp(),
        }

    def message_embed(self, agent: str, location: str, text: str) -> dict:
        return {
            "author": {"name": self._author(agent)},
            "description": format_actions(text),
            "color": location_color(location),
            "footer": {"text": f"📍 {location}"},
            "timestamp": _timestamp(),
        }

    async def post_event(self, event: MovementEvent) -> bool:
        """Event sink: hops are posted as progress; arrivals go to the transcript."""
        if event.kind is not EventKind.HOP:
            return False
        return await self._post(self.movement_embed(event))

    async def post_message(self, agent: str, location: str, text: str) -> bool:
        return await self._post(self.message_embed(agent, location, text))

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # -- Internal --

    def _author(self, agent: str) -> str:
        title = self._job_title(agent)
        return f"{agent.upper()} • {title}" if title else agent.upper()

    async def _post(self, embed: dict) -> bool:
        if not self.enabled:
            return False
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        try:
            resp = await self._client.post(self.url, json={"embeds": [embed]})
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Webhook post failed: {e}")
            return False
        if self._pause > 0:
            await asyncio.sleep(self._pause)
        return True
