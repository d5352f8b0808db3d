# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Per-agent memory and mood, stored as one JSON file per agent."""

from __future__ import annotations

import json
import re
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from molthotel.simulation.scheduler import RandomSource

MAX_MEMORIES = 15
MEMORY_SNIPPET = 180

_ANGRY = re.compile(r"tabarnak|câlisse|ostie|fâché|énerve|tanné")
_HAPPY = re.compile(r"cool|parfait|nice|haha|lol|content|tranquille")
_DRIFT_MOODS = ("neutral", "calm", "content")
_DRIFT_PROBABILITY = 0.15


class AgentMemory(BaseModel):
    memories: list[str] = Field(default_factory=list)
    mood: str = "neutral"

    def remember(self, location: str, text: str) -> None:
        self.memories.append(f"[{location}] {text[:MEMORY_SNIPPET]}")
        del self.memories[:-MAX_MEMORIES]

    def recent(self, n: int = 3) -> list[str]:
        return self.memories[-n:]


def update_mood(text: str, rng: RandomSource) -> str:
    """Mood after saying ``text``.

    More than one angry word makes the agent angry, any happy word makes
    it happy; otherwise neutral.  Now and then the mood drifts to a random
    calm one regardless.
    """
    lowered = text.lower()
    if len(_ANGRY.findall(lowered)) > 1:
        mood = "angry"
    elif _HAPPY.search(lowered):
        mood = "happy"
    else:
        mood = "neutral"
    if rng.random() < _DRIFT_PROBABILITY:
        mood = rng.choice(_DRIFT_MOODS)
    return mood


class MemoryStore:
    """Loads and saves ``<memory_dir>/<agent>.json``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, agent: str) -> Path:
        return self.directory / f"{agent}.json"

    def load(self, agent: str) -> AgentMemory:
        path = self.path_for(agent)
        if not path.exists():
            return AgentMemory()
        try:
            return AgentMemory.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            logger.warning(f"Memory for {agent} unreadable, starting fresh: {e}")
            return AgentMemory()

    def save(self, agent: str, memory: AgentMemory) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path_for(agent).write_text(
            json.dumps(memory.model_dump(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
