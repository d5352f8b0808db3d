# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""ChatTurnTaker — LLM-backed turn callback for the simulation engine.

For each idle agent handed over by the engine:

  1. load the persona from ``<agents_dir>/<name>.md`` (no persona, no turn);
  2. build the system/user prompts from the turn context, the agent's
     memory and the transcript tail;
  3. call an Ollama-compatible ``/api/chat`` endpoint;
  4. record the line in the transcript, update memory and mood, post it
     to the webhook and count its cost.

A failed model call still produces a line (``"Bon."``) so the transcript
keeps its rhythm.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx
from loguru import logger

from molthotel.comms.transcript import TranscriptLog
from molthotel.comms.webhook import WebhookPoster
from molthotel.simulation.agents import AgentRoster, Job
from molthotel.simulation.engine import TurnContext, TurnResult
from molthotel.simulation.scheduler import RandomSource
from molthotel.turns.memory import MemoryStore, update_mood
from molthotel.turns.prompts import (
    ERROR_FALLBACK,
    build_system_prompt,
    build_user_prompt,
    clean_response,
    describe_nearby,
)


@dataclass
class CostTracker:
    """Running count of turns and their estimated cost against a budget."""

    cost_per_turn: float = 0.0011
    budget: float = 15.0
    margin: float = 0.5
    turns: int = 0
    cost: float = 0.0

    def record(self) -> None:
        self.turns += 1
        self.cost += self.cost_per_turn

    @property
    def remaining(self) -> float:
        return self.budget - self.cost

    @property
    def exhausted(self) -> bool:
        return self.cost >= self.budget - self.margin

    def summary(self) -> str:
        return f"Messages: {self.turns} | Cost: ${self.cost:.4f} | Left: ${self.remaining:.2f}"


async def ollama_chat(
    client: httpx.AsyncClient,
    base_url: str,
    model: str,
    messages: list[dict],
    temperature: float = 0.85,
    max_tokens: int = 150,
) -> str:
    """Call Ollama's chat API and return the assistant text."""
    payload = {
        "model": model,
        "messages": messages,
        "stream": False,
        "options": {"temperature": temperature, "num_predict": max_tokens},
    }
    resp = await client.post(f"{base_url.rstrip('/')}/api/chat", json=payload)
    resp.raise_for_status()
    return resp.json().get("message", {}).get("content", "")


class ChatTurnTaker:
    """Async turn callback: ``await taker(ctx) -> TurnResult``."""

    def __init__(
        self,
        roster: AgentRoster,
        jobs: dict[str, Job],
        agents_dir: Path,
        memory: MemoryStore,
        transcript: TranscriptLog | None = None,
        webhook: WebhookPoster | None = None,
        cost: CostTracker | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        base_url: str = "http://localhost:11434",
        model: str = "gemma3:4b",
        temperature: float = 0.85,
        max_tokens: int = 150,
        timeout: float = 60.0,
        rng: RandomSource | None = None,
    ) -> None:
        self.roster = roster
        self.jobs = jobs
        self.agents_dir = Path(agents_dir)
        self.memory = memory
        self.transcript = transcript
        self.webhook = webhook
        self.cost = cost or CostTracker()
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.rng = rng or random.Random()
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    def job_title(self, agent: str) -> str:
        found = self.roster.find(agent)
        if found is None:
            return ""
        job = self.jobs.get(found.job)
        return job.title if job else found.job

    def persona(self, agent: str) -> Optional[str]:
        path = self.agents_dir / f"{agent}.md"
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    async def __call__(self, ctx: TurnContext) -> TurnResult:
        persona = self.persona(ctx.agent_id)
        if persona is None:
            logger.debug(f"No persona for {ctx.agent_id}, turn skipped")
            return TurnResult(skipped=True)

        agent = self.roster.get(ctx.agent_id)
        job = self.jobs.get(agent.job)
        job_title = job.title if job else agent.job
        memory = self.memory.load(ctx.agent_id)

        system = build_system_prompt(
            name=agent.name,
            gender=agent.gender,
            persona=persona,
            job_title=job_title,
            job_description=job.description if job else "",
            location=ctx.location,
            floor=ctx.floor,
            reachable=ctx.reachable,
            others=[f"{a.name} ({self.job_title(a.name)})" for a in self.roster.active()],
        )
        nearby = []
        for name in ctx.nearby:
            other = self.roster.find(name)
            if other is not None:
                nearby.append((name, other.gender, self.job_title(name)))
        user = build_user_prompt(
            ctx.location, describe_nearby(nearby), memory.mood, job_title,
            memories=memory.recent(),
            recent=self.transcript.recent() if self.transcript is not None else "",
        )

        text = await self._generate(system, user)
        self.cost.record()

        if self.transcript is not None:
            self.transcript.append(ctx.agent_id, ctx.location, text)
        memory.remember(ctx.location, text)
        memory.mood = update_mood(text, self.rng)
        self.memory.save(ctx.agent_id, memory)

        logger.info(f"[{ctx.agent_id}] {text}")
        logger.info(self.cost.summary())

        if self.webhook is not None:
            await self.webhook.post_message(ctx.agent_id, ctx.location, text)
        return TurnResult(text=text)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _generate(self, system: str, user: str) -> str:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
        try:
            raw = await ollama_chat(
                self._client, self.base_url, self.model, messages,
                temperature=self.temperature, max_tokens=self.max_tokens,
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"LLM call failed: {e}")
            return ERROR_FALLBACK
        return clean_response(raw)
