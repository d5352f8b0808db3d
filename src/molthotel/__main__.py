# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Run the hotel: ``python -m molthotel``.

Loads the venue, roster and jobs, then runs the tick loop alongside the
operator console and, when a port is given, the admin API.  Roster and
hotel files are written back after every admin change and on exit.
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys

import uvicorn
from loguru import logger

from molthotel.admin import VenueAdmin
from molthotel.app import create_app
from molthotel.comms.transcript import TranscriptLog
from molthotel.comms.webhook import WebhookPoster
from molthotel.config import (
    Settings,
    load_hotel,
    load_jobs,
    load_roster,
    save_hotel,
    save_roster,
)
from molthotel.console import CommandConsole
from molthotel.simulation.diversion import DiversionPolicy, ReturnPolicy
from molthotel.simulation.engine import SimulationEngine
from molthotel.simulation.scheduler import TickClock, TickScheduler
from molthotel.turns.llm import ChatTurnTaker, CostTracker
from molthotel.turns.memory import MemoryStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="molthotel", description="Molt Hotel simulation")
    parser.add_argument("--hotel", help="Hotel file (default: settings.hotel_file)")
    parser.add_argument("--agents", help="Roster file (default: settings.agents_file)")
    parser.add_argument("--jobs", help="Jobs file (default: settings.jobs_file)")
    parser.add_argument("--seed", type=int, help="Seed for the random source")
    parser.add_argument("--ticks", type=int, help="Stop after this many ticks")
    parser.add_argument("--port", type=int, help="Serve the admin API on this port")
    parser.add_argument("--no-console", action="store_true", help="Do not read commands from stdin")
    parser.add_argument("--log-level", help="Log level (default: settings.log_level)")
    return parser


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        "hotel_file": args.hotel,
        "agents_file": args.agents,
        "jobs_file": args.jobs,
        "seed": args.seed,
        "api_port": args.port,
        "log_level": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


async def run(settings: Settings, max_ticks: int | None = None, console: bool = True) -> int:
    rng = random.Random(settings.seed)
    hotel_name, graph = load_hotel(settings.hotel_file)
    jobs = load_jobs(settings.jobs_file)
    roster = load_roster(settings.agents_file, graph, jobs, rng, start_floor=settings.start_floor)

    clock = TickClock()
    engine = SimulationEngine(
        graph,
        roster,
        rng=rng,
        clock=clock,
        scheduler=TickScheduler(
            roster, clock, rng=rng, graph=graph,
            include_probability=settings.include_probability,
        ),
        turn_gap=(settings.min_turn_gap, settings.max_turn_gap),
        tick_interval=(settings.min_tick_interval, settings.max_tick_interval),
    )
    if graph.exists(settings.diversion_location):
        engine.diversion = DiversionPolicy(
            location=settings.diversion_location,
            interval=settings.diversion_interval,
            probability=settings.diversion_probability,
            rng=rng,
        )
        engine.return_policy = ReturnPolicy(
            graph, engine.access, settings.diversion_location,
            probability=settings.return_probability, rng=rng,
        )
    else:
        logger.warning(f"Diversion location {settings.diversion_location!r} not in hotel; breaks disabled")

    def save() -> None:
        save_roster(settings.agents_file, roster)
        save_hotel(settings.hotel_file, hotel_name, graph)

    def job_title(name: str) -> str:
        agent = roster.find(name)
        job = jobs.get(agent.job) if agent is not None else None
        return job.title if job else ""

    transcript = TranscriptLog(settings.log_path, job_title=job_title)
    webhook = WebhookPoster(settings.webhook_url, job_title=job_title)
    cost = CostTracker(settings.cost_per_turn, settings.budget, settings.budget_margin)
    taker = ChatTurnTaker(
        roster, jobs, settings.agents_dir, MemoryStore(settings.memory_dir),
        transcript=transcript, webhook=webhook, cost=cost,
        base_url=settings.llm_base_url, model=settings.llm_model,
        temperature=settings.llm_temperature, max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout, rng=rng,
    )
    engine.turn_callback = taker
    engine.add_event_sink(transcript.record_event)
    engine.add_event_sink(webhook.post_event)

    admin = VenueAdmin(engine, jobs, hotel_name=hotel_name, on_change=save)

    logger.info(f"Molt Hotel: {hotel_name}")
    logger.info(f"Agents: {len(roster.active())} active")

    console_task = None
    if console:
        cmd = CommandConsole(admin, on_quit=engine.stop)
        print("Type 'help' for commands", flush=True)
        console_task = asyncio.create_task(cmd.run())

    server = server_task = None
    if settings.api_port is not None:
        config = uvicorn.Config(
            create_app(admin), host=settings.api_host, port=settings.api_port,
            log_level=settings.log_level.lower(),
        )
        server = uvicorn.Server(config)
        server_task = asyncio.create_task(server.serve())
        logger.info(f"Admin API on http://{settings.api_host}:{settings.api_port}")

    try:
        ticks = await engine.run(
            max_ticks=max_ticks,
            stop_condition=lambda: cost.exhausted,
        )
    finally:
        if console_task is not None:
            console_task.cancel()
            await asyncio.gather(console_task, return_exceptions=True)
        if server is not None:
            server.should_exit = True
            await asyncio.gather(server_task, return_exceptions=True)
        await taker.aclose()
        await webhook.aclose()
        save()
    if cost.exhausted:
        logger.warning(f"Budget limit reached: {cost.summary()}")
    return ticks


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_args(Settings(), args)

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())

    try:
        asyncio.run(run(settings, max_ticks=args.ticks, console=not args.no_console))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
