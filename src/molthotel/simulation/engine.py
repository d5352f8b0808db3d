# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""SimulationEngine — the per-tick control loop.

One tick, processed to completion before the next begins:

  1. The TickScheduler advances the clock and picks agents.
  2. For each picked agent, in order:
     - en route: advance one hop, publish the hop/arrival event, done;
     - idle and due a diversion: request the diversion move (stamping the
       cooldown); if that started a route the agent is done for the tick;
     - otherwise hand the agent to the turn callback and await it, then
       apply any follow-up move (explicit, or the wander back from the
       diversion spot).

The only suspension points are the turn callback, async event sinks and
the pause between turns.  Admin operations may change the roster while a
tick is suspended, so every agent is looked up again before it is
processed.  Failures in sinks or turn callbacks are logged and never
touch movement state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from molthotel.errors import NotFound
from molthotel.simulation.agents import Agent, AgentRoster
from molthotel.simulation.diversion import DiversionPolicy, ReturnPolicy
from molthotel.simulation.movement import MovementController, MovementEvent, MoveOutcome
from molthotel.simulation.scheduler import RandomSource, TickClock, TickScheduler
from molthotel.venue.access import AccessController
from molthotel.venue.location_graph import LocationGraph
from molthotel.venue.pathfinder import PathFinder

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnContext:
    """What the turn collaborator is told about an idle agent."""

    agent_id: str
    location: str
    tick: int
    floor: int
    reachable: frozenset[str] = frozenset()
    nearby: tuple[str, ...] = ()


@dataclass
class TurnResult:
    """Opaque outcome of a turn; only the follow-up move is acted upon."""

    text: str = ""
    follow_up_destination: Optional[str] = None
    skipped: bool = False


@dataclass
class TickReport:
    tick: int
    selected: list[str] = field(default_factory=list)
    events: list[MovementEvent] = field(default_factory=list)
    diverted: list[str] = field(default_factory=list)
    turns: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


TurnCallback = Callable[[TurnContext], Awaitable[Optional[TurnResult]]]
EventSink = Callable[[MovementEvent], Any]


class SimulationEngine:
    """Owns the venue state and drives it one tick at a time."""

    def __init__(
        self,
        graph: LocationGraph,
        roster: AgentRoster,
        *,
        rng: RandomSource | None = None,
        clock: TickClock | None = None,
        scheduler: TickScheduler | None = None,
        diversion: DiversionPolicy | None = None,
        return_policy: ReturnPolicy | None = None,
        turn_callback: TurnCallback | None = None,
        turn_gap: tuple[float, float] = (0.0, 0.0),
        tick_interval: tuple[float, float] = (0.0, 0.0),
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.graph = graph
        self.roster = roster
        self.rng = rng or random.Random()
        self.clock = clock or TickClock()
        self.access = AccessController(graph)
        self.pathfinder = PathFinder(graph, self.access)
        self.movement = MovementController(self.pathfinder)
        self.scheduler = scheduler or TickScheduler(roster, self.clock, rng=self.rng, graph=graph)
        self.diversion = diversion
        self.return_policy = return_policy
        self.turn_callback = turn_callback
        self._turn_gap = turn_gap
        self._tick_interval = tick_interval
        self._sleep = sleep
        self._sinks: list[EventSink] = []
        self._running = False

    @property
    def tick(self) -> int:
        return self.clock.tick

    @property
    def running(self) -> bool:
        return self._running

    def add_event_sink(self, sink: EventSink) -> None:
        """Register a sync or async callable receiving every MovementEvent."""
        self._sinks.append(sink)

    def context_for(self, agent: Agent, tick: int) -> TurnContext:
        nearby = tuple(a.name for a in self.roster.at(agent.location) if a.name != agent.name)
        return TurnContext(
            agent_id=agent.name,
            location=agent.location,
            tick=tick,
            floor=self.graph.floor(agent.location),
            reachable=self.pathfinder.reachable(agent.location, agent.name),
            nearby=nearby,
        )

    # ------------------------------------------------------------------
    # Tick processing
    # ------------------------------------------------------------------

    async def process_tick(self) -> TickReport:
        selected = self.scheduler.advance_tick()
        tick = self.clock.tick
        report = TickReport(tick=tick, selected=list(selected))

        for index, name in enumerate(selected):
            agent = self.roster.find(name)
            if agent is None or not agent.active:
                log.debug("tick %d: %s no longer eligible, skipped", tick, name)
                report.skipped.append(name)
                continue

            if agent.en_route:
                event = self.movement.advance(agent, tick)
                if event is not None:
                    report.events.append(event)
                    await self._publish(event)
                continue

            if self.diversion is not None and self.diversion.should_divert(agent, tick):
                self._divert(agent, tick)
                report.diverted.append(name)
                if agent.en_route:
                    continue

            took_turn = await self._take_turn(agent, tick)
            if took_turn:
                report.turns.append(name)
                if index < len(selected) - 1:
                    await self._pause(self._turn_gap)

        log.info(
            "tick %d: %d selected, %d moved, %d turns",
            tick, len(report.selected), len(report.events), len(report.turns),
        )
        return report

    async def run(
        self,
        max_ticks: int | None = None,
        stop_condition: Callable[[], bool] | None = None,
    ) -> int:
        """Process ticks until ``max_ticks``, the stop condition, or stop().

        The stop condition is only checked between ticks.  Returns the
        number of ticks processed.
        """
        self._running = True
        processed = 0
        try:
            while self._running and (max_ticks is None or processed < max_ticks):
                if stop_condition is not None and stop_condition():
                    log.info("Stop condition reached after tick %d", self.clock.tick)
                    break
                await self.process_tick()
                processed += 1
                if not self._running or (max_ticks is not None and processed >= max_ticks):
                    break
                delay = await self._pause(self._tick_interval)
                log.info("Next tick in %.1fs (tick #%d)", delay, self.clock.tick)
        finally:
            self._running = False
        return processed

    def stop(self) -> None:
        self._running = False

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _take_turn(self, agent: Agent, tick: int) -> bool:
        if self.turn_callback is None:
            return False
        ctx = self.context_for(agent, tick)
        try:
            result = await self.turn_callback(ctx)
        except Exception:
            log.exception("Turn failed for %s at tick %d", agent.name, tick)
            return False

        if result is not None and result.skipped:
            return False

        # The roster may have changed while the turn was awaited.
        if self.roster.find(agent.name) is not agent or not agent.active:
            return True

        destination = result.follow_up_destination if result is not None else None
        if destination is None and self.return_policy is not None:
            destination = self.return_policy.pick_destination(agent)
        if destination is not None:
            self._follow_up(agent, destination)
        return True

    def _divert(self, agent: Agent, tick: int) -> MoveOutcome | None:
        try:
            outcome = self.diversion.divert(agent, tick, self.movement)
        except NotFound as exc:
            log.warning("Diversion for %s ignored: %s", agent.name, exc)
            return None
        log.info("tick %d: %s heads for %s (%s)", tick, agent.name, self.diversion.location, outcome.value)
        return outcome

    def _follow_up(self, agent: Agent, destination: str) -> MoveOutcome | None:
        try:
            outcome = self.movement.request_move(agent, destination)
        except NotFound as exc:
            log.warning("Follow-up move for %s ignored: %s", agent.name, exc)
            return None
        log.debug("%s follow-up move to %s: %s", agent.name, destination, outcome.value)
        return outcome

    async def _publish(self, event: MovementEvent) -> None:
        for sink in list(self._sinks):
            try:
                result = sink(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                log.exception("Event sink failed for %s", event.agent_id)

    async def _pause(self, bounds: tuple[float, float]) -> float:
        low, high = bounds
        if high <= 0:
            return 0.0
        delay = low + self.rng.random() * max(high - low, 0.0)
        await self._sleep(delay)
        return delay
