"""Tick-driven agent simulation: movement, scheduling and diversions."""

from .agents import Agent, AgentRoster, Job
from .diversion import DiversionPolicy, ReturnPolicy
from .engine import SimulationEngine, TickReport, TurnContext, TurnResult
from .movement import (
    IDLE,
    EnRoute,
    EventKind,
    Idle,
    MovementController,
    MovementEvent,
    MovementState,
    MoveOutcome,
)
from .scheduler import DEFAULT_TIERS, SelectionTier, TickClock, TickScheduler

__all__ = [
    "Agent",
    "AgentRoster",
    "DEFAULT_TIERS",
    "DiversionPolicy",
    "EnRoute",
    "EventKind",
    "IDLE",
    "Idle",
    "Job",
    "MoveOutcome",
    "MovementController",
    "MovementEvent",
    "MovementState",
    "ReturnPolicy",
    "SelectionTier",
    "SimulationEngine",
    "TickClock",
    "TickReport",
    "TickScheduler",
    "TurnContext",
    "TurnResult",
]
