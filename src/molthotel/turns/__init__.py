"""Agent turns: prompts, memory and the LLM-backed turn callback."""

from .llm import ChatTurnTaker, CostTracker, ollama_chat
from .memory import AgentMemory, MemoryStore, update_mood
from .prompts import build_system_prompt, build_user_prompt, clean_response, describe_nearby

__all__ = [
    "AgentMemory",
    "ChatTurnTaker",
    "CostTracker",
    "MemoryStore",
    "build_system_prompt",
    "build_user_prompt",
    "clean_response",
    "describe_nearby",
    "ollama_chat",
    "update_mood",
]
