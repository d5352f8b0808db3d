# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Agent turn prompts and response cleanup.

The system prompt carries the persona, the job and the places the agent
can actually reach right now; the user prompt carries the moment (who is
around, the agent's mood, what was said lately).  Responses are squeezed
to a single short line before they are logged or posted.
"""

from __future__ import annotations

from typing import Iterable, Sequence

MAX_RESPONSE_CHARS = 280
MIN_BREAK_CHARS = 200
EMPTY_FALLBACK = "Tranquille."
ERROR_FALLBACK = "Bon."


SYSTEM_PROMPT = """\
Tu es {name}, {role} de l'Hôtel Molt.

PERSONNALITÉ: {persona}

TON RÔLE:
- Poste: {job_title}
- Description: {job_description}

TU ES ACTUELLEMENT:
- Étage: {floor}
- Pièce: {location}
- Lieux accessibles: {reachable}

AUTRES: {others}

FORMAT:
- **[action]** "dialogue" pour action
- "dialogue" pour parler

LANGAGE (joual québécois):
✓ chu, pis, ben, là, genre
✓ Varie - pas d'Ayoye à chaque fois!
✓ 1-2 phrases: 100-180 chars MAX

RÈGLES:
- Mentionne SEULEMENT: {reachable}
- Sois authentique
- Varie ton dialogue"""


USER_PROMPT = """\
MAINTENANT:
- Lieu: {location}
- {nearby}
- Humeur: {mood}
- Job: {job_title}
{context}
Réponds en 1-2 phrases naturellement."""


def _role(gender: str) -> str:
    return "une résidente ou employée" if gender == "female" else "un résident ou employé"


def _pronoun(gender: str) -> str:
    return "elle" if gender == "female" else "il"


def build_system_prompt(
    name: str,
    gender: str,
    persona: str,
    job_title: str,
    job_description: str,
    location: str,
    floor: int,
    reachable: Iterable[str],
    others: Sequence[str] = (),
) -> str:
    """Fill the persona prompt.

    ``reachable`` always lists the current location first so the model is
    anchored to where the agent stands.
    """
    places = [location] + sorted(place for place in reachable if place != location)
    return SYSTEM_PROMPT.format(
        name=name,
        role=_role(gender),
        persona=persona.strip(),
        job_title=job_title,
        job_description=job_description,
        floor=floor,
        location=location,
        reachable=", ".join(places),
        others=", ".join(others),
    )


def describe_nearby(nearby: Sequence[tuple[str, str, str]]) -> str:
    """``nearby`` holds ``(name, gender, job_title)`` for everyone in the room."""
    if not nearby:
        return "Tu es seul(e)."
    parts = [f"{name} ({_pronoun(gender)}, {title})" for name, gender, title in nearby]
    if len(parts) == 1:
        return f"{parts[0]} est ici."
    return f"Ici: {', '.join(parts)}"


def build_user_prompt(
    location: str,
    nearby: str,
    mood: str,
    job_title: str,
    memories: Sequence[str] = (),
    recent: str = "",
) -> str:
    """Fill the moment prompt, with the agent's last lines and the hotel's
    latest transcript when there are any."""
    context = ""
    if memories:
        context += "\nTES DERNIÈRES RÉPLIQUES:\n" + "\n".join(f"- {m}" for m in memories) + "\n"
    if recent:
        context += f"\nRÉCEMMENT À L'HÔTEL:\n{recent}\n"
    return USER_PROMPT.format(
        location=location, nearby=nearby, mood=mood, job_title=job_title, context=context,
    )


def clean_response(text: str) -> str:
    """Reduce a model reply to one line of at most 280 characters."""
    text = text.strip()
    if "\n" in text:
        text = text.split("\n", 1)[0]
    if text[:1] in ("'", '"'):
        text = text[1:]
    if text[-1:] in ("'", '"'):
        text = text[:-1]

    if len(text) > MAX_RESPONSE_CHARS:
        cut = text[:MAX_RESPONSE_CHARS]
        last_space = cut.rfind(" ")
        text = cut[:last_space] if last_space > MIN_BREAK_CHARS else cut

    if len(text) < 3:
        return EMPTY_FALLBACK
    return text
