"""Outbound records of the simulation: transcript file and chat webhook."""

from .transcript import TranscriptLog
from .webhook import LOCATION_COLORS, WebhookPoster, format_actions, location_color, progress_bar

__all__ = [
    "LOCATION_COLORS",
    "TranscriptLog",
    "WebhookPoster",
    "format_actions",
    "location_color",
    "progress_bar",
]
