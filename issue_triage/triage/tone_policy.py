"""Tone monitoring label policy."""

from ..ai.models import Tone
from .constants import MONITOR_LABEL


def decide_tone_labels(tone: Tone | str, monitor_label: str = MONITOR_LABEL) -> list[str]:
    """Flag hostile issues for monitoring regardless of tone confidence."""
    return [monitor_label] if tone == Tone.HOSTILE else []
