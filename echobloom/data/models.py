"""
Data models for EchoBloom Coach.

Plain (frozen) dataclasses for the static content the coach plays: session
types, instruction scripts and mood catalog entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class SessionType(Enum):
    BREATHING = "breathing"
    AFFIRMATION = "affirmation"
    MINDFULNESS = "mindfulness"
    MOTIVATION = "motivation"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class SessionScript:
    """
    An ordered list of spoken instructions for one session.

    Either a hand-authored script (breathing, mindfulness) or a single step
    wrapping one generated text block (affirmation, motivation).
    """
    session_type: SessionType
    utterances: Tuple[str, ...]
    approx_total_seconds: int = 0

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the script stays immutable.
        object.__setattr__(self, "utterances", tuple(self.utterances))
        if not self.utterances:
            raise ValueError("A session script needs at least one utterance.")

    def __len__(self) -> int:
        return len(self.utterances)


@dataclass(frozen=True)
class MoodEntry:
    """A mood button and the example phrasings offered for it."""
    id: str
    label: str
    suggestions: Tuple[str, ...]


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines the "shape" of the static content: which session types exist,
#   what a playable script looks like, and what a mood entry holds.
#
# Interviewer-friendly talking points:
#   1. frozen=True: scripts are shared between the catalog, the sequencer
#      and the UI, so nobody may mutate them in place.
#   2. Validation in __post_init__: an empty script is rejected up front,
#      so the sequencer never has to handle length 0.
