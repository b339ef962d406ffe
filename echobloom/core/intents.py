"""
Intent Router — maps a spoken or typed utterance to a session command.

Keyword categories are checked in a fixed priority order and the first hit
wins, so "breathing and motivation" starts a breathing session. Anything that
matches no category is handed to the conversational coach unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from echobloom.data.models import SessionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartSession:
    session_type: SessionType


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class Converse:
    text: str

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


Intent = Union[StartSession, Stop, Converse]


def _words(*patterns: str) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(patterns) + r")\b", re.IGNORECASE)


# Priority order matters: first match wins.
KEYWORD_RULES: List[Tuple[re.Pattern, Intent]] = [
    (_words(r"breath(?:e|es|ing|s)?"), StartSession(SessionType.BREATHING)),
    (_words(r"affirm\w*", r"positive"), StartSession(SessionType.AFFIRMATION)),
    (_words(r"focus\w*", r"mindful\w*", r"meditat\w*"), StartSession(SessionType.MINDFULNESS)),
    (_words(r"motivat\w*", r"energy", r"energi[sz]e\w*"), StartSession(SessionType.MOTIVATION)),
    (_words(r"stop(?:s|ped|ping)?", r"paus(?:e|es|ed|ing)", r"end(?:s|ed|ing)?"), Stop()),
]


class IntentRouter:
    """Keyword-based, case-insensitive command classifier."""

    def __init__(self, rules: Optional[List[Tuple[re.Pattern, Intent]]] = None) -> None:
        self.rules = rules if rules is not None else KEYWORD_RULES

    def route(self, utterance: str) -> Intent:
        for pattern, intent in self.rules:
            if pattern.search(utterance):
                logger.info("Routed %r → %s", utterance, intent)
                return intent
        return Converse(utterance)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Decides whether "help me focus" means "start a mindfulness session" or
#   whether the text should go to the chat coach.
#
# Key points:
#   - Whole-word / word-stem matching: "motivate", "motivation" and
#     "motivated" all hit, but "friend" does not trigger "end".
#   - The rule list is data, so the priority order is visible at a glance.
#   - Blank input becomes Converse("   "); callers check is_blank and skip
#     the generation call entirely.
