"""Bounded user/coach conversation history used as prompt context."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterator, List

MAX_TURNS = 10
CONTEXT_TURNS = 6


class Role(Enum):
    USER = "User"
    COACH = "Coach"


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str


class ConversationLog:
    """Keeps the most recent MAX_TURNS turns; oldest are evicted first."""

    def __init__(self, max_turns: int = MAX_TURNS) -> None:
        self._turns: Deque[ConversationTurn] = deque(maxlen=max_turns)

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    def recent(self, n: int = CONTEXT_TURNS) -> List[ConversationTurn]:
        if n <= 0:
            return []
        return list(self._turns)[-n:]

    def recent_context(self, n: int = CONTEXT_TURNS) -> str:
        """Last n turns as 'User: ...' / 'Coach: ...' lines, oldest first."""
        return "\n".join(f"{t.role.value}: {t.content}" for t in self.recent(n))

    @property
    def turns(self) -> List[ConversationTurn]:
        return list(self._turns)

    def clear(self) -> None:
        self._turns.clear()

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(list(self._turns))
