"""
Breathing Phase Clock — the 4-4-6-2 respiratory cadence as a state machine.

Inhale 4s → Hold 4s → Exhale 6s → Pause 2s → Inhale ... (16s per cycle).
The clock ticks once per second and publishes a phase_changed signal only
when a phase boundary is crossed. Everything a renderer needs per phase
(label, instruction, counter offset, count, color, scale) lives in the single
PHASE_PROFILES table below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from PySide6.QtCore import QObject, Signal

from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class BreathingPhase(Enum):
    INHALE = "inhale"
    HOLD = "hold"
    EXHALE = "exhale"
    PAUSE = "pause"


@dataclass(frozen=True)
class PhaseProfile:
    """Per-phase rendering data. total_count doubles as the phase duration."""
    display_text: str
    instruction: str
    counter_offset: int   # seconds into the cycle where this phase begins
    total_count: int
    color: str
    scale: float


PHASE_ORDER = (
    BreathingPhase.INHALE,
    BreathingPhase.HOLD,
    BreathingPhase.EXHALE,
    BreathingPhase.PAUSE,
)

PHASE_PROFILES: Dict[BreathingPhase, PhaseProfile] = {
    BreathingPhase.INHALE: PhaseProfile(
        "Breathe In", "Fill your lungs slowly and deeply", 0, 4, "#89b4fa", 1.5),
    BreathingPhase.HOLD: PhaseProfile(
        "Hold", "Hold your breath gently", 4, 4, "#cba6f7", 1.5),
    BreathingPhase.EXHALE: PhaseProfile(
        "Breathe Out", "Release slowly through your mouth", 8, 6, "#a6e3a1", 0.75),
    BreathingPhase.PAUSE: PhaseProfile(
        "Rest", "Rest and prepare for the next breath", 14, 2, "#6c7086", 1.0),
}

CYCLE_SECONDS = sum(p.total_count for p in PHASE_PROFILES.values())


def phase_duration(phase: BreathingPhase) -> int:
    return PHASE_PROFILES[phase].total_count


def next_phase(phase: BreathingPhase) -> BreathingPhase:
    idx = PHASE_ORDER.index(phase)
    return PHASE_ORDER[(idx + 1) % len(PHASE_ORDER)]


@dataclass(frozen=True)
class BreathingClockState:
    phase: BreathingPhase = BreathingPhase.PAUSE
    elapsed_in_phase: int = 0
    completed_cycles: int = 0

    @classmethod
    def idle(cls) -> "BreathingClockState":
        return cls(BreathingPhase.PAUSE, 0, 0)

    @property
    def profile(self) -> PhaseProfile:
        return PHASE_PROFILES[self.phase]

    @property
    def seconds_into_cycle(self) -> int:
        return self.profile.counter_offset + self.elapsed_in_phase


class BreathingPhaseClock(QObject):
    """
    Timer-driven phase state machine.

    start() → {INHALE, 0, 0} and a 1 Hz tick; deactivate() → {PAUSE, 0, 0}.
    Ticks assume exactly one second each; timer skew is not compensated.
    """

    phase_changed = Signal(object)   # BreathingPhase
    ticked = Signal(object)          # BreathingClockState

    def __init__(self, scheduler: Scheduler, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.scheduler = scheduler
        self.state = BreathingClockState.idle()
        self._tick_handle: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._tick_handle is not None

    def start(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
        self.state = BreathingClockState(BreathingPhase.INHALE, 0, 0)
        self._tick_handle = self.scheduler.call_every(TICK_INTERVAL_MS, self.tick)
        logger.info("Breathing clock started.")
        self.ticked.emit(self.state)

    def tick(self) -> None:
        if self._tick_handle is None:
            return

        s = self.state
        if s.elapsed_in_phase + 1 == phase_duration(s.phase):
            new_phase = next_phase(s.phase)
            cycles = s.completed_cycles
            if s.phase is BreathingPhase.PAUSE and new_phase is BreathingPhase.INHALE:
                cycles += 1
            self.state = BreathingClockState(new_phase, 0, cycles)
            self.phase_changed.emit(new_phase)
        else:
            self.state = BreathingClockState(s.phase, s.elapsed_in_phase + 1, s.completed_cycles)
        self.ticked.emit(self.state)

    def deactivate(self) -> None:
        """Halt ticking and reset. Safe to call any number of times."""
        was_active = self._tick_handle is not None
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        self.state = BreathingClockState.idle()
        if was_active:
            logger.info("Breathing clock stopped.")
            self.ticked.emit(self.state)

    stop = deactivate


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Drives the 4-4-6-2 breathing pattern. A repeating 1 s timer calls tick(),
#   which either bumps the in-phase counter or rolls to the next phase.
#
# Key classes:
#   - BreathingPhase: the four phases in cyclic order.
#   - PhaseProfile / PHASE_PROFILES: one row per phase holding every
#     per-phase property. The widget never switches on the phase itself.
#   - BreathingClockState: immutable snapshot {phase, elapsed, cycles}.
#   - BreathingPhaseClock: owns its tick handle and publishes Qt signals.
#
# Data flow:
#   CoachService starts a breathing session → clock.start() → every second
#   tick() → ticked(state) for the widget; phase_changed(phase) on boundaries
#   → SoundManager plays the phase cue.
#
# Interviewer-friendly talking points:
#   1. After t ticks: completed_cycles == t // 16, and the phase is found by
#      walking 4/4/6/2 with t % 16.
#   2. tick() while inactive is a no-op, and deactivate() cancels the owned
#      handle, so no tick can land after the session was stopped.
