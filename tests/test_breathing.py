"""Tests for the 4-4-6-2 breathing phase clock."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from echobloom.core.breathing import (
    CYCLE_SECONDS, PHASE_ORDER, PHASE_PROFILES, BreathingClockState,
    BreathingPhase, BreathingPhaseClock, next_phase, phase_duration,
)
from fakes import FakeScheduler


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock(scheduler):
    return BreathingPhaseClock(scheduler)


def expected_state(ticks):
    """Walk 4/4/6/2 by hand for a tick count."""
    cycles, t = divmod(ticks, CYCLE_SECONDS)
    for phase in PHASE_ORDER:
        if t < phase_duration(phase):
            return phase, t, cycles
        t -= phase_duration(phase)


class TestPhaseTable:
    def test_durations(self):
        assert [phase_duration(p) for p in PHASE_ORDER] == [4, 4, 6, 2]
        assert CYCLE_SECONDS == 16

    def test_offsets_line_up_with_durations(self):
        offset = 0
        for phase in PHASE_ORDER:
            assert PHASE_PROFILES[phase].counter_offset == offset
            offset += PHASE_PROFILES[phase].total_count

    def test_cyclic_order(self):
        assert next_phase(BreathingPhase.INHALE) is BreathingPhase.HOLD
        assert next_phase(BreathingPhase.EXHALE) is BreathingPhase.PAUSE
        assert next_phase(BreathingPhase.PAUSE) is BreathingPhase.INHALE

    def test_idle_state(self):
        state = BreathingClockState.idle()
        assert state == BreathingClockState(BreathingPhase.PAUSE, 0, 0)


class TestBreathingPhaseClock:
    def test_start_state(self, clock):
        clock.start()
        assert clock.active
        assert clock.state == BreathingClockState(BreathingPhase.INHALE, 0, 0)

    def test_hold_after_four_ticks(self, clock, scheduler):
        clock.start()
        scheduler.advance(4000)
        assert clock.state.phase is BreathingPhase.HOLD
        assert clock.state.elapsed_in_phase == 0

    def test_full_cycle(self, clock, scheduler):
        clock.start()
        scheduler.advance(16000)
        assert clock.state.phase is BreathingPhase.INHALE
        assert clock.state.completed_cycles == 1

    @pytest.mark.parametrize("ticks", [1, 7, 13, 15, 31, 50, 97])
    def test_state_matches_pattern(self, clock, ticks):
        clock.start()
        for _ in range(ticks):
            clock.tick()
        phase, elapsed, cycles = expected_state(ticks)
        assert clock.state == BreathingClockState(phase, elapsed, cycles)
        assert clock.state.completed_cycles == ticks // 16

    def test_elapsed_stays_below_duration(self, clock):
        clock.start()
        for _ in range(40):
            clock.tick()
            assert 0 <= clock.state.elapsed_in_phase < phase_duration(clock.state.phase)

    def test_notifies_only_on_phase_change(self, clock, scheduler):
        seen = []
        clock.phase_changed.connect(seen.append)
        clock.start()
        assert seen == []
        scheduler.advance(16000)
        assert seen == [
            BreathingPhase.HOLD, BreathingPhase.EXHALE,
            BreathingPhase.PAUSE, BreathingPhase.INHALE,
        ]

    def test_tick_when_inactive_is_noop(self, clock):
        clock.tick()
        assert clock.state == BreathingClockState.idle()

    def test_deactivate_resets_and_cancels(self, clock, scheduler):
        clock.start()
        scheduler.advance(5000)
        clock.deactivate()
        assert not clock.active
        assert clock.state == BreathingClockState.idle()
        scheduler.advance(10000)
        assert clock.state == BreathingClockState.idle()
        assert scheduler.pending == []

    def test_deactivate_is_idempotent(self, clock):
        ticks = []
        clock.ticked.connect(ticks.append)
        clock.start()
        clock.deactivate()
        clock.deactivate()
        # one for start, one for the first deactivate
        assert len(ticks) == 2

    def test_restart_replaces_tick_timer(self, clock, scheduler):
        clock.start()
        scheduler.advance(3000)
        clock.start()
        assert len(scheduler.pending) == 1
        scheduler.advance(4000)
        assert clock.state.phase is BreathingPhase.HOLD
