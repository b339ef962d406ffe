from .breathing import BreathingPhase, BreathingPhaseClock, BreathingClockState, PHASE_PROFILES
from .conversation import ConversationLog, ConversationTurn, Role
from .intents import Converse, IntentRouter, StartSession, Stop
from .scheduler import QtScheduler, QtTaskRunner, Scheduler, TimerHandle
from .sequencer import SequencerState, StepSequencer

__all__ = [
    "BreathingPhase", "BreathingPhaseClock", "BreathingClockState", "PHASE_PROFILES",
    "ConversationLog", "ConversationTurn", "Role",
    "Converse", "IntentRouter", "StartSession", "Stop",
    "QtScheduler", "QtTaskRunner", "Scheduler", "TimerHandle",
    "SequencerState", "StepSequencer",
]
