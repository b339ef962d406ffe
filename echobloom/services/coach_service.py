"""
Coach Service — wires the router, catalog, sequencer, phase clock and chat.

An utterance goes through the IntentRouter and ends up as one of:
  - start a session (catalog → sequencer, plus the phase clock for breathing)
  - stop everything that is playing
  - a conversational turn sent to the text generator
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal

from echobloom.audio.sound_manager import SoundManager
from echobloom.config import DEFAULT_CONFIG
from echobloom.core.breathing import BreathingPhase, BreathingPhaseClock
from echobloom.core.conversation import ConversationLog, ConversationTurn, Role
from echobloom.core.intents import Converse, Intent, IntentRouter, StartSession, Stop
from echobloom.core.scheduler import TaskHandle
from echobloom.core.sequencer import StepSequencer
from echobloom.data.catalog import (
    CONFIDENCE_BOOST_REQUEST, CONVERSATION_FALLBACK, SessionCatalog, conversation_prompt,
)
from echobloom.data.models import SessionScript, SessionType
from echobloom.services.generation import GenerationFailure, TextGenerator
from echobloom.services.speech import SpeechInput, SpeechOutput

logger = logging.getLogger(__name__)


class CoachService(QObject):
    """
    Owns the session lifecycle. Only one session plays at a time; starting a
    new one or saying "stop" supersedes the old one, including any session
    still waiting on the generator.
    """

    intent_resolved = Signal(object)    # Intent
    loading_changed = Signal(bool)
    session_ready = Signal(object)      # SessionScript
    session_stopped = Signal()
    reply_ready = Signal(str)
    transcript_heard = Signal(str)
    listening_ended = Signal(bool)      # True when a transcript was heard
    conversation_changed = Signal()

    def __init__(
        self,
        catalog: SessionCatalog,
        sequencer: StepSequencer,
        clock: BreathingPhaseClock,
        generator: TextGenerator,
        speech: SpeechOutput,
        listener: SpeechInput,
        runner,
        sound: Optional[SoundManager] = None,
        router: Optional[IntentRouter] = None,
        log: Optional[ConversationLog] = None,
        config: Optional[dict] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.catalog = catalog
        self.sequencer = sequencer
        self.clock = clock
        self.generator = generator
        self.speech = speech
        self.listener = listener
        self.runner = runner
        self.sound = sound
        self.router = router or IntentRouter()
        self.log = log or ConversationLog()
        self.config = config or DEFAULT_CONFIG

        self.current_script: Optional[SessionScript] = None
        self.last_intent: Optional[Intent] = None
        self._session_task: Optional[TaskHandle] = None
        self._reply_tasks = 0

        self.sequencer.finished.connect(self._on_sequence_finished)
        self.clock.phase_changed.connect(self._on_phase_changed)

    # ── Public API ──────────────────────────────────────────────────────────

    @property
    def is_loading(self) -> bool:
        return self._session_task is not None or self._reply_tasks > 0

    def handle_utterance(self, text: str) -> Intent:
        """Route free text (typed or transcribed) and act on the result."""
        intent = self.router.route(text)
        self.last_intent = intent
        self.intent_resolved.emit(intent)

        if isinstance(intent, StartSession):
            self.start_session(intent.session_type, user_context=text)
        elif isinstance(intent, Stop):
            self.stop_session()
        elif isinstance(intent, Converse) and not intent.is_blank:
            self.converse(intent.text)
        return intent

    def start_session(self, session_type: SessionType, user_context: str = "") -> None:
        self.stop_session()
        logger.info("Starting %s session.", session_type.value)

        if self.catalog.is_static(session_type):
            self._begin(self.catalog.script_for(session_type))
            return

        was_loading = self.is_loading
        handle = self.runner.submit(
            lambda: self.catalog.script_for(session_type, user_context),
            self._on_script_ready,
        )
        # A runner may deliver before submit() returns; the handle is then spent.
        self._session_task = handle if handle.active else None
        self._loading_maybe_changed(was_loading)

    def stop_session(self) -> None:
        """Cancel playback, the phase clock, speech and any pending generation."""
        was_loading = self.is_loading
        if self._session_task is not None:
            self._session_task.cancel()
            self._session_task = None
        was_running = self.sequencer.running or self.clock.active
        self.sequencer.stop()
        self.clock.deactivate()
        if self.speech.supported:
            self.speech.cancel_speech()
        if was_running:
            logger.info("Session stopped.")
            self.session_stopped.emit()
        self._loading_maybe_changed(was_loading)

    def restart_session(self) -> None:
        self.sequencer.restart()
        self.clock.deactivate()
        if self.speech.supported:
            self.speech.cancel_speech()

    def replay_session(self) -> None:
        """Play the current script again from the start."""
        if self.current_script is not None and not self.sequencer.running:
            self._begin(self.current_script)

    def converse(self, text: str) -> None:
        if not text.strip():
            return
        prompt = conversation_prompt(self.log.recent_context(), text)
        self.log.append(ConversationTurn(Role.USER, text))
        self.conversation_changed.emit()

        was_loading = self.is_loading
        self._reply_tasks += 1
        self.runner.submit(lambda: self._generate_reply(prompt), self._on_reply_ready)
        self._loading_maybe_changed(was_loading)

    def confidence_boost(self) -> str:
        """Ask the chat coach for a quick boost; returns the text sent on the user's behalf."""
        self.converse(CONFIDENCE_BOOST_REQUEST)
        return CONFIDENCE_BOOST_REQUEST

    def listen(self) -> None:
        if not self.listener.supported:
            return
        self.listener.listen(
            self._on_transcript, continuous=False, interim_results=False,
            on_end=self.listening_ended.emit,
        )

    def cancel_listen(self) -> None:
        self.listener.cancel_listen()

    # ── Internal ────────────────────────────────────────────────────────────

    def _begin(self, script: SessionScript) -> None:
        self.current_script = script
        self.session_ready.emit(script)
        self.sequencer.play(script)
        if script.session_type is SessionType.BREATHING:
            self.clock.start()

    def _on_script_ready(self, script: Optional[SessionScript]) -> None:
        was_loading = self.is_loading
        self._session_task = None
        self._loading_maybe_changed(was_loading)
        if script is not None:
            self._begin(script)

    def _generate_reply(self, prompt: str) -> Tuple[str, bool]:
        gen = self.config["generation"]
        try:
            return self.generator.generate_text(prompt, gen["model"], gen["reply_max_tokens"]), True
        except GenerationFailure as e:
            logger.warning("Reply generation failed, using fallback: %s", e)
            return CONVERSATION_FALLBACK, False

    def _on_reply_ready(self, result: Optional[Tuple[str, bool]]) -> None:
        was_loading = self.is_loading
        self._reply_tasks -= 1
        self._loading_maybe_changed(was_loading)

        text, generated = result or (CONVERSATION_FALLBACK, False)
        if generated:
            self.log.append(ConversationTurn(Role.COACH, text))
            self.conversation_changed.emit()
        self.reply_ready.emit(text)

        if self.speech.supported and self.config["toggles"].get("speak_replies", True):
            self.speech.speak(text)

    def _on_transcript(self, text: str) -> None:
        self.transcript_heard.emit(text)
        self.handle_utterance(text)

    def _on_sequence_finished(self) -> None:
        self.clock.deactivate()
        if self.sound:
            self.sound.play("session_complete")

    def _on_phase_changed(self, phase: BreathingPhase) -> None:
        if self.sound and self.config["toggles"].get("phase_cues", True):
            self.sound.play_phase(phase)

    def _loading_maybe_changed(self, was_loading: bool) -> None:
        if self.is_loading != was_loading:
            self.loading_changed.emit(self.is_loading)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The coach's "brain stem": every button, typed message and voice command
#   ends up here and is turned into sequencer/clock/generator calls.
#
# Data flow:
#   "Start breathing" → handle_utterance → StartSession(BREATHING) →
#   stop_session() → catalog (static) → sequencer.play + clock.start.
#   "Motivate me" → StartSession(MOTIVATION) → runner.submit(catalog call)
#   → is_loading True → script ready on the GUI thread → sequencer.play.
#   "I feel anxious" → Converse → prompt with last 6 turns → runner →
#   reply appended to the log → reply_ready → spoken.
#
# Interviewer-friendly talking points:
#   1. Supersession: a new session or "stop" cancels the pending task
#      handle, so a slow generation can't start a session the user left.
#   2. Failed replies are shown and spoken but not logged, so the log only
#      carries real coach turns (and may hold two user turns in a row).
#   3. Blank input never reaches the generator.
