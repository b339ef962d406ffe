"""
Main Window — the coach's desktop shell.

Contains:
  - Mood tab (mood picker + quick calm / confidence buttons)
  - Chat tab (transcript, typed and spoken input)
  - Session tab (step progress, breathing circle, playback controls)
  - Quick Actions tab (one card per session type, voice command help)
"""

from __future__ import annotations

import html
import logging
from typing import Optional

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QLineEdit, QMainWindow, QProgressBar,
    QPushButton, QTabWidget, QTextBrowser, QVBoxLayout, QWidget, QGridLayout,
)

from echobloom.config import load_config, reset_config, save_config
from echobloom.core.intents import Converse, StartSession, Stop
from echobloom.core.sequencer import SequencerState
from echobloom.data.catalog import COACH_NAME
from echobloom.data.models import SessionScript, SessionType
from echobloom.services.coach_service import CoachService
from echobloom.ui.breathing_widget import BreathingWidget
from echobloom.ui.mood_widget import MoodWidget

logger = logging.getLogger(__name__)

TAB_MOOD, TAB_CHAT, TAB_SESSION, TAB_ACTIONS = range(4)

SESSION_CARDS = (
    (SessionType.BREATHING, "Breathing", "4-4-6-2 guided breathing to calm your body."),
    (SessionType.AFFIRMATION, "Affirmations", "Personal \"I am\" statements for a hard moment."),
    (SessionType.MINDFULNESS, "Mindfulness", "5-4-3-2-1 grounding through your senses."),
    (SessionType.MOTIVATION, "Motivation", "An energizing push toward your next step."),
)

VOICE_HELP = (
    "<b>Voice and text commands</b><br>"
    "\"Start breathing\" or \"help me breathe\": breathing session<br>"
    "\"Give me affirmations\" or \"something positive\": affirmations<br>"
    "\"Help me focus\" or \"meditate\": mindfulness<br>"
    "\"Motivate me\" or \"I need energy\": motivation<br>"
    "\"Stop\", \"pause\" or \"end\": stop the current session<br>"
    "Anything else is a conversation with the coach."
)


class CoachWindow(QMainWindow):
    """The main application window."""

    def __init__(self, service: CoachService, config: Optional[dict] = None) -> None:
        super().__init__()
        self.service = service
        self.config = config or load_config()
        self.setWindowTitle(f"{COACH_NAME} Coach")
        self.setMinimumSize(820, 620)
        self.resize(960, 720)

        self._build_ui()
        self._build_menu()
        self._connect_signals()
        self._on_state_changed(self.service.sequencer.state)

    # ── UI Construction ─────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setSpacing(0)
        main_layout.setContentsMargins(0, 0, 0, 0)

        self.tabs = QTabWidget()
        main_layout.addWidget(self.tabs)
        self.tabs.addTab(self._build_mood_tab(), "Mood")
        self.tabs.addTab(self._build_chat_tab(), "Chat")
        self.tabs.addTab(self._build_session_tab(), "Session")
        self.tabs.addTab(self._build_actions_tab(), "Quick Actions")

        self.status_label = QLabel("")
        self.status_label.setObjectName("subtitle")
        self.statusBar().addWidget(self.status_label)

    def _build_mood_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 24)

        self.mood_widget = MoodWidget()
        self.mood_widget.suggestion_selected.connect(self._on_suggestion)
        layout.addWidget(self.mood_widget)

        btn_layout = QHBoxLayout()
        btn_layout.setContentsMargins(24, 0, 24, 0)
        btn_layout.setSpacing(12)

        btn_calm = QPushButton("Quick Calm")
        btn_calm.setObjectName("primary")
        btn_calm.setMinimumHeight(44)
        btn_calm.clicked.connect(lambda: self._start(SessionType.BREATHING))
        btn_layout.addWidget(btn_calm)

        btn_boost = QPushButton("Confidence Boost")
        btn_boost.setObjectName("success")
        btn_boost.setMinimumHeight(44)
        btn_boost.clicked.connect(self._on_confidence_boost)
        btn_layout.addWidget(btn_boost)

        layout.addLayout(btn_layout)
        return widget

    def _build_chat_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setSpacing(10)
        layout.setContentsMargins(24, 24, 24, 24)

        self.transcript = QTextBrowser()
        layout.addWidget(self.transcript)

        self.thinking_label = QLabel("")
        self.thinking_label.setObjectName("state_label")
        layout.addWidget(self.thinking_label)

        input_layout = QHBoxLayout()
        input_layout.setSpacing(8)

        self.input_edit = QLineEdit()
        self.input_edit.setPlaceholderText("Tell me how you're feeling, or say \"start breathing\"...")
        self.input_edit.returnPressed.connect(self._on_send)
        input_layout.addWidget(self.input_edit)

        self.btn_send = QPushButton("Send")
        self.btn_send.setObjectName("primary")
        self.btn_send.clicked.connect(self._on_send)
        input_layout.addWidget(self.btn_send)

        self.btn_voice = QPushButton("Voice")
        self.btn_voice.setCheckable(True)
        self.btn_voice.clicked.connect(self._on_voice)
        self.btn_voice.setEnabled(self.service.listener.supported)
        if not self.service.listener.supported:
            self.btn_voice.setToolTip("Voice input is not available on this device.")
        input_layout.addWidget(self.btn_voice)

        self.btn_quiet = QPushButton("Stop Audio")
        self.btn_quiet.setObjectName("warning")
        self.btn_quiet.clicked.connect(self._on_quiet)
        self.btn_quiet.setEnabled(self.service.speech.supported)
        input_layout.addWidget(self.btn_quiet)

        layout.addLayout(input_layout)

        self._append_message(COACH_NAME, "Hi, I'm here with you. How are you feeling right now?")
        return widget

    def _build_session_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setSpacing(12)
        layout.setContentsMargins(24, 24, 24, 24)

        self.session_title = QLabel("No session yet")
        self.session_title.setObjectName("title")
        self.session_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.session_title)

        self.step_label = QLabel("")
        self.step_label.setObjectName("subtitle")
        self.step_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.step_label)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setTextVisible(False)
        layout.addWidget(self.progress)

        self.breathing_widget = BreathingWidget(self.service.clock)
        self.breathing_widget.setVisible(False)
        layout.addWidget(self.breathing_widget)

        self.instruction_label = QLabel("Pick a session from Quick Actions, or just ask.")
        self.instruction_label.setObjectName("instruction")
        self.instruction_label.setWordWrap(True)
        self.instruction_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.instruction_label)

        btn_layout = QHBoxLayout()
        btn_layout.setSpacing(12)

        self.btn_start = QPushButton("Start Session")
        self.btn_start.setObjectName("primary")
        self.btn_start.setMinimumHeight(44)
        self.btn_start.clicked.connect(self.service.replay_session)
        btn_layout.addWidget(self.btn_start)

        self.btn_stop = QPushButton("Stop")
        self.btn_stop.setObjectName("danger")
        self.btn_stop.setMinimumHeight(44)
        self.btn_stop.clicked.connect(self.service.stop_session)
        btn_layout.addWidget(self.btn_stop)

        self.btn_restart = QPushButton("Restart")
        self.btn_restart.setMinimumHeight(44)
        self.btn_restart.clicked.connect(self.service.restart_session)
        btn_layout.addWidget(self.btn_restart)

        layout.addLayout(btn_layout)
        layout.addStretch()
        return widget

    def _build_actions_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setSpacing(16)
        layout.setContentsMargins(24, 24, 24, 24)

        title = QLabel("Quick Actions")
        title.setObjectName("title")
        layout.addWidget(title)

        grid = QGridLayout()
        grid.setSpacing(12)
        for i, (session_type, name, blurb) in enumerate(SESSION_CARDS):
            grid.addWidget(self._make_card(session_type, name, blurb), i // 2, i % 2)
        layout.addLayout(grid)

        help_label = QLabel(VOICE_HELP)
        help_label.setObjectName("subtitle")
        help_label.setWordWrap(True)
        layout.addWidget(help_label)
        layout.addStretch()
        return widget

    def _make_card(self, session_type: SessionType, name: str, blurb: str) -> QFrame:
        card = QFrame()
        card.setObjectName("card")
        layout = QVBoxLayout(card)
        layout.setContentsMargins(16, 14, 16, 14)

        heading = QLabel(name)
        heading.setObjectName("state_label")
        layout.addWidget(heading)

        text = QLabel(blurb)
        text.setObjectName("subtitle")
        text.setWordWrap(True)
        layout.addWidget(text)

        btn = QPushButton(f"Start {name}")
        btn.clicked.connect(lambda _=False, t=session_type: self._start(t))
        layout.addWidget(btn)
        return card

    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("Options")
        toggles = self.config["toggles"]

        self.act_speak_replies = QAction("Speak replies", self, checkable=True)
        self.act_speak_replies.setChecked(toggles.get("speak_replies", True))
        self.act_speak_replies.toggled.connect(lambda on: self._set_toggle("speak_replies", on))
        menu.addAction(self.act_speak_replies)

        self.act_phase_cues = QAction("Breathing sound cues", self, checkable=True)
        self.act_phase_cues.setChecked(toggles.get("phase_cues", True))
        self.act_phase_cues.toggled.connect(lambda on: self._set_toggle("phase_cues", on))
        menu.addAction(self.act_phase_cues)

        menu.addSeparator()
        reset_action = menu.addAction("Reset settings")
        reset_action.triggered.connect(self._on_reset_settings)

    def _connect_signals(self) -> None:
        svc = self.service
        svc.intent_resolved.connect(self._on_intent)
        svc.loading_changed.connect(self._on_loading_changed)
        svc.session_ready.connect(self._on_session_ready)
        svc.session_stopped.connect(self._on_session_stopped)
        svc.reply_ready.connect(self._on_reply)
        svc.transcript_heard.connect(self._on_heard)
        svc.listening_ended.connect(self._on_listening_ended)
        svc.sequencer.state_changed.connect(self._on_state_changed)

    # ── Actions ─────────────────────────────────────────────────────────

    def _start(self, session_type: SessionType) -> None:
        self.service.start_session(session_type)
        self.tabs.setCurrentIndex(TAB_SESSION)

    @Slot(str)
    def _on_suggestion(self, text: str) -> None:
        self._append_message("You", text)
        self.tabs.setCurrentIndex(TAB_CHAT)
        self.service.converse(text)

    @Slot()
    def _on_confidence_boost(self) -> None:
        self.tabs.setCurrentIndex(TAB_CHAT)
        self._append_message("You", self.service.confidence_boost())

    @Slot()
    def _on_send(self) -> None:
        text = self.input_edit.text().strip()
        if not text:
            return
        self.input_edit.clear()
        self._append_message("You", text)
        self.service.handle_utterance(text)

    @Slot(bool)
    def _on_voice(self, checked: bool) -> None:
        if checked:
            self.service.listen()
            self.status_label.setText("Listening...")
        else:
            self.service.cancel_listen()
            self.status_label.setText("")

    @Slot()
    def _on_quiet(self) -> None:
        self.service.speech.cancel_speech()

    def _set_toggle(self, key: str, value: bool) -> None:
        self.config["toggles"][key] = value
        save_config(self.config)
        logger.info("Option %s set to %s.", key, value)

    @Slot()
    def _on_reset_settings(self) -> None:
        fresh = reset_config()
        self.config.clear()
        self.config.update(fresh)
        self.act_speak_replies.setChecked(fresh["toggles"]["speak_replies"])
        self.act_phase_cues.setChecked(fresh["toggles"]["phase_cues"])

    # ── Service signal handlers ─────────────────────────────────────────

    @Slot(object)
    def _on_intent(self, intent) -> None:
        if isinstance(intent, StartSession):
            self.tabs.setCurrentIndex(TAB_SESSION)
            self.status_label.setText(f"Starting {intent.session_type.label.lower()} session...")
        elif isinstance(intent, Stop):
            self.status_label.setText("Stopped.")
        elif isinstance(intent, Converse):
            self.status_label.setText("")

    @Slot(bool)
    def _on_loading_changed(self, loading: bool) -> None:
        self.thinking_label.setText("Thinking..." if loading else "")
        if loading and self.tabs.currentIndex() == TAB_SESSION:
            self.instruction_label.setText("Thinking...")

    @Slot(object)
    def _on_session_ready(self, script: SessionScript) -> None:
        minutes = max(1, round(script.approx_total_seconds / 60))
        self.session_title.setText(f"{script.session_type.label} Session (~{minutes} min)")
        self.breathing_widget.setVisible(script.session_type is SessionType.BREATHING)
        self.status_label.setText("")

    @Slot()
    def _on_session_stopped(self) -> None:
        self.breathing_widget.setVisible(False)

    @Slot(str)
    def _on_reply(self, text: str) -> None:
        self._append_message(COACH_NAME, text)

    @Slot(str)
    def _on_heard(self, text: str) -> None:
        self._append_message("You", text)

    @Slot(bool)
    def _on_listening_ended(self, heard: bool) -> None:
        self.btn_voice.setChecked(False)
        self.status_label.setText("" if heard else "I didn't catch that. Try again?")

    @Slot(object)
    def _on_state_changed(self, state: SequencerState) -> None:
        if state.script is None:
            self.step_label.setText("")
            self.progress.setValue(0)
            return

        total = len(state.script)
        if state.finished:
            self.step_label.setText("Session complete")
        else:
            suffix = "" if state.running else " (paused)"
            self.step_label.setText(f"Step {state.step_index + 1} of {total}{suffix}")
        self.progress.setValue(int(state.progress_percent))
        self.instruction_label.setText(state.current_utterance or "")

        self.btn_start.setEnabled(not state.running)
        self.btn_stop.setEnabled(state.running)

    # ── Helpers ─────────────────────────────────────────────────────────

    def _append_message(self, speaker: str, text: str) -> None:
        color = "#89b4fa" if speaker == COACH_NAME else "#a6e3a1"
        self.transcript.append(
            f'<p><b style="color: {color};">{html.escape(speaker)}:</b> {html.escape(text)}</p>'
        )

    def closeEvent(self, event: QCloseEvent) -> None:
        self.service.stop_session()
        self.service.cancel_listen()
        event.accept()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The visible app. It owns no session logic; every button calls a
#   CoachService method and every label is refreshed from a service or
#   sequencer signal.
#
# Layout:
#   - Mood: tap a mood, pick a phrasing, it goes straight to the chat coach.
#   - Chat: typed text goes through the intent router, so "start breathing"
#     typed here starts a session just like the voice command.
#   - Session: "Step i of L", progress bar, breathing circle (breathing
#     sessions only) and Start / Stop / Restart.
#   - Quick Actions: one card per session type.
#
# Interviewer-friendly talking points:
#   1. Signals in, method calls out: the window can be swapped for another
#      front end without touching the service.
#   2. Options are persisted immediately through save_config().
#   3. Closing the window stops playback, speech and any open microphone.
