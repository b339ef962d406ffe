"""Tests for CoachService orchestration, driven entirely by fakes."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from echobloom.config import load_config
from echobloom.core.breathing import BreathingPhase, BreathingPhaseClock
from echobloom.core.conversation import Role
from echobloom.core.intents import Converse, StartSession, Stop
from echobloom.core.sequencer import StepSequencer
from echobloom.data.catalog import (
    CONFIDENCE_BOOST_REQUEST, CONVERSATION_FALLBACK, FALLBACK_TEXTS, SessionCatalog,
)
from echobloom.data.models import SessionType
from echobloom.services.coach_service import CoachService
from fakes import (
    DeferredRunner, FakeGenerator, FakeListener, FakeScheduler, FakeSound,
    FakeSpeech, ImmediateRunner,
)


class Rig:
    """A CoachService plus handles on every fake it was built from."""

    def __init__(self, runner=None, generator=None, speech=None, listener=None, config=None):
        self.scheduler = FakeScheduler()
        self.runner = runner or ImmediateRunner()
        self.generator = generator or FakeGenerator("Let's take this one breath at a time.")
        self.speech = speech or FakeSpeech()
        self.listener = listener or FakeListener()
        self.sound = FakeSound()
        self.config = config or load_config(Path("/nonexistent/coach.json"))
        self.sequencer = StepSequencer(self.speech, self.scheduler)
        self.clock = BreathingPhaseClock(self.scheduler)
        self.catalog = SessionCatalog(self.generator, self.config)
        self.service = CoachService(
            self.catalog, self.sequencer, self.clock, self.generator, self.speech,
            self.listener, self.runner, sound=self.sound, config=self.config,
        )


@pytest.fixture
def rig():
    return Rig()


@pytest.fixture
def deferred():
    return Rig(runner=DeferredRunner())


class TestRouting:
    def test_breathing_starts_sequencer_and_clock(self, rig):
        intent = rig.service.handle_utterance("start breathing")
        assert intent == StartSession(SessionType.BREATHING)
        assert rig.service.last_intent == intent
        assert rig.sequencer.running
        assert rig.clock.active
        assert rig.generator.calls == []

    def test_mindfulness_does_not_start_clock(self, rig):
        rig.service.handle_utterance("help me focus")
        assert rig.sequencer.running
        assert not rig.clock.active

    def test_stop_cancels_everything(self, rig):
        stopped = []
        rig.service.session_stopped.connect(lambda: stopped.append(True))
        rig.service.handle_utterance("start breathing")
        rig.scheduler.advance(5000)
        assert rig.service.handle_utterance("stop") == Stop()

        assert not rig.sequencer.running
        assert not rig.clock.active
        assert rig.scheduler.pending == []
        assert rig.speech.cancels >= 1
        assert stopped == [True]

    def test_stop_when_idle_is_quiet(self, rig):
        stopped = []
        rig.service.session_stopped.connect(lambda: stopped.append(True))
        rig.service.stop_session()
        rig.service.stop_session()
        assert stopped == []

    def test_blank_input_is_noop(self, rig):
        intent = rig.service.handle_utterance("   ")
        assert intent == Converse("   ")
        assert rig.generator.calls == []
        assert len(rig.service.log) == 0

    def test_intent_signal(self, rig):
        seen = []
        rig.service.intent_resolved.connect(seen.append)
        rig.service.handle_utterance("hello there")
        assert seen == [Converse("hello there")]


class TestSessions:
    def test_new_session_supersedes_old(self, rig):
        rig.service.start_session(SessionType.BREATHING)
        rig.service.start_session(SessionType.MINDFULNESS)
        assert rig.service.current_script.session_type is SessionType.MINDFULNESS
        assert not rig.clock.active
        assert len(rig.scheduler.pending) == 1

    def test_generated_session_uses_user_text(self, rig):
        rig.service.handle_utterance("motivate me for my exam")
        assert "motivate me for my exam" in rig.generator.calls[0][0]
        assert rig.sequencer.state.script.utterances == ("Let's take this one breath at a time.",)

    def test_generation_failure_plays_fallback(self):
        rig = Rig(generator=FakeGenerator(fail=True))
        rig.service.start_session(SessionType.AFFIRMATION, "I feel low")
        assert rig.speech.texts == [FALLBACK_TEXTS[SessionType.AFFIRMATION]]

    def test_clock_stops_when_script_finishes(self, rig):
        rig.service.start_session(SessionType.BREATHING)
        rig.scheduler.run_until_idle()
        assert not rig.sequencer.running
        assert not rig.clock.active
        assert rig.sound.played[-1] == "session_complete"

    def test_phase_cues(self, rig):
        rig.service.start_session(SessionType.BREATHING)
        rig.scheduler.advance(4000)
        assert "phase_hold" in rig.sound.played

    def test_phase_cues_toggle(self, rig):
        rig.config["toggles"]["phase_cues"] = False
        rig.service.start_session(SessionType.BREATHING)
        rig.scheduler.advance(16000)
        assert rig.sound.played == []

    def test_replay_after_stop(self, rig):
        rig.service.start_session(SessionType.MINDFULNESS)
        rig.service.stop_session()
        rig.service.replay_session()
        assert rig.sequencer.running
        assert rig.sequencer.state.step_index == 0

    def test_restart(self, rig):
        rig.service.start_session(SessionType.BREATHING)
        rig.scheduler.advance(20000)
        rig.service.restart_session()
        assert not rig.sequencer.running
        assert rig.sequencer.state.step_index == 0
        assert not rig.clock.active


class TestPendingGeneration:
    def test_loading_signals(self, deferred):
        states = []
        deferred.service.loading_changed.connect(states.append)
        deferred.service.start_session(SessionType.MOTIVATION)
        assert deferred.service.is_loading
        deferred.runner.complete()
        assert not deferred.service.is_loading
        assert states == [True, False]
        assert deferred.sequencer.running

    def test_stop_discards_pending_session(self, deferred):
        deferred.service.start_session(SessionType.MOTIVATION)
        deferred.service.handle_utterance("stop")
        assert not deferred.service.is_loading
        deferred.runner.complete()
        assert not deferred.sequencer.running
        assert deferred.speech.spoken == []

    def test_newer_session_wins(self, deferred):
        deferred.service.start_session(SessionType.AFFIRMATION)
        deferred.service.start_session(SessionType.BREATHING)
        deferred.runner.complete()
        assert deferred.service.current_script.session_type is SessionType.BREATHING


class TestConversation:
    def test_reply_logged_and_spoken(self, rig):
        replies = []
        rig.service.reply_ready.connect(replies.append)
        rig.service.handle_utterance("I feel anxious")

        assert replies == ["Let's take this one breath at a time."]
        assert [t.role for t in rig.service.log] == [Role.USER, Role.COACH]
        assert rig.speech.texts == ["Let's take this one breath at a time."]

    def test_prompt_uses_prior_context_only(self, rig):
        rig.service.converse("first message")
        rig.service.converse("second message")
        first_prompt, second_prompt = rig.generator.calls[0][0], rig.generator.calls[1][0]
        assert "(none yet)" in first_prompt
        assert "User: first message" in second_prompt
        assert "User: second message" not in second_prompt

    def test_failure_uses_fallback_without_logging(self):
        rig = Rig(generator=FakeGenerator(fail=True))
        replies = []
        rig.service.reply_ready.connect(replies.append)
        rig.service.converse("hello")
        assert replies == [CONVERSATION_FALLBACK]
        assert [t.role for t in rig.service.log] == [Role.USER]
        assert rig.speech.texts == [CONVERSATION_FALLBACK]

    def test_speak_replies_toggle(self, rig):
        rig.config["toggles"]["speak_replies"] = False
        rig.service.converse("hello")
        assert rig.speech.spoken == []

    def test_text_only_platform(self):
        rig = Rig(speech=FakeSpeech(supported=False))
        rig.service.converse("hello")
        rig.service.start_session(SessionType.BREATHING)
        rig.service.stop_session()
        assert rig.speech.spoken == []
        assert rig.speech.cancels == 0

    def test_log_stays_bounded(self, rig):
        for i in range(8):
            rig.service.converse(f"message {i}")
        assert len(rig.service.log) == 10

    def test_confidence_boost_is_a_chat_turn(self, rig):
        replies = []
        rig.service.reply_ready.connect(replies.append)
        sent = rig.service.confidence_boost()

        assert sent == CONFIDENCE_BOOST_REQUEST
        assert CONFIDENCE_BOOST_REQUEST in rig.generator.calls[0][0]
        assert rig.service.log.turns[0].content == CONFIDENCE_BOOST_REQUEST
        assert replies == ["Let's take this one breath at a time."]
        assert rig.service.current_script is None
        assert not rig.sequencer.running

    def test_reply_loading_state(self, deferred):
        deferred.service.converse("hello")
        assert deferred.service.is_loading
        deferred.runner.complete()
        assert not deferred.service.is_loading


class TestVoice:
    def test_transcript_routed(self, rig):
        heard = []
        rig.service.transcript_heard.connect(heard.append)
        rig.service.listen()
        rig.listener.hear("start breathing")
        assert heard == ["start breathing"]
        assert rig.clock.active

    def test_listening_ended_after_transcript(self, rig):
        ended = []
        rig.service.listening_ended.connect(ended.append)
        rig.service.listen()
        rig.listener.hear("hello")
        assert ended == [True]

    def test_listening_ended_when_nothing_heard(self, rig):
        ended, heard = [], []
        rig.service.listening_ended.connect(ended.append)
        rig.service.transcript_heard.connect(heard.append)
        rig.service.listen()
        rig.listener.hear_nothing()
        assert ended == [False]
        assert heard == []
        assert rig.generator.calls == []

    def test_listen_unsupported_is_noop(self):
        rig = Rig(listener=FakeListener(supported=False))
        rig.service.listen()
        assert not rig.listener.listening

    def test_cancel_listen(self, rig):
        rig.service.listen()
        rig.service.cancel_listen()
        assert not rig.listener.listening
