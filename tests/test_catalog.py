"""Tests for built-in scripts, prompt composition and generation fallbacks."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from echobloom.config import DEFAULT_CONFIG
from echobloom.data.catalog import (
    BREATHING_SCRIPT, CONVERSATION_FALLBACK, FALLBACK_TEXTS, MINDFULNESS_SCRIPT,
    SESSION_PROMPTS, STATIC_SCRIPTS, SessionCatalog, conversation_prompt, session_prompt,
)
from echobloom.data.models import SessionScript, SessionType
from echobloom.data.moods import MOOD_ENTRIES, mood_by_id
from fakes import FakeGenerator


@pytest.fixture
def generator():
    return FakeGenerator("You are capable and calm.")


@pytest.fixture
def catalog(generator):
    return SessionCatalog(generator)


class TestStaticScripts:
    @pytest.mark.parametrize("session_type, lines", [
        (SessionType.BREATHING, BREATHING_SCRIPT),
        (SessionType.MINDFULNESS, MINDFULNESS_SCRIPT),
    ])
    def test_no_generation_call(self, catalog, generator, session_type, lines):
        script = catalog.script_for(session_type, "I feel anxious")
        assert script.utterances == lines
        assert script.session_type is session_type
        assert generator.calls == []

    def test_static_is_deterministic(self, catalog):
        assert catalog.script_for(SessionType.BREATHING) == catalog.script_for(SessionType.BREATHING)

    def test_is_static(self):
        assert SessionCatalog.is_static(SessionType.MINDFULNESS)
        assert not SessionCatalog.is_static(SessionType.MOTIVATION)


class TestGeneratedScripts:
    def test_single_step_from_generator(self, catalog, generator):
        script = catalog.script_for(SessionType.AFFIRMATION, "job interview tomorrow")
        assert script.utterances == ("You are capable and calm.",)
        prompt, model, max_tokens = generator.calls[0]
        assert "job interview tomorrow" in prompt
        assert model == DEFAULT_CONFIG["generation"]["model"]
        assert max_tokens == DEFAULT_CONFIG["generation"]["session_max_tokens"]
        assert script.approx_total_seconds > 0

    @pytest.mark.parametrize("session_type", [SessionType.AFFIRMATION, SessionType.MOTIVATION])
    def test_fallback_on_failure(self, session_type):
        catalog = SessionCatalog(FakeGenerator(fail=True))
        script = catalog.script_for(session_type)
        assert script.utterances == (FALLBACK_TEXTS[session_type],)

    def test_prompts_only_for_generated_types(self):
        generated = {t for t in SessionType if t not in STATIC_SCRIPTS}
        assert set(SESSION_PROMPTS) == generated
        assert set(FALLBACK_TEXTS) == generated

    def test_motivation_prompt_carries_context(self):
        prompt = session_prompt(SessionType.MOTIVATION, "big deadline")
        assert 'The person shared: "big deadline"' in prompt
        assert "EchoBloom" in prompt

    def test_prompt_without_context(self):
        assert "The person shared" not in session_prompt(SessionType.MOTIVATION)

    def test_conversation_prompt(self):
        prompt = conversation_prompt("", "hello")
        assert "(none yet)" in prompt
        assert 'Current user input: "hello"' in prompt
        assert CONVERSATION_FALLBACK


class TestModels:
    def test_empty_script_rejected(self):
        with pytest.raises(ValueError):
            SessionScript(SessionType.BREATHING, [])

    def test_utterances_become_tuple(self):
        script = SessionScript(SessionType.BREATHING, ["a", "b"])
        assert script.utterances == ("a", "b")
        assert len(script) == 2

    def test_session_type_label(self):
        assert SessionType.MINDFULNESS.label == "Mindfulness"


class TestMoods:
    def test_ten_moods_with_suggestions(self):
        assert len(MOOD_ENTRIES) == 10
        assert all(len(m.suggestions) == 4 for m in MOOD_ENTRIES)

    def test_lookup(self):
        assert mood_by_id("anxious").label == "Anxious"
        assert mood_by_id("nope") is None
