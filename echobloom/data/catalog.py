"""
Session Catalog — built-in scripts and prompt templates for each session type.

Breathing and mindfulness sessions are hand-authored and need no network, so
they can always start instantly. Affirmation and motivation sessions are
generated from a prompt; if generation fails the session still plays, using
a fixed reassuring fallback text.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from echobloom.config import DEFAULT_CONFIG
from echobloom.core.sequencer import DEFAULT_MS_PER_CHAR, DEFAULT_PAUSE_SECONDS, step_delay_ms
from echobloom.services.generation import GenerationFailure, TextGenerator

from .models import SessionScript, SessionType

logger = logging.getLogger(__name__)

COACH_NAME = "EchoBloom"

BREATHING_SCRIPT: Tuple[str, ...] = (
    "Welcome to your breathing session. Let's find a comfortable position and begin together.",
    "Place one hand on your chest, one on your belly. Feel your body settling.",
    "Now, let's breathe in slowly through your nose for 4 counts. Ready? 1... 2... 3... 4...",
    "Perfect. Now hold that breath gently for 4 counts. 1... 2... 3... 4...",
    "Beautiful. Now let's exhale slowly through your mouth for 6 counts. 1... 2... 3... 4... 5... 6...",
    "Wonderful. Let's pause for 2 counts. 1... 2... Feel your body relaxing.",
    "You're doing great. Let's continue this rhythm together. Notice how your shoulders are dropping.",
    "With each breath, feel tension melting away. Your jaw is softening, your mind is clearing.",
    "Keep following this gentle rhythm. You're creating space for peace and calm.",
    "Take a moment to appreciate this gift you're giving yourself. You deserve this peace.",
)

MINDFULNESS_SCRIPT: Tuple[str, ...] = (
    "Let's ground ourselves in this moment. Sit comfortably and close your eyes if you'd like.",
    "First, let's notice 5 things you can hear around you. Take your time.",
    "Now, let's feel 4 things you can touch - your clothes, the chair, the air on your skin.",
    "Next, notice 3 things you can smell in your environment.",
    "Now 2 things you can taste - perhaps the lingering taste of something you drank.",
    "Finally, when you open your eyes, notice 1 thing you can see with fresh awareness.",
)

STATIC_SCRIPTS: Dict[SessionType, SessionScript] = {
    SessionType.BREATHING: SessionScript(SessionType.BREATHING, BREATHING_SCRIPT, 300),
    SessionType.MINDFULNESS: SessionScript(SessionType.MINDFULNESS, MINDFULNESS_SCRIPT, 300),
}

# Only generated session types need a prompt; the others play STATIC_SCRIPTS.
SESSION_PROMPTS: Dict[SessionType, str] = {
    SessionType.AFFIRMATION: (
        "Generate a personalized affirmation session based on: \"{context}\". "
        "Create empowering statements that address their specific concern. "
        "Use present tense and \"I am\" statements."
    ),
    SessionType.MOTIVATION: (
        "Create an energizing motivation session. Include action-oriented language "
        "and confidence-building statements. Use \"you can\" and \"you will\" language."
    ),
}

SESSION_PREAMBLE = """You are {name}, a wellness coach. {request}{context_note}

Create a structured session with:
1. A warm welcome
2. Clear, step-by-step guidance
3. Encouraging language throughout
4. A positive closing

Make it feel personal and interactive. Use natural pacing for spoken delivery."""

CONVERSATION_TEMPLATE = """You are {name}, a compassionate AI wellness coach. You help people with emotional support, breathing exercises, mindfulness, and motivation.

Previous conversation:
{context}

Current user input: "{user_input}"

Respond as a caring coach who:
- Uses "we" and "let's" language to be inclusive
- Gives specific, actionable guidance
- Offers interactive exercises when appropriate
- Asks follow-up questions to understand their needs better
- Suggests breathing, affirmations, or mindfulness based on their emotional state

Keep responses conversational, warm, and under 100 words. If they seem stressed/anxious, offer a breathing exercise. If they need confidence, suggest affirmations."""

FALLBACK_TEXTS: Dict[SessionType, str] = {
    SessionType.AFFIRMATION: (
        "I understand you're going through something difficult right now. Please know that "
        "your feelings are valid, and you have the strength within you to navigate this moment. "
        "Take a deep breath and be gentle with yourself."
    ),
    SessionType.MOTIVATION: (
        "You have already taken the first step by showing up for yourself today. "
        "Pick one small action you can finish in the next ten minutes, and start it now. "
        "You can do this, one step at a time, and every step counts."
    ),
}

CONVERSATION_FALLBACK = (
    "I'm here with you. Let's take one slow breath together. "
    "When you're ready, tell me a little more about how you're feeling."
)

CONFIDENCE_BOOST_REQUEST = "I need a quick confidence boost"


def session_prompt(session_type: SessionType, user_context: str = "") -> str:
    context = user_context.strip()
    request = SESSION_PROMPTS[session_type].format(context=context)
    context_note = ""
    if context and "{context}" not in SESSION_PROMPTS[session_type]:
        context_note = f' The person shared: "{context}".'
    return SESSION_PREAMBLE.format(name=COACH_NAME, request=request, context_note=context_note)


def conversation_prompt(context: str, user_input: str) -> str:
    return CONVERSATION_TEMPLATE.format(
        name=COACH_NAME, context=context or "(none yet)", user_input=user_input
    )


class SessionCatalog:
    """Hands out a playable SessionScript for each session type."""

    def __init__(self, generator: TextGenerator, config: Optional[dict] = None) -> None:
        self.generator = generator
        config = config or DEFAULT_CONFIG
        self.model = config["generation"]["model"]
        self.max_tokens = config["generation"]["session_max_tokens"]
        self.ms_per_char = config["pacing"].get("ms_per_char", DEFAULT_MS_PER_CHAR)
        self.pause_seconds = config["pacing"].get("pause_seconds", DEFAULT_PAUSE_SECONDS)

    @staticmethod
    def is_static(session_type: SessionType) -> bool:
        return session_type in STATIC_SCRIPTS

    def script_for(self, session_type: SessionType, user_context: str = "") -> SessionScript:
        """
        Fixed script for breathing/mindfulness; otherwise one generated block.
        Never raises on generation errors.
        """
        if session_type in STATIC_SCRIPTS:
            return STATIC_SCRIPTS[session_type]

        prompt = session_prompt(session_type, user_context)
        try:
            text = self.generator.generate_text(prompt, self.model, self.max_tokens)
        except GenerationFailure as e:
            logger.warning("%s generation failed, using fallback: %s", session_type.label, e)
            text = FALLBACK_TEXTS[session_type]

        seconds = step_delay_ms(text, self.ms_per_char, self.pause_seconds) // 1000
        return SessionScript(session_type, (text,), seconds)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Holds the coach's built-in content: two hand-written scripts, the prompt
#   templates for generated sessions and chat replies, and fallback texts.
#
# Data flow:
#   "Help me focus" → IntentRouter → StartSession(MINDFULNESS) →
#   catalog.script_for() → STATIC_SCRIPTS lookup → StepSequencer.play().
#   "Motivate me" → ... → script_for() → TextGenerator → 1-step script
#   (or the motivation fallback when the service is down).
#
# Interviewer-friendly talking points:
#   1. Offline-first for the two calming sessions: no network round trip
#      stands between an anxious user and the breathing exercise.
#   2. Failure is local: script_for() catches GenerationFailure itself, so
#      the player never sees an exception, only a gentler default text.
