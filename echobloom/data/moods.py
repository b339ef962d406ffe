"""
Mood catalog — the mood buttons and the phrasings suggested for each.

Read-only reference data. Picking a suggestion sends it to the chat coach.
"""

from __future__ import annotations

from typing import List, Optional

from .models import MoodEntry

MOOD_ENTRIES: List[MoodEntry] = [
    MoodEntry("anxious", "Anxious", (
        "I need help calming my racing thoughts",
        "I feel overwhelmed and need to breathe",
        "My anxiety is making it hard to focus",
        "I need grounding techniques for anxiety",
    )),
    MoodEntry("stressed", "Stressed", (
        "Work is overwhelming me today",
        "I have too much on my plate",
        "I need help managing stress",
        "I feel pressure from all directions",
    )),
    MoodEntry("sad", "Sad", (
        "I'm feeling down and need comfort",
        "I need encouragement to get through this",
        "I feel lonely and disconnected",
        "I need reminders of my worth",
    )),
    MoodEntry("tired", "Tired", (
        "I feel mentally and physically drained",
        "I need energy and motivation",
        "I'm exhausted but need to keep going",
        "I need help finding my inner strength",
    )),
    MoodEntry("neutral", "Neutral", (
        "I want to feel more positive",
        "I need a boost to my day",
        "I want to cultivate gratitude",
        "I need motivation to take action",
    )),
    MoodEntry("happy", "Happy", (
        "I want to maintain this positive energy",
        "I'm grateful and want to celebrate",
        "I want to spread this joy to others",
        "I want affirmations to keep me motivated",
    )),
    MoodEntry("excited", "Excited", (
        "I'm ready to take on new challenges",
        "I want to channel this energy productively",
        "I'm feeling confident and powerful",
        "I want motivation to achieve my goals",
    )),
    MoodEntry("grateful", "Grateful", (
        "I want to deepen my sense of gratitude",
        "I'm thankful and want to share this feeling",
        "I want to appreciate the good in my life",
        "I want affirmations about abundance",
    )),
    MoodEntry("peaceful", "Peaceful", (
        "I want to maintain this inner calm",
        "I'm centered and want to stay grounded",
        "I want mindfulness to deepen this peace",
        "I want to cultivate more serenity",
    )),
    MoodEntry("inspired", "Inspired", (
        "I'm feeling creative and want to act on it",
        "I have ideas and need confidence to pursue them",
        "I want to turn inspiration into action",
        "I need motivation to follow my dreams",
    )),
]


def mood_by_id(mood_id: str) -> Optional[MoodEntry]:
    for mood in MOOD_ENTRIES:
        if mood.id == mood_id:
            return mood
    return None
