from .models import MoodEntry, SessionScript, SessionType
from .moods import MOOD_ENTRIES, mood_by_id

__all__ = ["MoodEntry", "SessionScript", "SessionType", "MOOD_ENTRIES", "mood_by_id"]
