from .main_window import CoachWindow
from .breathing_widget import BreathingWidget
from .mood_widget import MoodWidget

__all__ = ["CoachWindow", "BreathingWidget", "MoodWidget"]
