"""
Mood Widget — pick how you feel, then one of a few suggested openers.
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QGridLayout, QLabel, QPushButton, QVBoxLayout, QWidget,
)

from echobloom.data.moods import MOOD_ENTRIES, mood_by_id

COLUMNS = 5


class MoodWidget(QWidget):
    """Grid of mood buttons; clicking a suggestion emits its text."""

    suggestion_selected = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(12)
        layout.setContentsMargins(24, 24, 24, 24)

        title = QLabel("How are you feeling?")
        title.setObjectName("title")
        layout.addWidget(title)

        grid = QGridLayout()
        grid.setSpacing(8)
        for i, mood in enumerate(MOOD_ENTRIES):
            btn = QPushButton(mood.label)
            btn.setObjectName("mood")
            btn.setCheckable(True)
            btn.clicked.connect(lambda _=False, m=mood.id: self.select_mood(m))
            grid.addWidget(btn, i // COLUMNS, i % COLUMNS)
        layout.addLayout(grid)

        self.prompt_label = QLabel("")
        self.prompt_label.setObjectName("subtitle")
        layout.addWidget(self.prompt_label)

        self._suggestions = QVBoxLayout()
        self._suggestions.setSpacing(6)
        layout.addLayout(self._suggestions)
        layout.addStretch()

    @Slot(str)
    def select_mood(self, mood_id: str) -> None:
        mood = mood_by_id(mood_id)
        if mood is None:
            return

        for btn in self.findChildren(QPushButton, "mood"):
            btn.setChecked(btn.text() == mood.label)

        while self._suggestions.count():
            item = self._suggestions.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        self.prompt_label.setText(f"Feeling {mood.label.lower()}? Try saying:")
        for text in mood.suggestions:
            btn = QPushButton(f"“{text}”")
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            btn.clicked.connect(lambda _=False, t=text: self.suggestion_selected.emit(t))
            self._suggestions.addWidget(btn)
