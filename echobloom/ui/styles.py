"""
Dark mode stylesheet for the coach window.
Catppuccin Mocha-inspired palette, with calm accents for the session cards.
"""

DARK_STYLESHEET = """
/* ── Base ────────────────────────────────────────────────────────── */
QWidget {
    background-color: #1e1e2e;
    color: #cdd6f4;
    font-family: "Segoe UI", "Inter", sans-serif;
    font-size: 13px;
}

QMainWindow {
    background-color: #1e1e2e;
}

/* ── Buttons ─────────────────────────────────────────────────────── */
QPushButton {
    background-color: #313244;
    color: #cdd6f4;
    border: 1px solid #585b70;
    border-radius: 8px;
    padding: 8px 18px;
    font-weight: 600;
    min-height: 24px;
}

QPushButton:hover {
    background-color: #45475a;
    border-color: #89b4fa;
}

QPushButton:pressed {
    background-color: #585b70;
}

QPushButton:disabled {
    background-color: #181825;
    color: #585b70;
    border-color: #313244;
}

QPushButton#primary {
    background-color: #89b4fa;
    color: #1e1e2e;
    border: none;
}

QPushButton#primary:hover {
    background-color: #74c7ec;
}

QPushButton#danger {
    background-color: #f38ba8;
    color: #1e1e2e;
    border: none;
}

QPushButton#danger:hover {
    background-color: #eba0ac;
}

QPushButton#warning {
    background-color: #fab387;
    color: #1e1e2e;
    border: none;
}

QPushButton#warning:hover {
    background-color: #f9e2af;
}

QPushButton#success {
    background-color: #a6e3a1;
    color: #1e1e2e;
    border: none;
}

QPushButton:checked {
    background-color: #45475a;
    border-color: #cba6f7;
    color: #cba6f7;
}

/* ── Input fields ────────────────────────────────────────────────── */
QLineEdit, QTextEdit, QPlainTextEdit {
    background-color: #313244;
    color: #cdd6f4;
    border: 1px solid #585b70;
    border-radius: 6px;
    padding: 6px 10px;
    selection-background-color: #89b4fa;
    selection-color: #1e1e2e;
}

QLineEdit:focus, QTextEdit:focus {
    border-color: #89b4fa;
}

/* ── Labels ──────────────────────────────────────────────────────── */
QLabel {
    background: transparent;
    color: #cdd6f4;
}

QLabel#title {
    font-size: 22px;
    font-weight: 700;
    color: #89b4fa;
}

QLabel#subtitle {
    font-size: 15px;
    color: #a6adc8;
}

QLabel#state_label {
    font-size: 15px;
    font-weight: 600;
    color: #cba6f7;
}

QLabel#instruction {
    font-size: 17px;
    color: #cdd6f4;
    background-color: #313244;
    border-radius: 10px;
    padding: 18px;
}

QLabel#phase_text {
    font-size: 22px;
    font-weight: 700;
}

QLabel#phase_count {
    font-size: 28px;
    font-weight: 700;
    font-family: "Consolas", "Courier New", monospace;
    color: #f9e2af;
}

/* ── Cards ───────────────────────────────────────────────────────── */
QFrame#card {
    background-color: #181825;
    border: 1px solid #313244;
    border-radius: 10px;
}

QPushButton#mood {
    padding: 10px 6px;
    font-weight: 500;
}

QTextBrowser {
    background-color: #181825;
    border: 1px solid #313244;
    border-radius: 8px;
    padding: 8px;
}


/* ── Tab Widget ──────────────────────────────────────────────────── */
QTabWidget::pane {
    border: 1px solid #313244;
    background-color: #1e1e2e;
    border-radius: 8px;
}

QTabBar::tab {
    background-color: #181825;
    color: #a6adc8;
    padding: 10px 20px;
    margin-right: 2px;
    border-top-left-radius: 8px;
    border-top-right-radius: 8px;
    font-weight: 600;
}

QTabBar::tab:selected {
    background-color: #1e1e2e;
    color: #89b4fa;
    border-bottom: 2px solid #89b4fa;
}

QTabBar::tab:hover:!selected {
    background-color: #313244;
    color: #cdd6f4;
}

/* ── Menu / Status bar ─────────────────────────────────────────── */
QMenuBar {
    background-color: #181825;
    color: #a6adc8;
}

QMenuBar::item:selected, QMenu::item:selected {
    background-color: #313244;
    color: #89b4fa;
}

QMenu {
    background-color: #181825;
    border: 1px solid #313244;
    padding: 4px;
}

QStatusBar {
    background-color: #181825;
    color: #a6adc8;
}

/* ── Tooltip ─────────────────────────────────────────────────────── */
QToolTip {
    background-color: #313244;
    color: #cdd6f4;
    border: 1px solid #585b70;
    border-radius: 4px;
    padding: 4px 8px;
}

/* ── Progress Bar ────────────────────────────────────────────────── */
QProgressBar {
    background-color: #313244;
    border: none;
    border-radius: 5px;
    max-height: 10px;
}

QProgressBar::chunk {
    background-color: #a6e3a1;
    border-radius: 5px;
}
"""
