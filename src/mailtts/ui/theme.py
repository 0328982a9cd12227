"""Theme constants and stylesheet helpers for the Qt UI."""

from __future__ import annotations

from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QApplication

ACCENT_COLOR = "#2563EB"
SUCCESS_COLOR = "#16A34A"
BACKGROUND = "#F9FAFB"
PANEL = "#FFFFFF"
DIVIDER = "#D1D5DB"
TEXT_PRIMARY = "#111827"
TEXT_MUTED = "#4B5563"
DISABLED_TEXT = "#9CA3AF"

STYLE_SHEET = f"""
QWidget {{
    background-color: {BACKGROUND};
    color: {TEXT_PRIMARY};
    font-family: 'Segoe UI', 'Hiragino Sans', 'Noto Sans CJK JP', sans-serif;
}}
QFrame#card {{
    background-color: {PANEL};
    border: 1px solid {DIVIDER};
    border-radius: 6px;
    padding: 8px;
}}
QLabel#muted {{
    color: {TEXT_MUTED};
}}
QLabel#subject {{
    font-weight: 600;
}}
QLabel#preview {{
    color: {TEXT_MUTED};
    font-size: 11px;
}}
QPushButton {{
    background-color: {SUCCESS_COLOR};
    color: white;
    border: none;
    border-radius: 4px;
    padding: 4px 10px;
}}
QPushButton:disabled {{
    background-color: {DISABLED_TEXT};
}}
QPushButton[primary="true"] {{
    background-color: {ACCENT_COLOR};
}}
QLineEdit {{
    background-color: {PANEL};
    border: 1px solid {DIVIDER};
    border-radius: 4px;
    padding: 4px 8px;
}}
"""


def apply_theme(app: QApplication) -> None:
    app.setFont(QFont("Segoe UI", 10))
    app.setStyleSheet(STYLE_SHEET)
