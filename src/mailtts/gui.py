"""PyQt6 entry point for the MailTTS player window."""

from __future__ import annotations

from .ui.main import MailTTSWindow, run_gui
from .ui.views.messages import MessageEntry, MessageListView
from .ui.views.player import PlaybackController, PlaybackSession, PlaybackState
from .ui.workers import Worker, WorkerError, WorkerSpawner

__all__ = [
    "MailTTSWindow",
    "run_gui",
    "MessageEntry",
    "MessageListView",
    "PlaybackController",
    "PlaybackSession",
    "PlaybackState",
    "Worker",
    "WorkerError",
    "WorkerSpawner",
]
