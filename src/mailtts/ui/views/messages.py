"""Message list view: one card per fetched summary with stream/download actions."""

from __future__ import annotations

from typing import Iterable, List, Optional

import structlog
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ...models import MessageSummary, format_timestamp
from ..downloads import DOWNLOAD_LABEL, DownloadController, DownloadState, DownloadTask
from .player import PlaybackController, PlaybackSession

logger = structlog.get_logger()

STREAM_LABEL = "▶ Stream"


class MessageEntry(QFrame):
    streamRequested = pyqtSignal(str)
    downloadRequested = pyqtSignal(object)

    def __init__(self, message: MessageSummary, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        self.message = message
        self.download_task = DownloadTask(message.id)

        self.date_label = QLabel(format_timestamp(message.internal_date))
        self.date_label.setObjectName("muted")
        self.sender_label = QLabel(message.sender)
        self.sender_label.setObjectName("muted")
        self.subject_label = QLabel(message.subject)
        self.subject_label.setObjectName("subject")
        self.subject_label.setWordWrap(True)
        self.preview_label = QLabel(message.preview)
        self.preview_label.setObjectName("preview")
        self.preview_label.setWordWrap(True)
        for label in (self.sender_label, self.subject_label, self.preview_label):
            label.setTextFormat(Qt.TextFormat.PlainText)

        self.stream_button = QPushButton(STREAM_LABEL)
        self.stream_button.setProperty("primary", True)
        self.stream_button.clicked.connect(lambda: self.streamRequested.emit(self.message.id))
        self.download_button = QPushButton(DOWNLOAD_LABEL)
        self.download_button.clicked.connect(lambda: self.downloadRequested.emit(self))

        buttons = QHBoxLayout()
        buttons.setSpacing(8)
        buttons.addWidget(self.stream_button)
        buttons.addWidget(self.download_button)
        buttons.addStretch()

        layout = QVBoxLayout()
        layout.setSpacing(4)
        layout.addWidget(self.date_label)
        layout.addWidget(self.sender_label)
        layout.addWidget(self.subject_label)
        layout.addWidget(self.preview_label)
        layout.addLayout(buttons)
        self.setLayout(layout)

    @property
    def message_id(self) -> str:
        return self.message.id

    def is_generating(self) -> bool:
        return self.download_task.state is DownloadState.GENERATING

    def set_download_state(self, state: DownloadState) -> None:
        self.download_task = DownloadTask(self.message.id, state)

    def set_busy(self, busy: bool, label: str) -> None:
        self.download_button.setEnabled(not busy)
        self.download_button.setText(label)


class MessageListView(QWidget):
    """Renders a result set, replacing whatever was shown before."""

    rendered = pyqtSignal(int)

    def __init__(
        self,
        session: PlaybackSession,
        playback: PlaybackController,
        downloads: DownloadController,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.session = session
        self.playback = playback
        self.downloads = downloads
        self._entries: List[MessageEntry] = []

        self.count_label = QLabel("0 messages")
        self.count_label.setObjectName("muted")

        self._container = QWidget()
        self._entries_layout = QVBoxLayout()
        self._entries_layout.setContentsMargins(0, 0, 0, 0)
        self._entries_layout.setSpacing(8)
        self._entries_layout.addStretch()
        self._container.setLayout(self._entries_layout)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setWidget(self._container)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.count_label)
        layout.addWidget(scroll)
        self.setLayout(layout)

    def render_messages(self, messages: Iterable[MessageSummary]) -> List[MessageEntry]:
        # Audio never outlives the list that produced it.
        self.session.reset()
        self.clear()
        for message in messages:
            entry = MessageEntry(message, self._container)
            entry.streamRequested.connect(self.playback.stream)
            entry.downloadRequested.connect(self.downloads.trigger)
            self._entries_layout.insertWidget(self._entries_layout.count() - 1, entry)
            self._entries.append(entry)
            logger.debug("entry_added", message_id=message.id)
        self.count_label.setText(f"{len(self._entries)} messages")
        logger.info("list_rendered", count=len(self._entries))
        self.rendered.emit(len(self._entries))
        return list(self._entries)

    def clear(self) -> None:
        for entry in self._entries:
            self._entries_layout.removeWidget(entry)
            entry.hide()
            entry.deleteLater()
        self._entries = []

    def entries(self) -> List[MessageEntry]:
        return list(self._entries)
