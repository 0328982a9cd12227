"""Main window and application entry point for the GUI."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Optional

import structlog
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..api import MailApiClient
from ..config import ClientDefaults, load_defaults
from ..log import configure_logging
from ..models import MessageSummary
from ..query import SearchFilter
from ..services import SearchService
from .downloads import AudioSaver, DownloadController
from .theme import apply_theme
from .views.messages import MessageListView
from .views.player import PlaybackController, PlaybackSession, PlaybackState
from .workers import WorkerError, WorkerSpawner

logger = structlog.get_logger()


class MailTTSWindow(QMainWindow):
    def __init__(
        self,
        defaults: Optional[ClientDefaults] = None,
        *,
        api: Optional[MailApiClient] = None,
        spawn: Optional[Callable] = None,
        player=None,
        notify: Optional[Callable[[str], None]] = None,
        autostart: bool = True,
    ) -> None:
        super().__init__()
        self.setWindowTitle("MailTTS Player")
        self.defaults = defaults or load_defaults()
        self.api = api or MailApiClient(self.defaults.api_base, timeout=self.defaults.request_timeout)
        self.spawn = spawn or WorkerSpawner()
        self.search_service = SearchService(self.api)
        self.session = PlaybackSession(player, self)
        self.playback = PlaybackController(self.session, self.api.stream_url)
        self.saver = AudioSaver(
            self.defaults.download_dir,
            self.spawn,
            timeout=self.defaults.request_timeout,
            parent=self,
        )
        self.downloads = DownloadController(
            self.api,
            self.saver,
            self.spawn,
            notify or self._show_failure_notice,
            self,
        )
        self.list_view = MessageListView(self.session, self.playback, self.downloads, self)
        self.status_label = QLabel("Ready")
        self.now_playing_label = QLabel("Nothing playing")
        self._messages: List[MessageSummary] = []
        self._fetching = False

        self.session.stateChanged.connect(self._on_playback_state_changed)
        self.session.errorOccurred.connect(self._handle_player_error)
        self.saver.saved.connect(lambda path: self._set_status(f"Saved {Path(path).name}"))
        self.saver.failed.connect(self._on_save_failed)
        self.downloads.triggered.connect(lambda message_id, _target: self._set_status(f"Downloading {message_id}.mp3..."))
        self._build_ui()
        if autostart:
            QTimer.singleShot(0, self._start_search)
            QTimer.singleShot(0, self._preflight)

    def _build_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout()
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addWidget(self._build_filter_card())
        layout.addWidget(self.list_view, 1)
        layout.addWidget(self._build_now_playing_bar())
        central.setLayout(layout)
        self.setCentralWidget(central)
        self.resize(720, 800)

    def _build_filter_card(self) -> QFrame:
        card = QFrame()
        card.setObjectName("card")
        grid = QGridLayout()
        grid.setHorizontalSpacing(12)
        grid.setVerticalSpacing(8)
        grid.addWidget(QLabel("From"), 0, 0)
        self.from_input = QLineEdit(self.defaults.default_from)
        self.from_input.setPlaceholderText("sender@example.com")
        self.from_input.returnPressed.connect(self._start_search)
        grid.addWidget(self.from_input, 0, 1)
        grid.addWidget(QLabel("Title"), 1, 0)
        self.title_input = QLineEdit(self.defaults.default_title)
        self.title_input.setPlaceholderText("Words in the subject")
        self.title_input.returnPressed.connect(self._start_search)
        grid.addWidget(self.title_input, 1, 1)

        buttons = QHBoxLayout()
        self.search_button = QPushButton("Search")
        self.search_button.setProperty("primary", True)
        self.search_button.clicked.connect(self._start_search)
        self.latest_button = QPushButton("Latest")
        self.latest_button.setProperty("primary", True)
        self.latest_button.clicked.connect(self._show_latest)
        buttons.addStretch()
        buttons.addWidget(self.latest_button)
        buttons.addWidget(self.search_button)
        grid.addLayout(buttons, 2, 0, 1, 2)
        card.setLayout(grid)
        return card

    def _build_now_playing_bar(self) -> QWidget:
        bar = QWidget()
        layout = QHBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)
        layout.addWidget(QLabel("Now playing:"))
        layout.addWidget(self.now_playing_label)
        layout.addStretch()
        self.play_pause_button = QPushButton("Play/Pause")
        self.play_pause_button.setProperty("primary", True)
        self.play_pause_button.clicked.connect(self.session.toggle_playback)
        layout.addWidget(self.play_pause_button)
        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setValue(80)
        self.volume_slider.setFixedWidth(100)
        self.volume_slider.valueChanged.connect(self.session.set_volume)
        layout.addWidget(self.volume_slider)
        layout.addWidget(self.status_label)
        bar.setLayout(layout)
        return bar

    def _set_status(self, message: str) -> None:
        self.status_label.setText(message)

    def current_filter(self) -> SearchFilter:
        return SearchFilter(sender=self.from_input.text(), title=self.title_input.text())

    def _set_fetching(self, fetching: bool) -> None:
        self._fetching = fetching
        self.search_button.setEnabled(not fetching)
        self.latest_button.setEnabled(not fetching)

    def _start_search(self) -> None:
        # Return in a filter field bypasses the disabled buttons.
        if self._fetching:
            return
        search_filter = self.current_filter()
        self._set_fetching(True)
        self._set_status("Searching...")
        self.spawn(
            self.search_service.fetch,
            search_filter,
            self.defaults.max_results,
            context="list_messages",
            on_finished=self._on_search_finished,
            on_error=self._on_search_failed,
        )

    def _show_latest(self) -> None:
        if self._fetching:
            return
        self._set_fetching(True)
        self._set_status("Fetching latest message...")
        self.spawn(
            self.search_service.latest,
            context="latest_message",
            on_finished=lambda message: self._on_search_finished([message] if message else []),
            on_error=self._on_search_failed,
        )

    def _on_search_finished(self, messages: List[MessageSummary]) -> None:
        self._set_fetching(False)
        self._messages = list(messages)
        self.list_view.render_messages(self._messages)
        self._set_status(f"Found {len(self._messages)} messages.")

    def _on_search_failed(self, error: WorkerError) -> None:
        # The list on screen stays as it was; only a successful fetch replaces it.
        self._set_fetching(False)
        logger.error("list_fetch_failed", error=error.describe())
        self._set_status(f"Error: {error.describe()}")

    def _preflight(self) -> None:
        self.spawn(
            self.api.healthcheck,
            context="healthcheck",
            on_finished=lambda healthy: None if healthy else self._set_status(
                f"Backend at {self.api.base_url} is not responding."
            ),
        )

    def _on_playback_state_changed(self, state: PlaybackState) -> None:
        if state.active_message_id is None:
            self.now_playing_label.setText("Nothing playing")
            return
        message = next((m for m in self._messages if m.id == state.active_message_id), None)
        title = message.subject if message else state.active_message_id
        suffix = "" if state.state == "playing" else " (paused)"
        self.now_playing_label.setText(f"{title}{suffix}")

    def _handle_player_error(self, message: str) -> None:
        self._set_status(f"Playback error: {message}")

    def _on_save_failed(self, filename: str, error: WorkerError) -> None:
        self._set_status(f"Could not save {filename}: {error.message}")

    def _show_failure_notice(self, message: str) -> None:
        QMessageBox.warning(self, "Download", message)


def run_gui() -> None:

    defaults = load_defaults()

    configure_logging(defaults.log_level)

    app = QApplication(sys.argv)

    apply_theme(app)

    window = MailTTSWindow(defaults)

    window.show()

    app.exec()
