"""Shared audio player ownership and the per-entry stream action."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional

import structlog
from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

logger = structlog.get_logger()

SessionStateName = Literal["idle", "playing"]


@dataclass(frozen=True)
class PlaybackState:
    active_message_id: Optional[str] = None
    state: SessionStateName = "idle"


IDLE = PlaybackState()


def _default_player() -> QMediaPlayer:
    player = QMediaPlayer()
    output = QAudioOutput(player)
    player.setAudioOutput(output)
    return player


class PlaybackSession(QObject):
    """Owns the single media player shared by every rendered entry.

    Whoever claims the session last owns the player; a claim or a reset
    replaces ``current`` with a fresh ``PlaybackState``.
    """

    stateChanged = pyqtSignal(object)
    errorOccurred = pyqtSignal(str)

    def __init__(self, player=None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.player = player if player is not None else _default_player()
        self.current: PlaybackState = IDLE
        error_signal = getattr(self.player, "errorOccurred", None)
        if error_signal is not None:
            error_signal.connect(self._on_media_error)
        state_signal = getattr(self.player, "playbackStateChanged", None)
        if state_signal is not None:
            state_signal.connect(self._on_player_state)

    def claim(self, message_id: str, source: str) -> PlaybackState:
        self.player.setSource(QUrl(source))
        self.player.play()
        self._replace(PlaybackState(active_message_id=message_id, state="playing"))
        logger.info("stream_claimed", message_id=message_id, source=source)
        return self.current

    def reset(self) -> None:
        self.player.pause()
        self.player.setSource(QUrl())
        self._replace(IDLE)
        logger.debug("playback_reset")

    def toggle_playback(self) -> None:
        if self.current.active_message_id is None:
            return
        if self.current.state == "playing":
            self.player.pause()
            self._replace(PlaybackState(self.current.active_message_id, "idle"))
        else:
            self.player.play()
            self._replace(PlaybackState(self.current.active_message_id, "playing"))

    def set_volume(self, value: int) -> None:
        output = self.player.audioOutput() if hasattr(self.player, "audioOutput") else None
        if output is not None:
            output.setVolume(value / 100)

    def _replace(self, state: PlaybackState) -> None:
        self.current = state
        self.stateChanged.emit(state)

    def _on_player_state(self, state) -> None:
        # The stream ending or failing stops the player without a reset.
        if self.current.active_message_id is None:
            return
        name = "playing" if state == QMediaPlayer.PlaybackState.PlayingState else "idle"
        if name != self.current.state:
            self._replace(PlaybackState(self.current.active_message_id, name))

    def _on_media_error(self, error, message: str = "") -> None:
        if error != QMediaPlayer.Error.NoError:
            text = message or self.player.errorString()
            logger.warning("playback_error", message_id=self.current.active_message_id, error=text)
            self.errorOccurred.emit(text)


class PlaybackController:
    """Points the session's player at a message's streaming endpoint."""

    def __init__(self, session: PlaybackSession, stream_url: Callable[[str], str]) -> None:
        self.session = session
        self._stream_url = stream_url

    def stream(self, message_id: str) -> PlaybackState:
        return self.session.claim(message_id, self._stream_url(message_id))
