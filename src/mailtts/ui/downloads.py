"""Generate-then-download orchestration for rendered entries."""

from __future__ import annotations

import enum
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

import structlog
from PyQt6 import sip
from PyQt6.QtCore import QObject, pyqtSignal

from ..api import MailApiClient
from ..storage import audio_filename, save_resource
from .workers import WorkerError

logger = structlog.get_logger()

DOWNLOAD_LABEL = "⬇ Download"
BUSY_LABEL = "Downloading…"
FAILURE_NOTICE = "Failed to download the audio."


class DownloadState(enum.Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class DownloadTask:
    message_id: str
    state: DownloadState = DownloadState.IDLE


class AudioSaver(QObject):
    """Fire-and-forget save of a remote audio resource into ``download_dir``.

    ``save`` returns as soon as the transfer is scheduled; completion is
    reported through ``saved`` and ``failed``.
    """

    saved = pyqtSignal(object)
    failed = pyqtSignal(str, object)

    def __init__(
        self,
        download_dir: Path,
        spawn: Callable,
        *,
        timeout: Optional[float] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.download_dir = Path(download_dir)
        self._spawn = spawn
        self._timeout = timeout

    def save(self, url: str, filename: str) -> Path:
        target = self.download_dir / filename
        logger.info("audio_save_started", url=url, path=str(target))
        self._spawn(
            save_resource,
            url,
            target,
            timeout=self._timeout,
            context="save_audio",
            on_finished=self.saved.emit,
            on_error=lambda error, name=filename: self._on_error(name, error),
        )
        return target

    def _on_error(self, filename: str, error: WorkerError) -> None:
        logger.warning("audio_save_failed", filename=filename, error=error.message)
        self.failed.emit(filename, error)


@contextmanager
def restore_idle(entry) -> Iterator[None]:
    """Hand the entry's download control back to the user on every exit path."""
    try:
        yield
    finally:
        entry.set_download_state(DownloadState.IDLE)
        # A refresh may have deleted the entry while its task was in flight.
        if not sip.isdeleted(entry):
            entry.set_busy(False, DOWNLOAD_LABEL)


class DownloadController(QObject):
    """Runs the per-entry ``idle -> generating -> ready|failed -> idle`` cycle.

    The generation request runs on a worker; the save is handed to the
    ``AudioSaver`` and not awaited. Entries are independent, so several tasks
    may be in flight at once.
    """

    failed = pyqtSignal(str, str)
    triggered = pyqtSignal(str, object)

    def __init__(
        self,
        api: MailApiClient,
        saver: AudioSaver,
        spawn: Callable,
        notify: Callable[[str], None],
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.api = api
        self.saver = saver
        self._spawn = spawn
        self._notify = notify

    def trigger(self, entry) -> bool:
        if entry.is_generating():
            return False
        message_id = entry.message_id
        entry.set_busy(True, BUSY_LABEL)
        entry.set_download_state(DownloadState.GENERATING)
        logger.info("download_generating", message_id=message_id)
        try:
            self._spawn(
                self.api.generate_audio,
                message_id,
                context="generate_audio",
                on_finished=lambda _result, e=entry: self._on_generated(e),
                on_error=lambda error, e=entry: self._on_generation_failed(e, error),
            )
        except Exception as exc:
            self._on_generation_failed(entry, exc)
        return True

    def _on_generated(self, entry) -> None:
        message_id = entry.message_id
        with restore_idle(entry):
            entry.set_download_state(DownloadState.READY)
            url = self.api.download_url(message_id)
            try:
                target = self.saver.save(url, audio_filename(message_id))
            except Exception as exc:
                logger.exception("download_trigger_failed", message_id=message_id, error=str(exc))
                self._fail(message_id, str(exc))
                return
            logger.info("download_triggered", message_id=message_id, url=url)
            self.triggered.emit(message_id, target)

    def _on_generation_failed(self, entry, error) -> None:
        message_id = entry.message_id
        with restore_idle(entry):
            entry.set_download_state(DownloadState.FAILED)
            detail = error.describe() if isinstance(error, WorkerError) else str(error)
            logger.warning("download_generation_failed", message_id=message_id, error=detail)
            self._fail(message_id, detail)

    def _fail(self, message_id: str, detail: str) -> None:
        self.failed.emit(message_id, detail)
        self._notify(FAILURE_NOTICE)
