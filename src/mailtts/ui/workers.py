"""Thread pool helpers used across the GUI."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Callable, Optional

import structlog
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

logger = structlog.get_logger()

WORKER_FAILED = object()


@dataclass(frozen=True)
class WorkerError:
    context: Optional[str]
    message: str
    exc_type: str
    traceback: str

    def describe(self) -> str:
        prefix = f"{self.context}: " if self.context else ""
        return f"{prefix}{self.exc_type}: {self.message}"


class WorkerSignals(QObject):
    finished = pyqtSignal(object)
    error = pyqtSignal(object)


class Worker(QRunnable):
    def __init__(self, fn, *args, context: Optional[str] = None, **kwargs):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()
        self.context = context

    def run(self) -> None:
        result = WORKER_FAILED
        try:
            result = self.fn(*self.args, **self.kwargs)
        except Exception as exc:
            logger.warning("worker_failed", context=self.context, error=str(exc))
            self.signals.error.emit(
                WorkerError(
                    context=self.context,
                    message=str(exc),
                    exc_type=exc.__class__.__name__,
                    traceback=traceback.format_exc(),
                )
            )
        finally:
            self.signals.finished.emit(result)


class WorkerSpawner:
    """Wires a ``Worker``'s signals to callbacks and hands it to a thread pool.

    ``on_finished`` only fires for successful runs; failures go to ``on_error``.
    """

    def __init__(self, thread_pool: Optional[QThreadPool] = None) -> None:
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

    def __call__(
        self,
        fn,
        *args,
        context: Optional[str] = None,
        on_finished: Optional[Callable[[object], None]] = None,
        on_error: Optional[Callable[[WorkerError], None]] = None,
        **kwargs,
    ) -> Worker:
        worker = Worker(fn, *args, context=context, **kwargs)
        if on_finished:
            def _handle_finished(payload):
                if payload is WORKER_FAILED:
                    return
                on_finished(payload)

            worker.signals.finished.connect(_handle_finished)
        if on_error:
            worker.signals.error.connect(on_error)
        self.start(worker)
        return worker

    def start(self, worker: Worker) -> None:
        self.thread_pool.start(worker)
