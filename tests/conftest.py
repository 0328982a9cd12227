import io
import json
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("MAILTTS_SKIP_DOTENV", "1")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from mailtts.models import MessageSummary  # noqa: E402
from mailtts.ui.workers import WorkerSpawner  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def make_message(message_id: str = "m1", **overrides) -> MessageSummary:
    payload = {
        "id": message_id,
        "from": "Newsletter <news@example.com>",
        "subject": f"Subject {message_id}",
        "preview": "Hello there",
        "internalDate": "1700000000000",
    }
    payload.update(overrides)
    return MessageSummary.model_validate(payload)


class SyncSpawner(WorkerSpawner):
    """Runs workers inline, or holds them until ``run_pending`` when ``deferred``."""

    def __init__(self, deferred: bool = False) -> None:
        self.deferred = deferred
        self.pending = []
        self.calls = []

    def __call__(self, fn, *args, **kwargs):
        self.calls.append((fn, args, dict(kwargs)))
        return super().__call__(fn, *args, **kwargs)

    def start(self, worker) -> None:
        if self.deferred:
            self.pending.append(worker)
        else:
            worker.run()

    def run_pending(self) -> None:
        pending, self.pending = self.pending, []
        for worker in pending:
            worker.run()


class FakePlayer:
    def __init__(self) -> None:
        self.source = None
        self.playing = False
        self.events = []

    def setSource(self, url) -> None:
        self.source = url
        self.events.append(("source", url.toString()))

    def play(self) -> None:
        self.playing = True
        self.events.append(("play",))

    def pause(self) -> None:
        self.playing = False
        self.events.append(("pause",))


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def json_response(payload) -> FakeResponse:
    return FakeResponse(json.dumps(payload).encode("utf-8"))


@pytest.fixture
def sync_spawner():
    return SyncSpawner()


@pytest.fixture
def fake_player():
    return FakePlayer()
