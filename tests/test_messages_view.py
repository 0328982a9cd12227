from PyQt6.QtCore import QUrl

from conftest import SyncSpawner, make_message
from mailtts.models import format_timestamp
from mailtts.ui.downloads import DOWNLOAD_LABEL, DownloadController, DownloadState
from mailtts.ui.views.messages import STREAM_LABEL, MessageListView
from mailtts.ui.views.player import PlaybackController, PlaybackSession


class FakeApi:
    def __init__(self) -> None:
        self.generated = []

    def stream_url(self, message_id):
        return f"http://h/messages/{message_id}/tts/stream"

    def download_url(self, message_id):
        return f"http://h/audios/merged/{message_id}.mp3"

    def generate_audio(self, message_id):
        self.generated.append(message_id)


class FakeSaver:
    def __init__(self) -> None:
        self.saved = []

    def save(self, url, filename):
        self.saved.append((url, filename))
        return filename


def _build_view(fake_player, spawner=None):
    api = FakeApi()
    session = PlaybackSession(fake_player)
    playback = PlaybackController(session, api.stream_url)
    downloads = DownloadController(api, FakeSaver(), spawner or SyncSpawner(), lambda _msg: None)
    return MessageListView(session, playback, downloads), session, api


def test_render_shows_entries_in_result_order(qapp, fake_player) -> None:
    view, _, _ = _build_view(fake_player)
    messages = [make_message("2", subject="second"), make_message("1", subject="first")]
    entries = view.render_messages(messages)
    assert [e.message_id for e in entries] == ["2", "1"]
    assert entries[0].subject_label.text() == "second"
    assert entries[0].sender_label.text() == "Newsletter <news@example.com>"
    assert entries[0].preview_label.text() == "Hello there"
    assert entries[0].date_label.text() == format_timestamp(1700000000000)
    assert entries[0].stream_button.text() == STREAM_LABEL
    assert entries[0].download_button.text() == DOWNLOAD_LABEL
    assert view.count_label.text() == "2 messages"


def test_render_replaces_previous_entries(qapp, fake_player) -> None:
    view, _, _ = _build_view(fake_player)
    view.render_messages([make_message("a"), make_message("b"), make_message("c")])
    view.render_messages([make_message("d")])
    assert [e.message_id for e in view.entries()] == ["d"]


def test_render_silences_player_even_when_empty(qapp, fake_player) -> None:
    view, session, _ = _build_view(fake_player)
    entries = view.render_messages([make_message("a")])
    entries[0].stream_button.click()
    assert fake_player.playing is True
    assert session.current.active_message_id == "a"

    assert view.render_messages([]) == []
    assert fake_player.playing is False
    assert fake_player.source == QUrl()
    assert session.current.active_message_id is None
    assert fake_player.events[-2:] == [("pause",), ("source", "")]


def test_stream_buttons_share_one_player(qapp, fake_player) -> None:
    view, session, api = _build_view(fake_player)
    first, second = view.render_messages([make_message("a"), make_message("b")])
    first.stream_button.click()
    second.stream_button.click()
    assert fake_player.source == QUrl(api.stream_url("b"))
    assert session.current.active_message_id == "b"


def test_download_button_is_wired_to_controller(qapp, fake_player) -> None:
    view, _, api = _build_view(fake_player)
    (entry,) = view.render_messages([make_message("a")])
    entry.download_button.click()
    assert api.generated == ["a"]
    assert entry.download_task.state is DownloadState.IDLE
    assert entry.download_button.isEnabled()


def test_render_survives_unrepresentable_timestamp(qapp, fake_player) -> None:
    view, _, _ = _build_view(fake_player)
    view.render_messages([make_message("old")])
    far_future = make_message("b").model_copy(update={"internal_date": 10**17})
    entries = view.render_messages([make_message("a"), far_future, make_message("c")])
    assert [e.message_id for e in entries] == ["a", "b", "c"]
    assert entries[1].date_label.text() == str(10**17)
    assert view.count_label.text() == "3 messages"
