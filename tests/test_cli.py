import asyncio

from conftest import make_message
from mailtts import cli
from mailtts.exceptions import ServerError


class FakeApi:
    instances = []

    def __init__(self, base_url, timeout=None) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.healthy = True
        FakeApi.instances.append(self)

    def healthcheck(self):
        return self.healthy

    def stream_url(self, message_id):
        return f"{self.base_url}/messages/{message_id}/tts/stream"


def test_parse_args_defaults(monkeypatch) -> None:
    monkeypatch.delenv("MAILTTS_MAX_RESULTS", raising=False)
    args = cli.parse_args(["list", "--from", "a b", "--title", "x y", "--max", "20"])
    assert args.command == "list"
    assert args.sender == "a b"
    assert args.title == "x y"
    assert args.max_results == 20


def test_list_command_prints_messages(monkeypatch, capsys) -> None:
    captured = {}

    class FakeSearchService:
        def __init__(self, api) -> None:
            pass

        def fetch(self, search_filter, max_results):
            captured["filter"] = search_filter
            captured["max"] = max_results
            return [make_message("abc", subject="Weekly")]

    monkeypatch.setattr(cli, "MailApiClient", FakeApi)
    monkeypatch.setattr(cli, "SearchService", FakeSearchService)
    code = asyncio.run(cli.main(["--api-base", "http://h", "list", "--title", "Weekly", "--max", "5"]))
    out = capsys.readouterr().out
    assert code == 0
    assert captured["filter"].title == "Weekly"
    assert captured["max"] == 5
    assert "abc" in out
    assert "Subject: Weekly" in out
    assert "Listed 1 messages." in out


def test_download_command(monkeypatch, capsys, tmp_path) -> None:
    class FakeDownloadService:
        def __init__(self, api) -> None:
            pass

        def download(self, message_id, download_dir):
            return download_dir / f"{message_id}.mp3"

    monkeypatch.setattr(cli, "MailApiClient", FakeApi)
    monkeypatch.setattr(cli, "DownloadService", FakeDownloadService)
    code = asyncio.run(cli.main(["download", "abc", "--download-dir", str(tmp_path)]))
    assert code == 0
    assert f"Saved {tmp_path / 'abc.mp3'}" in capsys.readouterr().out


def test_api_errors_exit_non_zero(monkeypatch, capsys) -> None:
    class FailingSearchService:
        def __init__(self, api) -> None:
            pass

        def latest(self):
            raise ServerError("GET /messages/latest failed with HTTP 401", status=401)

    monkeypatch.setattr(cli, "MailApiClient", FakeApi)
    monkeypatch.setattr(cli, "SearchService", FailingSearchService)
    code = asyncio.run(cli.main(["latest"]))
    assert code == 1
    assert "HTTP 401" in capsys.readouterr().err


def test_stream_url_command(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "MailApiClient", FakeApi)
    code = asyncio.run(cli.main(["--api-base", "http://h", "stream-url", "abc"]))
    assert code == 0
    assert capsys.readouterr().out.strip() == "http://h/messages/abc/tts/stream"


def test_check_flag_stops_when_backend_is_down(monkeypatch, capsys) -> None:
    class DownApi(FakeApi):
        def healthcheck(self):
            return False

    monkeypatch.setattr(cli, "MailApiClient", DownApi)
    code = asyncio.run(cli.main(["--check", "stream-url", "abc"]))
    assert code == 1
    assert "not responding" in capsys.readouterr().err
