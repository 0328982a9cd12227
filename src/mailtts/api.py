"""HTTP client for the mail-to-speech backend.

The backend exposes the message listing, the audio generation trigger and the
audio resources. Calls here are blocking; the GUI runs them on worker threads.
"""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, List, Optional

import structlog

from .exceptions import NetworkFailure, ParseFailure, ServerError
from .models import MessageSummary, parse_message, parse_message_list

logger = structlog.get_logger()

USER_AGENT = "mailtts-player"


class MailApiClient:
    def __init__(self, base_url: str, *, timeout: Optional[float] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    # URL builders -----------------------------------------------------------------

    def messages_url(self, query: str, max_results: int) -> str:
        url = f"{self.base_url}/messages?max={int(max_results)}"
        if query:
            # query is already percent-encoded by build_query
            url = f"{url}&q={query}"
        return url

    def latest_url(self) -> str:
        return f"{self.base_url}/messages/latest"

    def generate_url(self, message_id: str) -> str:
        return f"{self.base_url}/messages/{_quote_id(message_id)}/tts"

    def stream_url(self, message_id: str) -> str:
        return f"{self.base_url}/messages/{_quote_id(message_id)}/tts/stream"

    def download_url(self, message_id: str) -> str:
        return f"{self.base_url}/audios/merged/{_quote_id(message_id)}.mp3"

    def health_url(self) -> str:
        return f"{self.base_url}/healthz"

    # Requests ---------------------------------------------------------------------

    def list_messages(self, query: str, max_results: int) -> List[MessageSummary]:
        """
        Fetch one page of message summaries in server order.

        Raises:
            NetworkFailure: When the backend cannot be reached.
            ServerError: When the backend answers with a non-2xx status.
            ParseFailure: When the body is not ``{"messages": [...]}``.
        """
        url = self.messages_url(query, max_results)
        logger.debug("list_request", url=url)
        return parse_message_list(self._get_json(url))

    def latest_message(self) -> Optional[MessageSummary]:
        return parse_message(self._get_json(self.latest_url()))

    def generate_audio(self, message_id: str) -> None:
        """Ask the backend to synthesize and merge the audio for ``message_id``."""
        url = self.generate_url(message_id)
        logger.debug("generate_request", url=url, message_id=message_id)
        self._send(urllib.request.Request(url, data=b"", method="POST", headers=_headers()))

    def healthcheck(self) -> bool:
        try:
            self._send(urllib.request.Request(self.health_url(), headers=_headers()))
        except (NetworkFailure, ServerError):
            return False
        return True

    def _get_json(self, url: str) -> Any:
        body = self._send(urllib.request.Request(url, headers=_headers(accept="application/json")))
        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ParseFailure(f"response from {url} is not valid JSON") from exc

    def _send(self, request: urllib.request.Request) -> bytes:
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                return response.read()
        except urllib.error.HTTPError as exc:
            raise ServerError(
                f"{request.get_method()} {request.full_url} failed with HTTP {exc.code}",
                status=exc.code,
            ) from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise NetworkFailure(f"{request.get_method()} {request.full_url} failed: {exc}") from exc


def _quote_id(message_id: str) -> str:
    return urllib.parse.quote(message_id, safe="")


def _headers(accept: Optional[str] = None) -> dict:
    headers = {"User-Agent": USER_AGENT}
    if accept:
        headers["Accept"] = accept
    return headers
