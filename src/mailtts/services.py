"""Service wrappers that separate UI logic from backend calls."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import structlog

from .api import MailApiClient
from .models import MessageSummary
from .query import SearchFilter
from .storage import audio_filename, save_resource

logger = structlog.get_logger()


class SearchService:
    def __init__(self, api: MailApiClient) -> None:
        self.api = api

    def fetch(self, search_filter: SearchFilter, max_results: int) -> List[MessageSummary]:
        query = search_filter.to_query()
        logger.info("list_fetch_started", query=query, max_results=max_results)
        messages = self.api.list_messages(query, max_results)
        logger.info("list_fetch_finished", count=len(messages))
        return messages

    def latest(self) -> Optional[MessageSummary]:
        return self.api.latest_message()


class DownloadService:
    """Generate-then-save sequence used where no event loop is running."""

    def __init__(self, api: MailApiClient) -> None:
        self.api = api

    def download(self, message_id: str, download_dir: Path) -> Path:
        logger.info("download_generating", message_id=message_id)
        self.api.generate_audio(message_id)
        target = Path(download_dir) / audio_filename(message_id)
        return save_resource(self.api.download_url(message_id), target, timeout=self.api.timeout)
