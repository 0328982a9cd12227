"""Top-level exports for the MailTTS player package."""

from .api import MailApiClient
from .config import ClientDefaults, load_defaults
from .exceptions import (
    ConfigurationError,
    MailApiError,
    MailTTSError,
    NetworkFailure,
    ParseFailure,
    ServerError,
)
from .models import MessageSummary, format_timestamp, parse_message_list
from .query import SearchFilter, build_query
from .services import DownloadService, SearchService
from .storage import audio_filename, sanitize_filename, save_resource

__all__ = [
    "ClientDefaults",
    "load_defaults",
    "MailApiClient",
    "MailTTSError",
    "MailApiError",
    "NetworkFailure",
    "ServerError",
    "ParseFailure",
    "ConfigurationError",
    "MessageSummary",
    "format_timestamp",
    "parse_message_list",
    "SearchFilter",
    "build_query",
    "SearchService",
    "DownloadService",
    "audio_filename",
    "sanitize_filename",
    "save_resource",
]
