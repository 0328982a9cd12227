"""Custom exceptions raised by the MailTTS client."""

from __future__ import annotations

from typing import Optional


class MailTTSError(Exception):
    """Base exception for all MailTTS client errors."""


class ConfigurationError(MailTTSError):
    """Raised when an environment value cannot be interpreted."""


class MailApiError(MailTTSError):
    """Base exception for failures talking to the mail/audio backend."""


class NetworkFailure(MailApiError):
    """The request never produced an HTTP response."""


class ServerError(MailApiError):
    """The backend answered with a non-success status."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ParseFailure(MailApiError):
    """The response body was not the JSON shape we expect."""
