"""Typed records for the backend's message listing."""

from __future__ import annotations

import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ParseFailure

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
# 9999-12-31T23:59:59.999Z, the last instant datetime can represent.
MAX_INTERNAL_DATE = 253402300799999


class MessageSummary(BaseModel):
    """Light representation of one mail returned by ``GET /messages``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    sender: str = Field(default="", alias="from")
    subject: str = ""
    preview: str = ""
    snippet: str = ""
    internal_date: int = Field(alias="internalDate", ge=0, le=MAX_INTERNAL_DATE)

    @field_validator("internal_date", mode="before")
    @classmethod
    def _coerce_epoch_millis(cls, value: Any) -> Any:
        # Gmail hands the value out as a string; the backend re-encodes it as a number.
        if isinstance(value, str):
            return int(value.strip())
        return value


class MessageListResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    messages: List[MessageSummary] = Field(default_factory=list)

    @field_validator("messages", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def parse_message_list(payload: Any) -> List[MessageSummary]:
    """Validate a decoded ``{"messages": [...]}`` body, preserving server order."""
    if not isinstance(payload, dict):
        raise ParseFailure("message list response must be a JSON object")
    try:
        return list(MessageListResponse.model_validate(payload).messages)
    except (ValidationError, ValueError) as exc:
        raise ParseFailure(f"malformed message list: {exc}") from exc


def parse_message(payload: Any) -> Optional[MessageSummary]:
    messages = parse_message_list(payload)
    return messages[0] if messages else None


def format_timestamp(internal_date: int) -> str:
    try:
        return datetime.datetime.fromtimestamp(internal_date / 1000).strftime(TIMESTAMP_FORMAT)
    except (ValueError, OverflowError, OSError):
        return str(internal_date)
