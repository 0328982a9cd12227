import datetime

import pytest

from mailtts.exceptions import ParseFailure
from mailtts.models import (
    MAX_INTERNAL_DATE,
    MessageSummary,
    format_timestamp,
    parse_message,
    parse_message_list,
)


def _payload(message_id: str, internal_date="1700000000000") -> dict:
    return {
        "id": message_id,
        "from": "Alice <alice@example.com>",
        "subject": "Hello",
        "snippet": "Body preview that is long",
        "preview": "Body preview",
        "internalDate": internal_date,
    }


def test_parse_message_list_keeps_server_order() -> None:
    messages = parse_message_list({"messages": [_payload("b"), _payload("a"), _payload("c")]})
    assert [m.id for m in messages] == ["b", "a", "c"]
    assert messages[0].sender == "Alice <alice@example.com>"
    assert messages[0].snippet == "Body preview that is long"


def test_internal_date_accepts_number_or_numeric_text() -> None:
    from_text = parse_message_list({"messages": [_payload("a", "1700000000000")]})[0]
    from_number = parse_message_list({"messages": [_payload("a", 1700000000000)]})[0]
    assert from_text.internal_date == from_number.internal_date == 1700000000000


def test_null_or_missing_messages_is_empty() -> None:
    assert parse_message_list({"messages": None}) == []
    assert parse_message_list({}) == []


@pytest.mark.parametrize(
    "payload",
    [
        [],
        "messages",
        {"messages": "nope"},
        {"messages": [{"subject": "missing id", "internalDate": 1}]},
        {"messages": [_payload("a", "yesterday")]},
        {"messages": [_payload("")]},
    ],
)
def test_malformed_payload_raises_parse_failure(payload) -> None:
    with pytest.raises(ParseFailure):
        parse_message_list(payload)


def test_summary_is_immutable() -> None:
    message = MessageSummary(id="x", sender="s", subject="t", preview="p", internal_date=0)
    with pytest.raises(Exception):
        message.subject = "changed"  # type: ignore[misc]


def test_parse_message_returns_first_or_none() -> None:
    assert parse_message({"messages": [_payload("x"), _payload("y")]}).id == "x"
    assert parse_message({"messages": []}) is None


def test_format_timestamp_uses_local_time() -> None:
    expected = datetime.datetime.fromtimestamp(1700000000).strftime("%Y/%m/%d %H:%M:%S")
    assert format_timestamp(1700000000000) == expected


@pytest.mark.parametrize("internal_date", [-1, 10**17, str(MAX_INTERNAL_DATE + 1)])
def test_out_of_range_internal_date_raises_parse_failure(internal_date) -> None:
    with pytest.raises(ParseFailure):
        parse_message_list({"messages": [_payload("a", internal_date)]})


def test_format_timestamp_falls_back_to_raw_value() -> None:
    assert format_timestamp(10**17) == str(10**17)
