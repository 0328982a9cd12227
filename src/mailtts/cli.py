"""Async wrapper around the backend client to expose a simple CLI."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from . import DownloadService, MailApiClient, MessageSummary, SearchFilter, SearchService, format_timestamp
from .config import load_defaults
from .exceptions import MailApiError
from .log import configure_logging

logger = structlog.get_logger()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = load_defaults()
    parser = argparse.ArgumentParser(description="Browse mail and fetch its synthesized audio")
    parser.add_argument("--api-base", default=defaults.api_base, help="Backend origin, e.g. http://localhost:8080.")
    parser.add_argument("--timeout", type=float, default=defaults.request_timeout, help="Request timeout in seconds (default: none).")
    parser.add_argument("--check", action="store_true", help="Check the backend health endpoint before running the command.")
    parser.add_argument("--log-level", default=defaults.log_level, help="structlog filtering level.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List messages matching the filters.")
    list_parser.add_argument("--from", dest="sender", default=defaults.default_from, help="Sender filter.")
    list_parser.add_argument("--title", default=defaults.default_title, help="Subject words; each word becomes its own clause.")
    list_parser.add_argument("--max", dest="max_results", type=int, default=defaults.max_results, help="Maximum number of messages.")

    subparsers.add_parser("latest", help="Show the most recent inbox message.")

    download_parser = subparsers.add_parser("download", help="Generate the audio for a message and save it.")
    download_parser.add_argument("message_id", help="Message id as printed by 'list'.")
    download_parser.add_argument("--download-dir", type=Path, default=defaults.download_dir, help="Where to store the mp3.")

    stream_parser = subparsers.add_parser("stream-url", help="Print the streaming endpoint for a message.")
    stream_parser.add_argument("message_id", help="Message id as printed by 'list'.")
    return parser.parse_args(argv)


def _print_messages(messages: List[MessageSummary]) -> None:
    if not messages:
        print("No messages found.")
        return
    for message in messages:
        print(f"{message.id}  {format_timestamp(message.internal_date)}")
        print(f"  From:    {message.sender}")
        print(f"  Subject: {message.subject}")
        if message.preview:
            print(f"  {message.preview}")
    print(f"Listed {len(messages)} messages.")


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    api = MailApiClient(args.api_base, timeout=args.timeout)

    try:
        if args.check and not await asyncio.to_thread(api.healthcheck):
            print(f"Backend at {api.base_url} is not responding.", file=sys.stderr)
            return 1

        if args.command == "list":
            search_filter = SearchFilter(sender=args.sender, title=args.title)
            messages = await asyncio.to_thread(SearchService(api).fetch, search_filter, args.max_results)
            _print_messages(messages)
        elif args.command == "latest":
            message = await asyncio.to_thread(SearchService(api).latest)
            _print_messages([message] if message else [])
        elif args.command == "download":
            path = await asyncio.to_thread(DownloadService(api).download, args.message_id, args.download_dir)
            print(f"Saved {path}")
        elif args.command == "stream-url":
            print(api.stream_url(args.message_id))
    except MailApiError as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def cli_main() -> None:
    sys.exit(asyncio.run(main()))


__all__ = ["main", "cli_main", "parse_args"]
