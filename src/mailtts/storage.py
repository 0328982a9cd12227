"""Saving generated audio resources to the local download folder."""

from __future__ import annotations

import http.client
import re
import urllib.error
import urllib.request
from pathlib import Path
from typing import Optional

import structlog

from .exceptions import NetworkFailure, ServerError

logger = structlog.get_logger()

CHUNK_SIZE = 1024 * 64
MAX_AUDIO_BYTES = 500 * 1024 * 1024

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_filename(value: str) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", value).strip().strip(".")
    return cleaned or "audio"


def audio_filename(message_id: str) -> str:
    return f"{sanitize_filename(message_id)}.mp3"


def save_resource(url: str, target: Path, *, timeout: Optional[float] = None) -> Path:
    """
    Stream ``url`` into ``target``, creating the parent folder when needed.

    A partial file is removed when the transfer fails.

    Raises:
        NetworkFailure: When the resource cannot be reached or the transfer breaks.
        ServerError: When the backend answers with a non-2xx status.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    request = urllib.request.Request(url, headers={"User-Agent": "mailtts-player"})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response, open(target, "wb") as out:
            bytes_written = 0
            while True:
                chunk = response.read(CHUNK_SIZE)
                if not chunk:
                    break
                out.write(chunk)
                bytes_written += len(chunk)
                if bytes_written > MAX_AUDIO_BYTES:
                    raise NetworkFailure("Audio exceeded the download size limit.")
    except urllib.error.HTTPError as exc:
        target.unlink(missing_ok=True)
        raise ServerError(f"GET {url} failed with HTTP {exc.code}", status=exc.code) from exc
    except NetworkFailure:
        target.unlink(missing_ok=True)
        raise
    except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
        target.unlink(missing_ok=True)
        raise NetworkFailure(f"GET {url} failed: {exc}") from exc
    logger.info("audio_saved", url=url, path=str(target), size=bytes_written)
    return target
