"""Configuration helpers that read runtime defaults from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

PACKAGE_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_API_BASE = "http://localhost:8080"
DEFAULT_MAX_RESULTS = 5
DEFAULT_TITLE = "週刊Life is beautiful"


def _guess_user_root() -> Path:
    cwd = Path.cwd().resolve()
    if (cwd / ".env").exists():
        return cwd
    return PACKAGE_ROOT


USER_ROOT = _guess_user_root()

if os.getenv("MAILTTS_SKIP_DOTENV") != "1":
    load_dotenv(dotenv_path=USER_ROOT / ".env")


def _env_path(env_var: str, fallback: Path) -> Path:
    value = os.getenv(env_var)
    if not value:
        return fallback
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return candidate
    return (USER_ROOT / candidate).resolve()


def _env_int(env_var: str, default: int) -> int:
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigurationError(f"{env_var} must be positive, got {parsed}")
    return parsed


def _env_timeout(env_var: str) -> Optional[float]:
    value = os.getenv(env_var)
    if value is None or not value.strip():
        return None
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{env_var} must be a number of seconds, got {value!r}") from exc
    return parsed if parsed > 0 else None


@dataclass(frozen=True)
class ClientDefaults:
    api_base: str
    max_results: int
    download_dir: Path
    default_from: str
    default_title: str
    request_timeout: Optional[float]
    log_level: str


def load_defaults() -> ClientDefaults:
    return ClientDefaults(
        api_base=os.getenv("MAILTTS_API_BASE", DEFAULT_API_BASE).rstrip("/"),
        max_results=_env_int("MAILTTS_MAX_RESULTS", DEFAULT_MAX_RESULTS),
        download_dir=_env_path("MAILTTS_DOWNLOAD_DIR", Path.cwd() / "downloads"),
        default_from=os.getenv("MAILTTS_DEFAULT_FROM", ""),
        default_title=os.getenv("MAILTTS_DEFAULT_TITLE", DEFAULT_TITLE),
        request_timeout=_env_timeout("MAILTTS_REQUEST_TIMEOUT"),
        log_level=os.getenv("MAILTTS_LOG_LEVEL", "INFO").upper(),
    )
