"""structlog setup shared by the CLI and the GUI entry points."""

from __future__ import annotations

import logging

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str = "INFO") -> None:
    name = level.upper()
    if name not in LOG_LEVELS:
        name = "INFO"
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, name)),
    )
