"""Observability - loguru-based logging setup."""

from .logging import (
    CONSOLE_FORMAT,
    FILE_FORMAT,
    LogConfig,
    LogLevel,
    setup_logging,
    teardown_logging,
)

__all__ = [
    "LogConfig",
    "LogLevel",
    "CONSOLE_FORMAT",
    "FILE_FORMAT",
    "setup_logging",
    "teardown_logging",
]
