"""Minimal logging targets with level filtering."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Iterable


class LogLevel(str, Enum):
    ERR = "ERR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"

    def __str__(self) -> str:
        return self.value


class Logger(ABC):
    """Target for log messages."""

    @abstractmethod
    def print(self, level: LogLevel, *args: Any) -> None:
        """Log ``args`` at ``level``."""


def _format(level: LogLevel, args: Iterable[Any]) -> str:
    return " ".join(str(v) for v in (level, *args))


def _level_filter(levels: tuple[LogLevel, ...]) -> frozenset[LogLevel] | None:
    return frozenset(LogLevel(lv) for lv in levels) if levels else None


class StdLog(Logger):
    """Writes one line per message to a text stream or a line callback.

    All levels are reported unless levels are given, which then act as a
    whitelist.
    """

    def __init__(self, output: Any, *levels: LogLevel) -> None:
        write = getattr(output, "write", None)
        if callable(write):
            self._emit: Callable[[str], Any] = lambda line: write(line + "\n")
        elif callable(output):
            self._emit = output
        else:
            raise TypeError("output must be a writable stream or a callable")
        self._levels = _level_filter(levels)

    def print(self, level: LogLevel, *args: Any) -> None:
        if self._levels is None or level in self._levels:
            self._emit(_format(level, args))


_LOGGING_LEVELS = {
    LogLevel.ERR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class _GlobalLog(Logger):
    def __init__(self, levels: tuple[LogLevel, ...]) -> None:
        self._levels = _level_filter(levels)
        self._logger = logging.getLogger("fakes3")

    def print(self, level: LogLevel, *args: Any) -> None:
        if self._levels is None or level in self._levels:
            self._logger.log(_LOGGING_LEVELS.get(level, logging.INFO), _format(level, args))


def global_log(*levels: LogLevel) -> Logger:
    """Logger that sends messages to the standard ``logging`` module."""
    return _GlobalLog(levels)


class DiscardLog(Logger):
    """Logger that drops every message."""

    def print(self, level: LogLevel, *args: Any) -> None:
        return None


class MultiLog(Logger):
    """Logger that forwards every message to several loggers."""

    def __init__(self, *loggers: Logger) -> None:
        self.loggers = list(loggers)

    def print(self, level: LogLevel, *args: Any) -> None:
        for logger in self.loggers:
            logger.print(level, *args)