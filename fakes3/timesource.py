"""Sources of the current time."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

GMT = timezone(timedelta(0), "GMT")


class TimeSource(ABC):
    """Supplies the current time and elapsed durations."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time."""

    @abstractmethod
    def since(self, t: datetime) -> timedelta:
        """Return the time elapsed since ``t``."""


class FixedTimeSource(TimeSource):
    """A time source that stands still until advanced."""

    def __init__(self, at: datetime) -> None:
        self._time = at

    def now(self) -> datetime:
        return self._time

    def since(self, t: datetime) -> timedelta:
        return self._time - t

    def advance(self, by: timedelta) -> None:
        self._time = self._time + by


class DefaultTimeSource(TimeSource):
    """The wall clock, reported in the GMT zone S3 uses."""

    def now(self) -> datetime:
        return datetime.now(GMT)

    def since(self, t: datetime) -> timedelta:
        return datetime.now(timezone.utc) - t