"""Per-game stopwatch charging competitor calls against a time budget."""

from __future__ import annotations

import time
from collections.abc import Callable

TimeSource = Callable[[], float]


class GameTimer:
    """Cumulative stopwatch with a fixed per-game limit.

    Elapsed time only accrues between :meth:`start` and :meth:`stop` and is
    cleared only by :meth:`reset`. Uses monotonic time unless a different
    *time_source* is injected (tests use a manual clock).
    """

    __slots__ = ("_limit", "_time_source", "_elapsed", "_started_at")

    def __init__(self, limit_seconds: float, time_source: TimeSource | None = None) -> None:
        self._limit = limit_seconds
        self._time_source = time_source or time.monotonic
        self._elapsed: float = 0.0
        self._started_at: float | None = None

    @property
    def limit(self) -> float:
        return self._limit

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    @property
    def elapsed(self) -> float:
        if self._started_at is not None:
            return self._elapsed + (self._time_source() - self._started_at)
        return self._elapsed

    @property
    def remaining(self) -> float:
        return max(0.0, self._limit - self.elapsed)

    @property
    def is_expired(self) -> bool:
        """Has elapsed time gone strictly past the limit?"""
        return self.elapsed > self._limit

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = self._time_source()

    def stop(self) -> None:
        if self._started_at is not None:
            self._elapsed += self._time_source() - self._started_at
            self._started_at = None

    def reset(self) -> None:
        self._elapsed = 0.0
        self._started_at = None


class ManualClock:
    """Time source advanced explicitly; handy for deterministic timing."""

    __slots__ = ("now",)

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
