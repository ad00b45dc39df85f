"""Append-only, sequence-numbered event log.

The log is the single consistency-safe read surface for anything running on
another thread than the match driver: appended events are immutable and are
never removed, so snapshots taken at any time are stable.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

_LOGGER = logging.getLogger(__name__)

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class EventKind(StrEnum):
    """Tag of an :class:`Event`."""

    MATCH_BEGIN = "match_begin"
    MATCH_END = "match_end"
    PLAYER_ADDED = "player_added"
    ROUND_BEGIN = "round_begin"
    SHIPS_PLACED = "ships_placed"
    SHOT_FIRED = "shot_fired"
    SHOT_RESULT = "shot_result"
    PLAYER_TIMED_OUT = "player_timed_out"
    PLAYER_FAULTED = "player_faulted"
    PLAYER_DEFEATED = "player_defeated"
    ROUND_END = "round_end"
    ACCOLADE = "accolade"


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable record of one state transition.

    ``match_id``, ``round_id`` and ``player_id`` correlate the event with the
    match, round (1-based, None outside rounds) and player it concerns.
    ``data`` is a read-only mapping of kind-specific details.
    """

    seq: int
    kind: EventKind
    match_id: str
    round_id: int | None = None
    player_id: int | None = None
    data: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventCallback = Callable[[Event], None]


class EventLog:
    """Ordered, append-only event store with synchronous subscribers.

    Producers append from the thread that currently runs the match.
    Subscribers are called on that thread, in subscription order, once per
    event and in sequence-number order; a slow subscriber delays the match.
    """

    __slots__ = ("_match_id", "_events", "_lock", "_next_seq", "subscribers")

    def __init__(self, match_id: str) -> None:
        self._match_id = match_id
        self._events: list[Event] = []
        self._lock = threading.Lock()
        self._next_seq = 1
        self.subscribers: list[EventCallback] = []

    @property
    def match_id(self) -> str:
        return self._match_id

    # ── Writing ──────────────────────────────────────────────────────────

    def append(
        self,
        kind: EventKind,
        *,
        round_id: int | None = None,
        player_id: int | None = None,
        **data: Any,
    ) -> Event:
        """Create the next event, store it and deliver it to subscribers."""
        with self._lock:
            event = Event(
                seq=self._next_seq,
                kind=kind,
                match_id=self._match_id,
                round_id=round_id,
                player_id=player_id,
                data=MappingProxyType(data) if data else _EMPTY,
            )
            self._next_seq += 1
            self._events.append(event)
        # Single writer: delivery order follows append order without the lock.
        for callback in list(self.subscribers):
            try:
                callback(event)
            except Exception:
                _LOGGER.exception(
                    "Event subscriber %r failed on %s #%d",
                    callback,
                    event.kind,
                    event.seq,
                )
        return event

    def subscribe(self, callback: EventCallback) -> None:
        self.subscribers.append(callback)

    def unsubscribe(self, callback: EventCallback) -> None:
        if callback in self.subscribers:
            self.subscribers.remove(callback)

    # ── Reading ──────────────────────────────────────────────────────────

    def snapshot(self) -> tuple[Event, ...]:
        with self._lock:
            return tuple(self._events)

    def since(self, seq: int) -> tuple[Event, ...]:
        """Events whose sequence number is greater than *seq*."""
        with self._lock:
            # seq numbers are dense and start at 1.
            return tuple(self._events[max(0, seq) :])

    def of_kind(self, *kinds: EventKind) -> tuple[Event, ...]:
        wanted = set(kinds)
        return tuple(e for e in self.snapshot() if e.kind in wanted)

    def for_round(self, round_id: int) -> tuple[Event, ...]:
        return tuple(e for e in self.snapshot() if e.round_id == round_id)

    @property
    def last(self) -> Event | None:
        with self._lock:
            return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.snapshot())
