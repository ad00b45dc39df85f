"""Core enumerations for the naval-combat domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Orientation(IntEnum):
    """Direction a ship extends from its origin cell."""

    HORIZONTAL = 0
    VERTICAL = 1

    def __str__(self) -> str:
        return self.name.lower()


class ShotResult(StrEnum):
    """Classification of a shot against the target's fleet."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"

    @property
    def is_hit(self) -> bool:
        return self is not ShotResult.MISS


class GameMode(StrEnum):
    """Rule sets a match may request. Only ``CLASSIC`` is playable."""

    CLASSIC = "classic"
    SALVO = "salvo"
    MULTI = "multi"
    TEAMS = "teams"


class RoundMode(StrEnum):
    """How a match decides it is over."""

    ALL_ROUNDS = "all_rounds"  # exactly N rounds
    FIRST_TO = "first_to"  # first player to N wins
