"""Abstract interfaces and state enums for the game layer.

Follows Dependency Inversion: ``ControllerAdapter`` and ``Round`` depend on
:class:`ICompetitor`, never on a concrete competitor implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import IntEnum, StrEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from salvo.core.ship import Ship
    from salvo.core.types import Coordinate


# ── Round FSM states ─────────────────────────────────────────────────────────


class RoundPhase(IntEnum):
    """Finite-state-machine states for a single game."""

    SETUP = auto()
    PLACEMENT = auto()
    SHOOTING = auto()
    RESOLVED = auto()


class CallOutcome(IntEnum):
    """What happened when the adapter called into a competitor."""

    OK = 0
    TIMED_OUT = auto()  # per-game time budget exhausted
    FAULTED = auto()  # competitor raised

    @property
    def is_forfeit(self) -> bool:
        return self is not CallOutcome.OK


class EliminationReason(StrEnum):
    """Why a player left a round."""

    FLEET_SUNK = "fleet_sunk"
    TIMED_OUT = "timed_out"
    FAULTED = "faulted"
    INVALID_PLACEMENT = "invalid_placement"

    @classmethod
    def from_outcome(cls, outcome: CallOutcome) -> EliminationReason:
        if outcome is CallOutcome.TIMED_OUT:
            return cls.TIMED_OUT
        return cls.FAULTED


# ── Competitor contract ──────────────────────────────────────────────────────


class ICompetitor(ABC):
    """Capability set every competitor implementation must satisfy.

    All calls arrive on the thread that drives the match. Each call is timed
    against the competitor's per-game budget.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def version(self) -> str: ...

    @abstractmethod
    def new_match(self, opponent_name: str) -> None:
        """A match against *opponent_name* is about to begin."""

    @abstractmethod
    def new_game(self, board_size: Coordinate, time_limit: float, rng_seed: int) -> None:
        """A new game begins on a board of *board_size* (width, height)."""

    @abstractmethod
    def place_ships(self, ships: Sequence[Ship]) -> None:
        """Place every ship in *ships* via :meth:`Ship.place`."""

    @abstractmethod
    def get_shot(self) -> Coordinate:
        """Return the next cell to fire at."""

    @abstractmethod
    def opponent_shot(self, shot: Coordinate) -> None:
        """The opponent fired at *shot* on this competitor's board."""

    @abstractmethod
    def shot_hit(self, shot: Coordinate, sunk: bool) -> None:
        """This competitor's shot hit a ship; *sunk* if it was the last cell."""

    @abstractmethod
    def shot_miss(self, shot: Coordinate) -> None:
        """This competitor's shot missed."""

    @abstractmethod
    def game_won(self) -> None: ...

    @abstractmethod
    def game_lost(self) -> None: ...

    @abstractmethod
    def match_over(self) -> None: ...
