"""Convenience base class for competitor implementations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from salvo.game.interfaces import ICompetitor

if TYPE_CHECKING:
    from salvo.core.ship import Ship
    from salvo.core.types import Coordinate


class Competitor(ICompetitor):
    """Competitor with no-op notifications.

    Subclasses must implement :meth:`place_ships` and :meth:`get_shot`; every
    other callback may be overridden as needed. The board size, time limit and
    seed of the current game are kept on the instance by :meth:`new_game`.

    Args:
        name: Display name.
        version: Version string reported alongside the name.
    """

    def __init__(self, name: str = "", version: str = "1.0") -> None:
        self._name = name or type(self).__name__
        self._version = version
        self.board_size: Coordinate | None = None
        self.time_limit: float = 0.0
        self.rng_seed: int = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    def new_match(self, opponent_name: str) -> None:
        pass

    def new_game(self, board_size: Coordinate, time_limit: float, rng_seed: int) -> None:
        self.board_size = board_size
        self.time_limit = time_limit
        self.rng_seed = rng_seed

    def place_ships(self, ships: Sequence[Ship]) -> None:
        raise NotImplementedError

    def get_shot(self) -> Coordinate:
        raise NotImplementedError

    def opponent_shot(self, shot: Coordinate) -> None:
        pass

    def shot_hit(self, shot: Coordinate, sunk: bool) -> None:
        pass

    def shot_miss(self, shot: Coordinate) -> None:
        pass

    def game_won(self) -> None:
        pass

    def game_lost(self) -> None:
        pass

    def match_over(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._version!r})"
