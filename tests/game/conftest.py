"""Competitor doubles shared by the game-layer tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence

import pytest

from salvo.core.enums import Orientation
from salvo.core.ship import Ship
from salvo.core.types import Coordinate
from salvo.game.clock import ManualClock
from salvo.game.config import MatchConfig
from salvo.game.player import Competitor


class LineCompetitor(Competitor):
    """Stacks ships along the left edge, one per row, and sweeps row-major.

    Every callback is recorded in ``calls``. When *clock* is given, each call
    listed in *costs* advances it by the configured number of seconds.
    """

    def __init__(
        self,
        name: str = "Line",
        *,
        clock: ManualClock | None = None,
        costs: dict[str, float] | None = None,
    ) -> None:
        super().__init__(name, "1.0")
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self._clock = clock
        self._costs = costs or {}
        self._targets: Iterator[Coordinate] = iter(())

    def _charge(self, method: str, *args: object) -> None:
        self.calls.append((method, args))
        cost = self._costs.get(method, 0.0)
        if self._clock is not None and cost:
            self._clock.advance(cost)

    def called(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def new_match(self, opponent_name: str) -> None:
        self._charge("new_match", opponent_name)

    def new_game(self, board_size: Coordinate, time_limit: float, rng_seed: int) -> None:
        super().new_game(board_size, time_limit, rng_seed)
        self._charge("new_game", board_size, time_limit, rng_seed)
        self._targets = iter(
            [Coordinate(x, y) for y in range(board_size.y) for x in range(board_size.x)]
        )

    def place_ships(self, ships: Sequence[Ship]) -> None:
        self._charge("place_ships", tuple(ships))
        for row, ship in enumerate(ships):
            ship.place(Coordinate(0, row), Orientation.HORIZONTAL)

    def get_shot(self) -> Coordinate:
        self._charge("get_shot")
        return next(self._targets)

    def opponent_shot(self, shot: Coordinate) -> None:
        self._charge("opponent_shot", shot)

    def shot_hit(self, shot: Coordinate, sunk: bool) -> None:
        self._charge("shot_hit", shot, sunk)

    def shot_miss(self, shot: Coordinate) -> None:
        self._charge("shot_miss", shot)

    def game_won(self) -> None:
        self._charge("game_won")

    def game_lost(self) -> None:
        self._charge("game_lost")

    def match_over(self) -> None:
        self._charge("match_over")


class ScriptedCompetitor(LineCompetitor):
    """LineCompetitor whose shots and placement can be overridden."""

    def __init__(
        self,
        name: str = "Scripted",
        *,
        shots: Sequence[Coordinate] = (),
        placer: Callable[[Sequence[Ship]], None] | None = None,
        **kwargs: object,
    ) -> None:
        super().__init__(name, **kwargs)  # type: ignore[arg-type]
        self._script = list(shots)
        self._placer = placer

    def place_ships(self, ships: Sequence[Ship]) -> None:
        if self._placer is None:
            super().place_ships(ships)
            return
        self._charge("place_ships", tuple(ships))
        self._placer(ships)

    def get_shot(self) -> Coordinate:
        if not self._script:
            return super().get_shot()
        self._charge("get_shot")
        return self._script.pop(0)


class BrokenCompetitor(LineCompetitor):
    """Raises from the named callback."""

    def __init__(self, name: str = "Broken", *, fails_in: str = "get_shot") -> None:
        super().__init__(name)
        self.fails_in = fails_in

    def _charge(self, method: str, *args: object) -> None:
        super()._charge(method, *args)
        if method == self.fails_in:
            raise RuntimeError(f"boom in {method}")


@pytest.fixture
def small_config() -> MatchConfig:
    """4x4 board with a single two-cell ship: games last a handful of turns."""
    return MatchConfig(
        field_width=4,
        field_height=4,
        ship_sizes=(2,),
        match_rounds=3,
        per_game_timeout=100.0,
    )


@pytest.fixture
def line_competitor() -> type[LineCompetitor]:
    return LineCompetitor


@pytest.fixture
def scripted_competitor() -> type[ScriptedCompetitor]:
    return ScriptedCompetitor


@pytest.fixture
def broken_competitor() -> type[BrokenCompetitor]:
    return BrokenCompetitor


class MeteredCompetitor(LineCompetitor):
    """Each call costs the next value from *costs*, then nothing."""

    def __init__(self, clock: ManualClock, costs: Sequence[float]) -> None:
        super().__init__("Metered", clock=clock)
        self._queue = list(costs)

    def _charge(self, method: str, *args: object) -> None:
        self.calls.append((method, args))
        if self._queue and self._clock is not None:
            self._clock.advance(self._queue.pop(0))


@pytest.fixture
def metered_competitor() -> type[MeteredCompetitor]:
    return MeteredCompetitor
