"""ControllerAdapter — the boundary between the match and untrusted competitors.

Every call into a competitor is timed against a cumulative per-game budget and
guarded against exceptions. Once a competitor has timed out or raised, it has
forfeited: gameplay calls for the rest of the game return the forfeit outcome
without reaching the competitor again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from salvo.core.types import FORFEIT_SHOT, Coordinate
from salvo.game.clock import GameTimer, TimeSource
from salvo.game.events import EventKind
from salvo.game.interfaces import CallOutcome, ICompetitor

if TYPE_CHECKING:
    from salvo.core.ship import Ship
    from salvo.game.config import MatchConfig
    from salvo.game.events import EventLog
    from salvo.game.state import PlayerState

_LOGGER = logging.getLogger(__name__)


class ControllerAdapter:
    """Binds one competitor to one :class:`PlayerState` and times it.

    Args:
        competitor: The wrapped implementation.
        state: Record this adapter mutates (ships, shots).
        config: Board size, ship sizes, time limit and seed of the match.
        events: Log receiving timeout/fault events; optional.
        time_source: Clock used for timing, ``time.monotonic`` by default.
    """

    __slots__ = (
        "_competitor",
        "_state",
        "_config",
        "_events",
        "_timer",
        "_forfeit",
        "_round_id",
    )

    def __init__(
        self,
        competitor: ICompetitor,
        state: PlayerState,
        config: MatchConfig,
        events: EventLog | None = None,
        time_source: TimeSource | None = None,
    ) -> None:
        self._competitor = competitor
        self._state = state
        self._config = config
        self._events = events
        self._timer = GameTimer(config.per_game_timeout, time_source)
        self._forfeit: CallOutcome | None = None
        self._round_id: int | None = None

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def competitor(self) -> ICompetitor:
        return self._competitor

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def player_id(self) -> int:
        return self._state.player_id

    @property
    def elapsed(self) -> float:
        """Seconds charged against this competitor in the current game."""
        return self._timer.elapsed

    @property
    def forfeit(self) -> CallOutcome | None:
        """``TIMED_OUT``/``FAULTED`` once the competitor forfeited this game."""
        return self._forfeit

    @property
    def ran_out_of_time(self) -> bool:
        return self._timer.is_expired

    # ── Lifecycle ────────────────────────────────────────────────────────

    def new_match(self, opponent_name: str) -> CallOutcome:
        """Introduce the opponents. Timed, but outside any game nothing is forfeited."""
        outcome = self._notify("new_match", self._competitor.new_match, opponent_name)
        if outcome is CallOutcome.TIMED_OUT:
            _LOGGER.warning("%s overran its time budget in new_match", self)
        return outcome

    def new_game(self, round_id: int | None = None) -> CallOutcome:
        """Reset the time budget and shot record, then notify the competitor.

        This is the only place the per-game timer is reset.
        """
        self._timer.reset()
        self._forfeit = None
        self._round_id = round_id
        self._state.reset_round()
        return self._call(
            "new_game",
            self._competitor.new_game,
            self._config.board_size,
            self._config.per_game_timeout,
            self._config.rng_seed,
        )

    def place_ships(self, ships: Sequence[Ship]) -> CallOutcome:
        """Hand *ships* to the competitor to position them in place."""
        self._state.ships = list(ships)
        return self._call("place_ships", self._competitor.place_ships, tuple(ships))

    def ships_ready(self) -> bool:
        """All ships placed, on the board and pairwise non-overlapping."""
        ships = self._state.ships
        board_size = self._config.board_size
        for i, ship in enumerate(ships):
            if not ship.is_valid(board_size):
                return False
            for other in ships[i + 1 :]:
                if ship.conflicts_with(other):
                    return False
        return True

    # ── Shooting ─────────────────────────────────────────────────────────

    def get_shot(self, target_id: int | None = None) -> Coordinate:
        """Ask for a new shot at *target_id*, re-asking on repeats.

        A shot repeats when it was already fired at the same target this game.
        Negative components are clamped to zero. Every attempt is charged to
        the time budget, so a competitor stuck on a repeated cell eventually
        times out. Returns :data:`FORFEIT_SHOT` after a forfeit.
        """
        while True:
            outcome, shot = self._invoke("get_shot", self._competitor.get_shot)
            if outcome.is_forfeit:
                return FORFEIT_SHOT

            if not isinstance(shot, Coordinate):
                self._mark_forfeit(
                    CallOutcome.FAULTED,
                    f"get_shot returned {type(shot).__name__}, not Coordinate",
                )
                return FORFEIT_SHOT

            shot = shot.clamped()
            if self._state.has_shot(shot, target_id):
                _LOGGER.debug("%s repeated shot %s, asking again", self, shot)
                continue

            self._state.record_shot(shot, target_id)
            return shot

    def opponent_shot(self, shot: Coordinate) -> CallOutcome:
        return self._call("opponent_shot", self._competitor.opponent_shot, shot)

    def shot_hit(self, shot: Coordinate, sunk: bool) -> CallOutcome:
        return self._call("shot_hit", self._competitor.shot_hit, shot, sunk)

    def shot_miss(self, shot: Coordinate) -> CallOutcome:
        return self._call("shot_miss", self._competitor.shot_miss, shot)

    # ── End-of-game notifications (best effort) ──────────────────────────

    def game_won(self) -> None:
        self._notify("game_won", self._competitor.game_won)

    def game_lost(self) -> None:
        self._notify("game_lost", self._competitor.game_lost)

    def match_over(self) -> None:
        self._notify("match_over", self._competitor.match_over)

    # ── Internal ─────────────────────────────────────────────────────────

    def _call(self, method: str, fn: Callable[..., Any], *args: Any) -> CallOutcome:
        return self._invoke(method, fn, *args)[0]

    def _invoke(
        self, method: str, fn: Callable[..., Any], *args: Any
    ) -> tuple[CallOutcome, Any]:
        """Run one timed gameplay call unless the competitor already forfeited."""
        if self._forfeit is not None:
            return self._forfeit, None

        self._timer.start()
        try:
            result = fn(*args)
        except Exception:
            self._timer.stop()
            _LOGGER.exception("%s raised in %s", self, method)
            self._mark_forfeit(CallOutcome.FAULTED, f"raised in {method}")
            return CallOutcome.FAULTED, None
        self._timer.stop()

        if self._timer.is_expired:
            self._mark_forfeit(CallOutcome.TIMED_OUT, f"timed out in {method}")
            return CallOutcome.TIMED_OUT, None
        return CallOutcome.OK, result

    def _notify(self, method: str, fn: Callable[..., Any], *args: Any) -> CallOutcome:
        """Deliver a call whose outcome is reported but never forfeits."""
        self._timer.start()
        try:
            fn(*args)
        except Exception:
            _LOGGER.exception("%s raised in %s", self, method)
            return CallOutcome.FAULTED
        finally:
            self._timer.stop()
        if self._timer.is_expired:
            return CallOutcome.TIMED_OUT
        return CallOutcome.OK

    def _mark_forfeit(self, outcome: CallOutcome, detail: str) -> None:
        self._forfeit = outcome
        if outcome is CallOutcome.TIMED_OUT:
            _LOGGER.warning(
                "%s %s (%.3fs of %.3fs)",
                self,
                detail,
                self._timer.elapsed,
                self._timer.limit,
            )
            kind = EventKind.PLAYER_TIMED_OUT
        else:
            _LOGGER.warning("%s forfeits: %s", self, detail)
            kind = EventKind.PLAYER_FAULTED
        if self._events is not None:
            self._events.append(
                kind,
                round_id=self._round_id,
                player_id=self.player_id,
                detail=detail,
                elapsed=self._timer.elapsed,
            )

    def __str__(self) -> str:
        return self._state.label

    def __repr__(self) -> str:
        return f"ControllerAdapter({self._state.label!r}, id={self.player_id})"
