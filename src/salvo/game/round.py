"""Round — the state machine of a single game.

``SETUP -> PLACEMENT -> SHOOTING -> RESOLVED``. Players are seated in the
order given. Turns rotate over the players still in the round, starting at
``first_seat``; a shooter always fires at the next surviving seat after its
own. A player leaves the round when its fleet is sunk or when it forfeits
(timeout, fault or invalid placement). The last player standing wins; if
nobody survives placement the round is a draw.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from salvo.core.enums import ShotResult
from salvo.core.ship import Ship
from salvo.core.types import Coordinate
from salvo.game.events import EventKind
from salvo.game.interfaces import EliminationReason, RoundPhase

if TYPE_CHECKING:
    from salvo.game.adapter import ControllerAdapter
    from salvo.game.config import MatchConfig
    from salvo.game.events import EventLog

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ShotRecord:
    """A single resolved shot."""

    turn: int
    shooter_id: int
    target_id: int
    coord: Coordinate
    result: ShotResult


@dataclass(frozen=True, slots=True)
class RoundOutcome:
    """Terminal result of a round.

    ``winner_id`` is None for a draw. ``eliminations`` maps every losing
    player to the reason it left the round, in elimination order.
    """

    round_id: int
    winner_id: int | None
    loser_ids: tuple[int, ...]
    eliminations: Mapping[int, EliminationReason] = field(
        default_factory=lambda: MappingProxyType({})
    )
    turns: int = 0

    @property
    def is_draw(self) -> bool:
        return self.winner_id is None

    @property
    def timed_out(self) -> bool:
        """Did any player lose this round by running out of time?"""
        return EliminationReason.TIMED_OUT in self.eliminations.values()


class Round:
    """Plays one game between two or more adapters.

    Args:
        round_id: 1-based round number used to tag events.
        adapters: Participants, in seating order.
        config: Match constants (board size, ship sizes).
        events: Log receiving this round's events.
        first_seat: Index into *adapters* of the player who shoots first.
    """

    __slots__ = (
        "_round_id",
        "_adapters",
        "_config",
        "_events",
        "_first_seat",
        "_phase",
        "_turn",
        "_active",
        "_eliminations",
        "_shots",
        "_outcome",
    )

    def __init__(
        self,
        round_id: int,
        adapters: Sequence[ControllerAdapter],
        config: MatchConfig,
        events: EventLog,
        first_seat: int = 0,
    ) -> None:
        if len(adapters) < 2:
            raise ValueError("A round needs at least two players")
        self._round_id = round_id
        self._adapters = tuple(adapters)
        self._config = config
        self._events = events
        self._first_seat = first_seat % len(self._adapters)
        self._phase = RoundPhase.SETUP
        self._turn = 0
        self._active: list[ControllerAdapter] = list(self._adapters)
        self._eliminations: dict[int, EliminationReason] = {}
        self._shots: list[ShotRecord] = []
        self._outcome: RoundOutcome | None = None

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def round_id(self) -> int:
        return self._round_id

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def turn(self) -> int:
        return self._turn

    @property
    def shots(self) -> tuple[ShotRecord, ...]:
        return tuple(self._shots)

    @property
    def outcome(self) -> RoundOutcome | None:
        return self._outcome

    @property
    def is_resolved(self) -> bool:
        return self._phase == RoundPhase.RESOLVED

    # ── Driving ──────────────────────────────────────────────────────────

    def play(self) -> RoundOutcome:
        """Run every phase to completion and return the outcome."""
        if self._outcome is not None:
            return self._outcome

        self._events.append(
            EventKind.ROUND_BEGIN,
            round_id=self._round_id,
            players=tuple(a.player_id for a in self._adapters),
            first_player_id=self._adapters[self._first_seat].player_id,
        )
        self._setup()
        if len(self._active) > 1:
            self._phase = RoundPhase.PLACEMENT
            self._placement()
        if len(self._active) > 1:
            self._phase = RoundPhase.SHOOTING
            self._shooting()
        return self._resolve()

    def _setup(self) -> None:
        for adapter in self._adapters:
            outcome = adapter.new_game(self._round_id)
            if outcome.is_forfeit:
                self._eliminate(adapter, EliminationReason.from_outcome(outcome))

    def _placement(self) -> None:
        for adapter in list(self._active):
            ships = [Ship(length) for length in self._config.ship_sizes]
            outcome = adapter.place_ships(ships)
            if outcome.is_forfeit:
                self._eliminate(adapter, EliminationReason.from_outcome(outcome))
                continue
            if not adapter.ships_ready():
                _LOGGER.warning("%s placed its ships illegally", adapter)
                self._eliminate(adapter, EliminationReason.INVALID_PLACEMENT)
                continue

            # Competitors keep the originals; later edits must not move the fleet.
            adapter.state.ships = [ship.copy() for ship in ships]
            self._events.append(
                EventKind.SHIPS_PLACED,
                round_id=self._round_id,
                player_id=adapter.player_id,
                ships=tuple(ship.cells for ship in adapter.state.ships),
            )

    def _shooting(self) -> None:
        shooter = self._adapters[self._first_seat]
        if shooter not in self._active:
            shooter = self._next_active(shooter)

        while len(self._active) > 1:
            target = self._next_active(shooter)
            self._take_turn(shooter, target)
            if len(self._active) <= 1:
                break
            shooter = self._next_active(shooter)

    def _take_turn(self, shooter: ControllerAdapter, target: ControllerAdapter) -> None:
        self._turn += 1
        shot = shooter.get_shot(target.player_id)
        if shooter.forfeit is not None:
            self._eliminate(shooter, EliminationReason.from_outcome(shooter.forfeit))
            return

        result = target.state.receive_shot(shot)
        self._shots.append(
            ShotRecord(self._turn, shooter.player_id, target.player_id, shot, result)
        )
        self._events.append(
            EventKind.SHOT_FIRED,
            round_id=self._round_id,
            player_id=shooter.player_id,
            target_id=target.player_id,
            coord=shot,
            turn=self._turn,
        )
        self._events.append(
            EventKind.SHOT_RESULT,
            round_id=self._round_id,
            player_id=shooter.player_id,
            target_id=target.player_id,
            coord=shot,
            result=result,
        )
        _LOGGER.debug("Turn %d: %s fired at %s -> %s", self._turn, shooter, shot, result)

        target_outcome = target.opponent_shot(shot)
        if result.is_hit:
            shooter_outcome = shooter.shot_hit(shot, result is ShotResult.SUNK)
        else:
            shooter_outcome = shooter.shot_miss(shot)

        if not target.state.is_alive:
            self._eliminate(target, EliminationReason.FLEET_SUNK)
        elif target_outcome.is_forfeit:
            self._eliminate(target, EliminationReason.from_outcome(target_outcome))
        # A shooter that just sank the last opposing fleet has already won.
        if shooter_outcome.is_forfeit and len(self._active) > 1:
            self._eliminate(shooter, EliminationReason.from_outcome(shooter_outcome))

    def _resolve(self) -> RoundOutcome:
        self._phase = RoundPhase.RESOLVED
        winner = self._active[0] if len(self._active) == 1 else None
        if winner is not None:
            winner.state.score += 1

        outcome = RoundOutcome(
            round_id=self._round_id,
            winner_id=winner.player_id if winner is not None else None,
            loser_ids=tuple(self._eliminations),
            eliminations=MappingProxyType(dict(self._eliminations)),
            turns=self._turn,
        )
        self._outcome = outcome

        for adapter in self._adapters:
            if adapter is winner:
                adapter.game_won()
            else:
                adapter.game_lost()

        self._events.append(
            EventKind.ROUND_END,
            round_id=self._round_id,
            player_id=outcome.winner_id,
            winner_id=outcome.winner_id,
            loser_ids=outcome.loser_ids,
            reasons=outcome.eliminations,
            turns=outcome.turns,
        )
        if winner is None:
            _LOGGER.info("Round %d ended in a draw", self._round_id)
        else:
            _LOGGER.info(
                "Round %d won by %s after %d turns", self._round_id, winner, self._turn
            )
        return outcome

    # ── Helpers ──────────────────────────────────────────────────────────

    def _next_active(self, adapter: ControllerAdapter) -> ControllerAdapter:
        """Next player still in the round, after *adapter* in seating order."""
        seats = len(self._adapters)
        start = self._adapters.index(adapter)
        for offset in range(1, seats + 1):
            candidate = self._adapters[(start + offset) % seats]
            if candidate in self._active:
                return candidate
        return adapter

    def _eliminate(self, adapter: ControllerAdapter, reason: EliminationReason) -> None:
        if adapter not in self._active:
            return
        self._active.remove(adapter)
        self._eliminations[adapter.player_id] = reason
        self._events.append(
            EventKind.PLAYER_DEFEATED,
            round_id=self._round_id,
            player_id=adapter.player_id,
            reason=reason,
        )

