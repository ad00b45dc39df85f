"""Match — the orchestrator of a sequence of rounds.

Owns the registered players, the completed rounds, the termination policy and
the event log. Rounds are advanced either manually with :meth:`Match.play_round`
or in the background by the match's :class:`~salvo.game.driver.Driver`.
"""

from __future__ import annotations

import logging
import random
import threading
import uuid
from types import MappingProxyType
from typing import TYPE_CHECKING

from salvo.core.enums import GameMode, RoundMode
from salvo.game.adapter import ControllerAdapter
from salvo.game.driver import Driver
from salvo.game.errors import ConfigurationError, InvalidOperationError
from salvo.game.events import EventKind, EventLog
from salvo.game.round import Round, RoundOutcome
from salvo.game.state import PlayerState

if TYPE_CHECKING:
    from salvo.game.clock import TimeSource
    from salvo.game.config import MatchConfig
    from salvo.game.interfaces import ICompetitor

_LOGGER = logging.getLogger(__name__)

_SUPPORTED_MODES = frozenset({GameMode.CLASSIC})


class Match:
    """Plays rounds between registered competitors until the policy is met.

    Thread-safety: while the driver runs, only its thread may advance the
    match. Other threads should read progress from :attr:`events`, the only
    surface that is never torn mid-round.

    Args:
        config: Match constants; validated before anything else happens.
        match_id: Correlation id stamped on every event (random by default).
        time_source: Clock used to time competitors (``time.monotonic``).
    """

    def __init__(
        self,
        config: MatchConfig,
        *,
        match_id: str | None = None,
        time_source: TimeSource | None = None,
    ) -> None:
        unsupported = [m for m in config.game_modes if m not in _SUPPORTED_MODES]
        if unsupported:
            names = ", ".join(str(m) for m in unsupported)
            raise ConfigurationError(f"Unsupported game mode(s): {names}")

        self._config = config
        self._match_id = match_id or uuid.uuid4().hex
        self._time_source = time_source
        self._events = EventLog(self._match_id)
        self._rng = random.Random(config.rng_seed)
        self._adapters: list[ControllerAdapter] = []
        self._rounds: list[RoundOutcome] = []
        self._current_round: Round | None = None
        self._step_lock = threading.Lock()
        self._join_lock = threading.Lock()
        self._pending: list[ControllerAdapter] = []
        self._driver: Driver | None = None
        self._started = False
        self._match_over_sent = False
        self._ended = False

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def config(self) -> MatchConfig:
        return self._config

    @property
    def match_id(self) -> str:
        return self._match_id

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def players(self) -> tuple[PlayerState, ...]:
        return tuple(a.state for a in self._adapters)

    @property
    def adapters(self) -> tuple[ControllerAdapter, ...]:
        return tuple(self._adapters)

    @property
    def rounds(self) -> tuple[RoundOutcome, ...]:
        return tuple(self._rounds)

    @property
    def current_round(self) -> Round | None:
        """The round being played right now (driver thread only)."""
        return self._current_round

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_finished(self) -> bool:
        return self._conditions_met()

    @property
    def is_ended(self) -> bool:
        return self._ended

    @property
    def driver(self) -> Driver:
        """Background driver, created on first use."""
        if self._driver is None:
            self._driver = Driver(self.play_round)
        return self._driver

    def get_player(self, player_id: int) -> PlayerState:
        for adapter in self._adapters:
            if adapter.player_id == player_id:
                return adapter.state
        raise KeyError(player_id)

    # ── Commands ─────────────────────────────────────────────────────────

    def add_controller(self, competitor: ICompetitor) -> PlayerState:
        """Register *competitor* and return its new player record.

        While the driver runs, a late joiner called in from another thread is
        queued and admitted by the driver before its next round, so only the
        driver appends to the event log. Until then it is not in :attr:`players`.
        """
        if self._ended:
            raise InvalidOperationError("Cannot add players after the match has ended")
        if self._started and not self._config.allow_late_join:
            raise InvalidOperationError(
                "Cannot add players after the match has started "
                "(allow_late_join is false)"
            )

        with self._join_lock:
            state = PlayerState(
                player_id=len(self._adapters) + len(self._pending),
                name=competitor.name,
                version=competitor.version,
            )
            adapter = ControllerAdapter(
                competitor,
                state,
                self._config,
                events=self._events,
                time_source=self._time_source,
            )
            driver = self._driver
            if driver is not None and driver.is_running and not driver.is_driver_thread():
                self._pending.append(adapter)
                _LOGGER.debug("%s queued to join at the next round", adapter)
                return state
            self._pending.append(adapter)
        self._admit_pending()
        return state

    def play_round(self) -> bool:
        """Play exactly one round unless the match is already finished.

        Returns True once the termination policy is satisfied.
        """
        driver = self._driver
        if driver is not None and driver.is_running and not driver.is_driver_thread():
            raise InvalidOperationError("The driver is advancing this match")
        if not self._step_lock.acquire(blocking=False):
            raise InvalidOperationError("play_round is already in progress")
        try:
            return self._play_round()
        finally:
            self._step_lock.release()

    def start(self) -> None:
        """Advance the match in the background."""
        if self._ended:
            raise InvalidOperationError("The match has ended")
        self.driver.start()

    def stop(self) -> None:
        """Stop the background driver after the round in progress."""
        if self._driver is not None:
            self._driver.stop()

    def join(self, timeout: float | None = None) -> bool:
        if self._driver is None:
            return True
        return self._driver.join(timeout)

    def end(self) -> None:
        """Stop and join the driver, then close the match with ``MATCH_END``.

        No events are appended after ``MATCH_END``. Calling again is a no-op.
        """
        if self._ended:
            return
        if self._driver is not None:
            self._driver.stop()
            self._driver.join()
        self._admit_pending()
        self._ended = True
        if self._started:
            self._send_match_over()
        leader = self.leader()
        self._events.append(
            EventKind.MATCH_END,
            rounds=len(self._rounds),
            scores=MappingProxyType({p.player_id: p.score for p in self.players}),
            leader_id=leader.player_id if leader is not None else None,
        )
        _LOGGER.info("Match %s ended after %d round(s)", self._match_id, len(self._rounds))

    # ── Results ──────────────────────────────────────────────────────────

    def standings(self) -> list[PlayerState]:
        """Players by score, highest first; ties keep registration order."""
        return sorted(self.players, key=lambda p: -p.score)

    def leader(self) -> PlayerState | None:
        """The single top scorer, or None when the top score is shared."""
        ranked = self.standings()
        if not ranked:
            return None
        if len(ranked) > 1 and ranked[0].score == ranked[1].score:
            return None
        return ranked[0]

    # ── Internal ─────────────────────────────────────────────────────────

    def _play_round(self) -> bool:
        if self._ended:
            raise InvalidOperationError("The match has ended")
        self._admit_pending()
        if len(self._adapters) < 2:
            raise InvalidOperationError(
                f"A match needs at least two players, {len(self._adapters)} registered"
            )

        if not self._started:
            self._begin()
        if self._conditions_met():
            return True

        round_ = Round(
            round_id=len(self._rounds) + 1,
            adapters=self._adapters,
            config=self._config,
            events=self._events,
            first_seat=self._rng.randrange(len(self._adapters)),
        )
        self._current_round = round_
        try:
            outcome = round_.play()
        finally:
            self._current_round = None
        self._rounds.append(outcome)

        finished = self._conditions_met()
        if finished:
            self._send_match_over()
        return finished

    def _admit_pending(self) -> None:
        """Seat queued players in id order, then announce them."""
        with self._join_lock:
            admitted, self._pending = self._pending, []
            self._adapters.extend(admitted)
        for adapter in admitted:
            self._events.append(
                EventKind.PLAYER_ADDED,
                player_id=adapter.player_id,
                name=adapter.state.name,
                version=adapter.state.version,
            )
            if self._started:
                adapter.new_match(self._opponent_names(adapter))

    def _begin(self) -> None:
        self._started = True
        self._events.append(
            EventKind.MATCH_BEGIN,
            players=tuple(a.player_id for a in self._adapters),
            round_mode=self._config.round_mode,
            match_rounds=self._config.match_rounds,
        )
        _LOGGER.info(
            "Match %s begins: %s",
            self._match_id,
            " vs ".join(str(a) for a in self._adapters),
        )
        for adapter in self._adapters:
            adapter.new_match(self._opponent_names(adapter))

    def _conditions_met(self) -> bool:
        target = self._config.match_rounds
        if self._config.round_mode == RoundMode.ALL_ROUNDS:
            return len(self._rounds) >= target
        if self._config.round_mode == RoundMode.FIRST_TO:
            return any(a.state.score >= target for a in self._adapters)
        return False

    def _opponent_names(self, adapter: ControllerAdapter) -> str:
        return ", ".join(str(other) for other in self._adapters if other is not adapter)

    def _send_match_over(self) -> None:
        if self._match_over_sent:
            return
        self._match_over_sent = True
        for adapter in self._adapters:
            adapter.match_over()
