"""Match management layer: adapters, rounds, matches, event log and driver.

Quick start::

    from salvo.game import Match, MatchConfig

    match = Match(MatchConfig(match_rounds=10))
    match.add_controller(MyCompetitor("Alpha"))
    match.add_controller(MyCompetitor("Beta"))
    match.events.subscribe(print)
    while not match.play_round():
        pass
    match.end()
"""

from salvo.game.adapter import ControllerAdapter
from salvo.game.clock import GameTimer, ManualClock
from salvo.game.config import MatchConfig
from salvo.game.driver import Driver
from salvo.game.errors import ConfigurationError, InvalidOperationError, SalvoError
from salvo.game.events import Event, EventKind, EventLog
from salvo.game.interfaces import (
    CallOutcome,
    EliminationReason,
    ICompetitor,
    RoundPhase,
)
from salvo.game.match import Match
from salvo.game.player import Competitor
from salvo.game.round import Round, RoundOutcome, ShotRecord
from salvo.game.state import PlayerState

__all__ = [
    # Interfaces
    "CallOutcome",
    "EliminationReason",
    "ICompetitor",
    "RoundPhase",
    # Errors
    "ConfigurationError",
    "InvalidOperationError",
    "SalvoError",
    # Concrete
    "Competitor",
    "ControllerAdapter",
    "Driver",
    "Event",
    "EventKind",
    "EventLog",
    "GameTimer",
    "ManualClock",
    "Match",
    "MatchConfig",
    "PlayerState",
    "Round",
    "RoundOutcome",
    "ShotRecord",
]
