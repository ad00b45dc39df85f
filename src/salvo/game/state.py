"""Per-player state carried across the rounds of a match."""

from __future__ import annotations

from dataclasses import dataclass, field

from salvo.core.enums import ShotResult
from salvo.core.ship import Ship
from salvo.core.types import Coordinate


@dataclass
class PlayerState:
    """Identity, score and current-round board of one registered player.

    Owned by the round in progress while it plays, by the match otherwise.
    This is a pure data/logic class: no timing, no competitor calls.
    """

    player_id: int
    name: str
    version: str
    score: int = 0
    ships: list[Ship] = field(default_factory=list)
    shots: dict[int | None, set[Coordinate]] = field(default_factory=dict)
    shot_history: list[Coordinate] = field(default_factory=list)
    shots_received: set[Coordinate] = field(default_factory=set)

    @property
    def label(self) -> str:
        return f"{self.name} {self.version}"

    def reset_round(self) -> None:
        """Forget this round's shots; ships are replaced at placement."""
        self.shots.clear()
        self.shot_history.clear()
        self.shots_received.clear()

    # ── Own shots ────────────────────────────────────────────────────────

    def shots_at(self, target_id: int | None = None) -> frozenset[Coordinate]:
        """Cells already fired at *target_id* this round."""
        return frozenset(self.shots.get(target_id, ()))

    def has_shot(self, coord: Coordinate, target_id: int | None = None) -> bool:
        return coord in self.shots.get(target_id, ())

    def record_shot(self, coord: Coordinate, target_id: int | None = None) -> None:
        """Remember a shot made this round. Caller rejects duplicates first.

        Shots are tracked per target: the same cell may be fired at once on
        every opposing board.
        """
        self.shots.setdefault(target_id, set()).add(coord)
        self.shot_history.append(coord)

    # ── Own fleet ────────────────────────────────────────────────────────

    def ship_at(self, coord: Coordinate) -> Ship | None:
        for ship in self.ships:
            if ship.is_at(coord):
                return ship
        return None

    def receive_shot(self, coord: Coordinate) -> ShotResult:
        """Apply an incoming shot to this player's fleet and classify it."""
        self.shots_received.add(coord)
        ship = self.ship_at(coord)
        if ship is None:
            return ShotResult.MISS
        if ship.is_sunk(self.shots_received):
            return ShotResult.SUNK
        return ShotResult.HIT

    @property
    def is_alive(self) -> bool:
        """At least one ship still has a cell nobody has shot."""
        return any(not ship.is_sunk(self.shots_received) for ship in self.ships)
