"""Core value types: coordinates, ships and domain enumerations."""

from salvo.core.enums import GameMode, Orientation, RoundMode, ShotResult
from salvo.core.ship import Ship
from salvo.core.types import FORFEIT_SHOT, Coordinate

__all__ = [
    "FORFEIT_SHOT",
    "Coordinate",
    "GameMode",
    "Orientation",
    "RoundMode",
    "Ship",
    "ShotResult",
]
