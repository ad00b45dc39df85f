"""Match configuration value."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import timedelta
from enum import Enum
from typing import Any, TypeVar

from salvo.core.enums import GameMode, RoundMode
from salvo.core.types import Coordinate
from salvo.game.errors import ConfigurationError

_E = TypeVar("_E", bound=Enum)

# Option names as supplied by external loaders -> dataclass field names.
_OPTION_FIELDS: dict[str, str] = {
    "field_width": "field_width",
    "field_height": "field_height",
    "ship_sizes": "ship_sizes",
    "game_mode": "game_modes",
    "match_rounds": "match_rounds",
    "match_rounds_mode": "round_mode",
    "per_game_timeout": "per_game_timeout",
    "allow_late_join": "allow_late_join",
    "rng_seed": "rng_seed",
}


@dataclass(frozen=True, slots=True)
class MatchConfig:
    """Immutable per-match constants.

    Args:
        field_width: Board width in cells.
        field_height: Board height in cells.
        ship_sizes: Lengths of the ships every player must place.
        game_modes: Requested rule sets; only ``GameMode.CLASSIC`` is playable.
        match_rounds: Round count (``ALL_ROUNDS``) or winning score (``FIRST_TO``).
        round_mode: Termination policy.
        per_game_timeout: Cumulative seconds each competitor may spend per game.
        allow_late_join: Permit ``add_controller`` after the match started.
        rng_seed: Seed shared with competitors and used for turn-order draws.
    """

    field_width: int = 10
    field_height: int = 10
    ship_sizes: tuple[int, ...] = (2, 3, 3, 4, 5)
    game_modes: tuple[GameMode, ...] = (GameMode.CLASSIC,)
    match_rounds: int = 100
    round_mode: RoundMode = RoundMode.ALL_ROUNDS
    per_game_timeout: float = 1.0
    allow_late_join: bool = False
    rng_seed: int = 0

    def __post_init__(self) -> None:
        if self.field_width < 1 or self.field_height < 1:
            raise ConfigurationError(
                f"Field must be at least 1x1, got "
                f"{self.field_width}x{self.field_height}"
            )
        if not self.ship_sizes:
            raise ConfigurationError("At least one ship size is required")
        longest_side = max(self.field_width, self.field_height)
        for size in self.ship_sizes:
            if size < 1:
                raise ConfigurationError(f"Ship sizes must be positive, got {size}")
            if size > longest_side:
                raise ConfigurationError(
                    f"Ship of length {size} does not fit on a "
                    f"{self.field_width}x{self.field_height} field"
                )
        if not self.game_modes:
            raise ConfigurationError("At least one game mode is required")
        if self.match_rounds < 1:
            raise ConfigurationError(
                f"match_rounds must be >= 1, got {self.match_rounds}"
            )
        if not self.per_game_timeout > 0:
            raise ConfigurationError(
                f"per_game_timeout must be positive, got {self.per_game_timeout}"
            )

    @property
    def board_size(self) -> Coordinate:
        return Coordinate(self.field_width, self.field_height)

    # ── Construction from loader output ──────────────────────────────────

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> MatchConfig:
        """Build a config from already-parsed option values.

        Missing options keep their defaults. Enum options accept members or
        member names; ``per_game_timeout`` accepts seconds or a ``timedelta``.
        """
        unknown = sorted(set(options) - set(_OPTION_FIELDS))
        if unknown:
            raise ConfigurationError(f"Unknown match option(s): {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        for option, value in options.items():
            name = _OPTION_FIELDS[option]
            try:
                kwargs[name] = _coerce(name, value)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"Invalid value for {option}: {value!r} ({exc})"
                ) from None
        return cls(**kwargs)

    def to_options(self) -> dict[str, Any]:
        """Inverse of :meth:`from_options`."""
        by_field = {v: k for k, v in _OPTION_FIELDS.items()}
        return {by_field[f.name]: getattr(self, f.name) for f in fields(self)}


def _coerce(name: str, value: Any) -> Any:
    if name in ("field_width", "field_height", "match_rounds", "rng_seed"):
        return _as_int(value)
    if name == "ship_sizes":
        return tuple(_as_int(v) for v in value)
    if name == "game_modes":
        if isinstance(value, (str, GameMode)):
            value = (value,)
        return tuple(_as_enum(GameMode, v) for v in value)
    if name == "round_mode":
        return _as_enum(RoundMode, value)
    if name == "per_game_timeout":
        if isinstance(value, timedelta):
            return value.total_seconds()
        return float(value)
    if name == "allow_late_join":
        if not isinstance(value, bool):
            raise TypeError("expected a bool")
        return value
    return value


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("expected an int")
    return value


def _as_enum(enum_cls: type[_E], value: Any) -> _E:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise TypeError(f"expected a {enum_cls.__name__} or its name")
    wanted = value.replace("_", "").lower()
    for member in enum_cls:
        if member.name.replace("_", "").lower() == wanted:
            return member
    raise ValueError(f"unknown {enum_cls.__name__} {value!r}")
