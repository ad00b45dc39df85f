"""Tests for MatchConfig."""

from datetime import timedelta

import pytest

from salvo.core.enums import GameMode, RoundMode
from salvo.core.types import Coordinate
from salvo.game.config import MatchConfig
from salvo.game.errors import ConfigurationError


class TestDefaults:
    def test_classic_defaults(self) -> None:
        config = MatchConfig()
        assert config.board_size == Coordinate(10, 10)
        assert config.ship_sizes == (2, 3, 3, 4, 5)
        assert config.game_modes == (GameMode.CLASSIC,)
        assert config.round_mode == RoundMode.ALL_ROUNDS
        assert config.match_rounds == 100
        assert config.allow_late_join is False

    def test_is_immutable(self) -> None:
        config = MatchConfig()
        with pytest.raises(AttributeError):
            config.match_rounds = 5  # type: ignore[misc]


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"field_width": 0},
            {"field_height": -1},
            {"ship_sizes": ()},
            {"ship_sizes": (2, 0)},
            {"ship_sizes": (11,)},
            {"match_rounds": 0},
            {"per_game_timeout": 0.0},
            {"game_modes": ()},
        ],
    )
    def test_rejects_invalid_values(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ConfigurationError):
            MatchConfig(**kwargs)  # type: ignore[arg-type]

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            MatchConfig(match_rounds=-3)


class TestFromOptions:
    def test_maps_option_names(self) -> None:
        config = MatchConfig.from_options(
            {
                "field_width": 8,
                "field_height": 6,
                "ship_sizes": [2, 3],
                "game_mode": ["Classic"],
                "match_rounds": 5,
                "match_rounds_mode": "FirstTo",
                "per_game_timeout": timedelta(milliseconds=250),
                "allow_late_join": True,
                "rng_seed": 42,
            }
        )
        assert config.board_size == Coordinate(8, 6)
        assert config.ship_sizes == (2, 3)
        assert config.game_modes == (GameMode.CLASSIC,)
        assert config.round_mode == RoundMode.FIRST_TO
        assert config.per_game_timeout == pytest.approx(0.25)
        assert config.allow_late_join is True
        assert config.rng_seed == 42

    def test_missing_options_keep_defaults(self) -> None:
        assert MatchConfig.from_options({}) == MatchConfig()

    def test_enum_members_and_single_mode(self) -> None:
        config = MatchConfig.from_options(
            {"game_mode": GameMode.CLASSIC, "match_rounds_mode": RoundMode.ALL_ROUNDS}
        )
        assert config.game_modes == (GameMode.CLASSIC,)

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError, match="mbc_turbo"):
            MatchConfig.from_options({"mbc_turbo": True})

    def test_unknown_enum_name(self) -> None:
        with pytest.raises(ConfigurationError):
            MatchConfig.from_options({"match_rounds_mode": "BestOf"})

    def test_wrong_type(self) -> None:
        with pytest.raises(ConfigurationError):
            MatchConfig.from_options({"field_width": "ten"})
        with pytest.raises(ConfigurationError):
            MatchConfig.from_options({"allow_late_join": "yes"})

    def test_round_trip_through_options(self) -> None:
        config = MatchConfig(field_width=7, round_mode=RoundMode.FIRST_TO)
        assert MatchConfig.from_options(config.to_options()) == config
