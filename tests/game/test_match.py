"""Tests for Match — registration, termination policies and shutdown."""

from __future__ import annotations

from dataclasses import replace

import pytest

from salvo.core.enums import GameMode, RoundMode
from salvo.game.config import MatchConfig
from salvo.game.errors import ConfigurationError, InvalidOperationError
from salvo.game.events import EventKind
from salvo.game.match import Match


def _match(config: MatchConfig, *competitors) -> Match:
    match = Match(config, match_id="test-match")
    for competitor in competitors:
        match.add_controller(competitor)
    return match


class TestRegistration:
    def test_players_get_dense_ids(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))
        assert [p.player_id for p in match.players] == [0, 1]
        assert match.get_player(1).name == "B"
        added = match.events.of_kind(EventKind.PLAYER_ADDED)
        assert [e["name"] for e in added] == ["A", "B"]

    def test_unknown_player(self, small_config) -> None:
        with pytest.raises(KeyError):
            Match(small_config).get_player(3)

    def test_events_carry_match_id(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"))
        assert match.match_id == "test-match"
        assert match.events.last.match_id == "test-match"

    def test_late_join_rejected(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))
        match.play_round()
        with pytest.raises(InvalidOperationError):
            match.add_controller(line_competitor("C"))
        assert len(match.players) == 2

    def test_late_join_allowed(self, small_config, line_competitor) -> None:
        config = replace(small_config, allow_late_join=True)
        match = _match(config, line_competitor("A"), line_competitor("B"))
        match.play_round()

        late = line_competitor("C")
        match.add_controller(late)
        assert late.called("new_match") == 1
        assert ("new_match", ("A 1.0, B 1.0",)) in late.calls

        match.play_round()
        (_, second) = match.events.of_kind(EventKind.ROUND_BEGIN)
        assert second["players"] == (0, 1, 2)

    def test_unsupported_mode(self, small_config) -> None:
        config = replace(small_config, game_modes=(GameMode.CLASSIC, GameMode.SALVO))
        with pytest.raises(ConfigurationError, match="salvo"):
            Match(config)


class TestPlayRound:
    def test_needs_two_players(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"))
        with pytest.raises(InvalidOperationError):
            match.play_round()
        assert not match.is_started

    def test_all_rounds(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))

        assert [match.play_round() for _ in range(3)] == [False, False, True]
        assert match.play_round() is True
        assert len(match.rounds) == 3
        assert len(match.events.of_kind(EventKind.ROUND_BEGIN)) == 3
        assert sum(p.score for p in match.players) == 3

    def test_first_to(self, small_config, line_competitor) -> None:
        config = replace(small_config, round_mode=RoundMode.FIRST_TO, match_rounds=2)
        match = _match(config, line_competitor("A"), line_competitor("B"))

        played = 0
        while not match.play_round():
            played += 1
            assert played < 10
        assert max(p.score for p in match.players) == 2
        assert 2 <= len(match.rounds) <= 3
        assert match.is_finished

    def test_mirror_games_go_to_first_shooter(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))
        while not match.play_round():
            pass
        begins = match.events.of_kind(EventKind.ROUND_BEGIN)
        assert [o.winner_id for o in match.rounds] == [e["first_player_id"] for e in begins]

    def test_first_shooter_follows_seed(self, small_config, line_competitor) -> None:
        def first_shooters(seed: int) -> list[int]:
            config = replace(small_config, rng_seed=seed)
            match = _match(config, line_competitor("A"), line_competitor("B"))
            while not match.play_round():
                pass
            return [e["first_player_id"] for e in match.events.of_kind(EventKind.ROUND_BEGIN)]

        assert first_shooters(11) == first_shooters(11)

    def test_match_begin_precedes_rounds(self, small_config, line_competitor) -> None:
        a = line_competitor("A")
        match = _match(small_config, a, line_competitor("B"))
        match.play_round()
        kinds = [e.kind for e in match.events]
        assert kinds.index(EventKind.MATCH_BEGIN) < kinds.index(EventKind.ROUND_BEGIN)
        assert ("new_match", ("B 1.0",)) in a.calls

    def test_faulty_competitor_does_not_stop_match(
        self, small_config, line_competitor, broken_competitor
    ) -> None:
        match = _match(small_config, broken_competitor("X"), line_competitor("A"))
        while not match.play_round():
            pass
        assert len(match.rounds) == 3
        assert match.get_player(1).score == 3
        assert len(match.events.of_kind(EventKind.PLAYER_FAULTED)) == 3


class TestEnd:
    def test_match_end_is_last_and_idempotent(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))
        match.play_round()
        match.end()
        count = len(match.events)

        last = match.events.last
        assert last.kind is EventKind.MATCH_END
        assert last["rounds"] == 1
        assert dict(last["scores"]) == {p.player_id: p.score for p in match.players}

        match.end()
        assert len(match.events) == count
        assert match.is_ended

    def test_nothing_after_end(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))
        match.end()
        with pytest.raises(InvalidOperationError):
            match.play_round()
        with pytest.raises(InvalidOperationError):
            match.add_controller(line_competitor("C"))
        with pytest.raises(InvalidOperationError):
            match.start()
        assert match.events.last.kind is EventKind.MATCH_END

    def test_match_over_sent_once(self, small_config, line_competitor) -> None:
        a, b = line_competitor("A"), line_competitor("B")
        match = _match(small_config, a, b)
        while not match.play_round():
            pass
        match.end()
        assert a.called("match_over") == 1
        assert b.called("match_over") == 1

    def test_end_before_start_skips_match_over(self, small_config, line_competitor) -> None:
        a = line_competitor("A")
        match = _match(small_config, a, line_competitor("B"))
        match.end()
        assert a.called("match_over") == 0
        assert match.events.last["leader_id"] is None

    def test_early_end_notifies_match_over(self, small_config, line_competitor) -> None:
        a = line_competitor("A")
        match = _match(small_config, a, line_competitor("B"))
        match.play_round()
        match.end()
        assert a.called("match_over") == 1


class TestResults:
    def test_leader_none_on_tie(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))
        assert match.leader() is None
        assert [p.name for p in match.standings()] == ["A", "B"]

    def test_standings_after_match(self, small_config, line_competitor) -> None:
        match = _match(small_config, line_competitor("A"), line_competitor("B"))
        while not match.play_round():
            pass
        ranked = match.standings()
        assert ranked[0].score >= ranked[1].score
        assert match.leader() is ranked[0]
        match.end()
        assert match.events.last["leader_id"] == ranked[0].player_id
