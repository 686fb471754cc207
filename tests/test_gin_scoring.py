"""Tests for knock / gin / undercut scoring and match payouts."""
from dataclasses import replace

import pytest

from homegame.cards import parse_cards
from homegame.config import GinRummyConfig
from homegame.gin_rummy import create_initial_gin_rummy_state
from homegame.gin_scoring import (
    KnockResult,
    can_draw_from_stock,
    can_knock,
    describe_knock_result,
    has_gin,
    match_payout,
    score_knock,
)


def _cards(text: str):
    return parse_cards(text.split())


def test_gin_scores_opponent_deadwood_plus_bonus():
    result = score_knock("a", "b", _cards("As 2s 3s 7h 7d 7c"), _cards("Kh 9d 2c"), [], is_gin=True)
    assert result.is_gin
    assert not result.is_undercut
    assert result.winner_id == "a"
    assert result.points_awarded == 21 + 25


def test_undercut_on_equal_deadwood():
    result = score_knock("a", "b", _cards("As 2s 3s 8d"), _cards("8h"), [], is_gin=False)
    assert result.is_undercut
    assert result.winner_id == "b"
    assert result.knocker_deadwood == 8
    assert result.opponent_deadwood == 8
    assert result.points_awarded == 25


def test_undercut_lower_deadwood():
    result = score_knock("a", "b", _cards("As 2s 3s 9d"), _cards("4h"), [], is_gin=False)
    assert result.is_undercut
    assert result.points_awarded == 5 + 25


def test_normal_knock_scores_difference():
    result = score_knock("a", "b", _cards("As 2s 3s 5d"), _cards("Kh 10d"), [], is_gin=False)
    assert not result.is_undercut
    assert result.winner_id == "a"
    assert result.points_awarded == 15


def test_laid_off_cards_do_not_count():
    result = score_knock("a", "b", _cards("As 2s 3s 5d"), _cards("4s Kh"), _cards("4s"), is_gin=False)
    assert result.opponent_deadwood == 10
    assert result.points_awarded == 5


def test_custom_bonuses():
    cfg = GinRummyConfig(gin_bonus=20, undercut_bonus=10)
    gin = score_knock("a", "b", _cards("As 2s 3s"), _cards("5h"), [], is_gin=True, config=cfg)
    assert gin.points_awarded == 25
    under = score_knock("a", "b", _cards("As 2s 3s 6d"), _cards("5h"), [], is_gin=False, config=cfg)
    assert under.points_awarded == 11


def test_knock_boundary():
    assert can_knock(_cards("As 2s 3s 10d"))
    assert not can_knock(_cards("As 2s 3s 10d Ah"))
    assert has_gin(_cards("As 2s 3s"))
    assert not has_gin(_cards("As 2s 3s Ah"))


def test_stock_reserve():
    assert can_draw_from_stock(_cards("As 2s 3s"))
    assert not can_draw_from_stock(_cards("As 2s"))


def test_knock_result_dict_round_trip():
    result = score_knock("a", "b", _cards("As 2s 3s 5d"), _cards("Kh 10d"), [], is_gin=False)
    assert KnockResult.from_dict(result.to_dict()) == result
    assert describe_knock_result(result) == "Knock (5 vs 20) +15 pts"


def test_match_payout_ante_only():
    state = create_initial_gin_rummy_state("p1", "p2")
    state = replace(state, winner_player_id="p2", match_scores={"p1": 40, "p2": 105})
    assert match_payout(state) == {"p2": 1, "p1": -1}


def test_match_payout_with_point_value():
    state = create_initial_gin_rummy_state("p1", "p2", config=GinRummyConfig(ante_amount=5, point_value=1))
    state = replace(state, winner_player_id="p1", match_scores={"p1": 100, "p2": 40})
    assert match_payout(state) == {"p1": 65, "p2": -65}


def test_match_payout_requires_winner():
    with pytest.raises(ValueError):
        match_payout(create_initial_gin_rummy_state("p1", "p2"))
