"""Tests for the Gin Rummy match configuration."""
import pytest

from homegame.config import GinRummyConfig


def test_defaults():
    cfg = GinRummyConfig()
    assert cfg.points_to_win == 100
    assert cfg.gin_bonus == 25
    assert cfg.undercut_bonus == 25
    assert cfg.knock_limit == 10
    assert cfg.stock_reserve == 2


def test_match_modes():
    assert GinRummyConfig.for_match_mode("standard").points_to_win == 100
    assert GinRummyConfig.for_match_mode("short").points_to_win == 50
    quick = GinRummyConfig.for_match_mode("quick", ante_amount=3)
    assert quick.points_to_win == 25
    assert quick.ante_amount == 3
    with pytest.raises(ValueError):
        GinRummyConfig.for_match_mode("marathon")


def test_from_dict_is_closed():
    cfg = GinRummyConfig.from_dict({"points_to_win": "50", "point_value": 2})
    assert cfg.points_to_win == 50
    assert cfg.point_value == 2
    assert GinRummyConfig.from_dict(cfg.to_dict()) == cfg
    with pytest.raises(ValueError):
        GinRummyConfig.from_dict({"pointsToWin": 50})


def test_validation():
    with pytest.raises(ValueError):
        GinRummyConfig(points_to_win=0)
    with pytest.raises(ValueError):
        GinRummyConfig(knock_limit=-1)
