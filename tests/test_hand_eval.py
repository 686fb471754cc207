"""Tests for the wild-card poker hand evaluator (Holm, 3-5-7)."""
import pytest

from homegame.cards import parse_cards
from homegame.hand_eval import (
    HandRank,
    compare_hands,
    default_wild_rank,
    evaluate_hand,
    format_hand_rank,
    format_hand_rank_detailed,
    wild_rank_for_round,
)


def _cards(text: str):
    return parse_cards(text.split())


def test_holm_kings_beat_threes_with_shared_board():
    community = "Qh Ad 3d Kc"
    p1 = evaluate_hand(_cards("4s 6d 7d Ks " + community))
    p2 = evaluate_hand(_cards("3c 5h 6s 9h " + community))
    assert p1.rank == HandRank.PAIR
    assert p2.rank == HandRank.PAIR
    assert p1.value > p2.value
    assert compare_hands(p1, p2) == 1
    assert format_hand_rank_detailed(_cards("4s 6d 7d Ks " + community)) == "Pair of Ks"
    assert format_hand_rank_detailed(_cards("3c 5h 6s 9h " + community)) == "Pair of 3s"


def test_pair_of_kings_beats_pair_of_threes_same_kickers():
    kings = evaluate_hand(_cards("Ks Kh 9d 7c 2s"))
    threes = evaluate_hand(_cards("3s 3h 9d 7c 2s"))
    assert kings.value > threes.value


def test_category_order():
    hands = [
        "Ks 9h 7d 4c 2s",  # high card
        "9s 9h 7d 4c 2s",  # pair
        "9s 9h 7d 7c 2s",  # two pair
        "9s 9h 9d 4c 2s",  # trips
        "5s 6h 7d 8c 9s",  # straight
        "2h 5h 8h Jh Kh",  # flush
        "9s 9h 9d 4c 4s",  # full house
        "9s 9h 9d 9c 2s",  # quads
        "5h 6h 7h 8h 9h",  # straight flush
    ]
    values = [evaluate_hand(_cards(h)).value for h in hands]
    assert values == sorted(values)
    assert [evaluate_hand(_cards(h)).rank for h in hands] == list(HandRank)[:9]


def test_wheel_is_five_high():
    wheel = evaluate_hand(_cards("As 2h 3d 4c 5s"))
    six_high = evaluate_hand(_cards("2h 3d 4c 5s 6h"))
    assert wheel.rank == HandRank.STRAIGHT
    assert wheel.kickers == (5,)
    assert six_high.value > wheel.value
    assert format_hand_rank_detailed(_cards("As 2h 3d 4c 5s")) == "Straight, 5 high"


def test_kicker_breaks_tie():
    a = evaluate_hand(_cards("As Ah Kd 7c 2s"))
    b = evaluate_hand(_cards("Ad Ac Qd 7h 2h"))
    assert compare_hands(a, b) == 1
    c = evaluate_hand(_cards("As Ah Kd 7c 2s"))
    assert compare_hands(a, c) == 0


def test_wild_makes_trips_in_three_cards():
    ev = evaluate_hand(_cards("3s Kh Kd"), use_wild=True)
    assert ev.rank == HandRank.THREE_OF_A_KIND
    assert ev.kickers == (13,)


def test_all_wild_three_cards_are_aces():
    assert format_hand_rank_detailed(_cards("3s 3h 3d"), use_wild=True) == "Three of a Kind, As"


def test_five_of_a_kind():
    ev = evaluate_hand(_cards("Ks Kh Kd Kc 5s"), use_wild=True)
    assert ev.rank == HandRank.FIVE_OF_A_KIND
    assert format_hand_rank_detailed(_cards("5s 5h 5d 5c 7s"), use_wild=True, wild_rank="5") == "Five of a Kind, 7s"
    royal = evaluate_hand(_cards("10h Jh Qh Kh Ah"))
    assert ev.value > royal.value


def test_wild_completes_straight_flush():
    ev = evaluate_hand(_cards("9h 10h Jh Qh 7c"), use_wild=True, wild_rank="7")
    assert ev.rank == HandRank.STRAIGHT_FLUSH
    assert ev.kickers == (13,)


def test_wild_fills_flush_with_ace():
    cards = _cards("2h 5h 8h Jh 7s")
    ev = evaluate_hand(cards, use_wild=True, wild_rank="7")
    assert ev.rank == HandRank.FLUSH
    assert ev.kickers == (14, 11, 8, 5, 2)
    assert format_hand_rank_detailed(cards, use_wild=True, wild_rank="7") == "Flush, A high"


def test_wild_full_house_trips_on_higher_rank():
    cards = _cards("Ks Kh 8d 8c 7s")
    ev = evaluate_hand(cards, use_wild=True, wild_rank="7")
    assert ev.rank == HandRank.FULL_HOUSE
    assert format_hand_rank_detailed(cards, use_wild=True, wild_rank="7") == "Full House, Ks full of 8s"


def test_wild_quads_over_full_house():
    ev = evaluate_hand(_cards("Ks Kh Kd 8c 7s"), use_wild=True, wild_rank="7")
    assert ev.rank == HandRank.FOUR_OF_A_KIND
    assert ev.kickers == (13, 8)


def test_wild_ignored_without_flag():
    ev = evaluate_hand(_cards("3s Kh Kd"))
    assert ev.rank == HandRank.PAIR


def test_seven_card_round_uses_sevens():
    cards = _cards("7s 7h Ah Ad Ac 2s 9d")
    ev = evaluate_hand(cards, use_wild=True)
    assert ev.rank == HandRank.FIVE_OF_A_KIND
    assert format_hand_rank_detailed(cards, use_wild=True) == "Five of a Kind, As"


def test_default_wild_rank():
    assert default_wild_rank(3) == "3"
    assert default_wild_rank(5) == "5"
    assert default_wild_rank(7) == "7"
    assert default_wild_rank(4) == "7"
    assert [wild_rank_for_round(n) for n in (1, 2, 3)] == ["3", "5", "7"]
    with pytest.raises(ValueError):
        wild_rank_for_round(4)
    with pytest.raises(ValueError):
        evaluate_hand(_cards("As Kd Qc"), use_wild=True, wild_rank="1")


def test_detailed_descriptions():
    assert format_hand_rank_detailed(_cards("Js Jh 8d 8c 4s")) == "Two Pair, Js and 8s"
    assert format_hand_rank_detailed(_cards("Ks 9h 7d 4c 2s")) == "K High"
    assert format_hand_rank_detailed(_cards("4s 4h 4d Kc 2s")) == "Three of a Kind, 4s"
    assert format_hand_rank_detailed(_cards("10s 10h 10d 10c 2s")) == "Four of a Kind, 10s"
    assert format_hand_rank_detailed([]) == "No Cards"
    assert format_hand_rank(HandRank.FULL_HOUSE) == "Full House"
    assert HandRank.THREE_OF_A_KIND.label == "three-of-a-kind"


def test_short_and_empty_hands():
    assert evaluate_hand([]).rank == HandRank.HIGH_CARD
    assert evaluate_hand([]).value == 0
    single = evaluate_hand(_cards("Qs"))
    assert single.rank == HandRank.HIGH_CARD
    assert single.kickers == (12,)
    six = evaluate_hand(_cards("2s 9h 9d 4c Kd 9s"))
    assert six.rank == HandRank.THREE_OF_A_KIND
    assert six.kickers == (9, 13, 4)
