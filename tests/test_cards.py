"""Tests for the shared 52-card deck."""
import random

import pytest

from homegame.cards import Card, format_cards, make_deck_52, parse_card, parse_cards, same_card, shuffled_deck


def test_deck_52_unique():
    deck = make_deck_52()
    assert len(deck) == 52
    assert len(set(deck)) == 52


def test_shuffled_deck_is_seeded():
    a = shuffled_deck(random.Random(5))
    b = shuffled_deck(random.Random(5))
    assert a == b
    assert sorted(map(str, a)) == sorted(map(str, make_deck_52()))


def test_parse_card_forms():
    assert parse_card("10h") == Card("10", "♥")
    assert parse_card("Th") == Card("10", "♥")
    assert parse_card("ks") == Card("K", "♠")
    assert parse_card("A♦") == Card("A", "♦")
    assert str(parse_card("Qc")) == "Q♣"


def test_parse_card_rejects_garbage():
    with pytest.raises(ValueError):
        parse_card("Z")
    with pytest.raises(ValueError):
        parse_card("1x")
    with pytest.raises(ValueError):
        Card("11", "♠")


def test_deadwood_values():
    values = [c.value for c in parse_cards(["As", "2s", "9s", "10s", "Js", "Qs", "Ks"])]
    assert values == [1, 2, 9, 10, 10, 10, 10]
    assert parse_card("As").poker_value == 14
    assert parse_card("As").order == 1


def test_card_dict_and_identity():
    card = parse_card("7d")
    assert card.to_dict() == {"rank": "7", "suit": "♦", "value": 7}
    assert Card.from_dict(card.to_dict()) == card
    assert same_card(card, Card("7", "♦"))
    assert format_cards(parse_cards(["7d", "8d"])) == "7♦ 8♦"
