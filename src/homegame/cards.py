"""
Standard 52-card deck shared by Gin Rummy, Holm and 3-5-7.
Suits use the symbol encoding (♠ ♥ ♦ ♣); ranks are A, 2..10, J, Q, K.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Iterable

SUITS: tuple[str, ...] = ("♠", "♥", "♦", "♣")
RANKS: tuple[str, ...] = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")

# Run order for melds: Ace is always low in Gin Rummy.
RANK_ORDER: dict[str, int] = {r: i + 1 for i, r in enumerate(RANKS)}

# Poker order: Ace high (14). The wheel is handled by the evaluator.
POKER_VALUES: dict[str, int] = {r: (14 if r == "A" else i + 1) for i, r in enumerate(RANKS)}

# Letters accepted when parsing "Kh", "Ts", ...
_SUIT_LETTERS = {"s": "♠", "h": "♥", "d": "♦", "c": "♣"}


@dataclass(frozen=True)
class Card:
    """A single playing card. Two cards are the same card iff rank and suit match."""

    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANK_ORDER:
            raise ValueError(f"Invalid rank: {self.rank!r}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit!r}")

    @property
    def value(self) -> int:
        """Deadwood weight: A=1, 2-10 face value, J/Q/K=10."""
        return min(RANK_ORDER[self.rank], 10)

    @property
    def order(self) -> int:
        return RANK_ORDER[self.rank]

    @property
    def poker_value(self) -> int:
        return POKER_VALUES[self.rank]

    def to_dict(self) -> dict[str, Any]:
        return {"rank": self.rank, "suit": self.suit, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        return cls(rank=str(data["rank"]), suit=str(data["suit"]))

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return str(self)


def parse_card(text: str) -> Card:
    """
    Parse "10♥", "10h", "Th", "ks" or "A♠" into a Card.
    The last character is the suit (symbol or s/h/d/c letter).
    """
    s = text.strip()
    if len(s) < 2:
        raise ValueError(f"Invalid card string: {text!r}")
    rank, suit = s[:-1].upper(), s[-1]
    suit = _SUIT_LETTERS.get(suit.lower(), suit)
    if rank == "T":
        rank = "10"
    return Card(rank=rank, suit=suit)


def parse_cards(texts: Iterable[str]) -> list[Card]:
    return [parse_card(t) for t in texts]


def make_deck_52() -> list[Card]:
    """Full deck, suit-major then rank A..K."""
    return [Card(rank=r, suit=s) for s in SUITS for r in RANKS]


def shuffled_deck(rng: random.Random | None = None) -> list[Card]:
    """A freshly shuffled copy of the 52-card deck."""
    if rng is None:
        rng = random.Random()
    deck = make_deck_52()
    rng.shuffle(deck)
    return deck


def same_card(a: Card, b: Card) -> bool:
    return a.rank == b.rank and a.suit == b.suit


def format_cards(cards: Iterable[Card]) -> str:
    return " ".join(str(c) for c in cards)
