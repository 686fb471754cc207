"""
Meld detection and deadwood minimisation for Gin Rummy.

A set is 3-4 cards of one rank; a run is 3+ consecutive cards of one suit
(Ace low only). ``find_optimal_melds`` searches non-overlapping melds for the
grouping with the least deadwood.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence

from .cards import Card, RANK_ORDER

MeldType = str  # "set" | "run"

# Exhaustive backtracking is only bounded for Gin Rummy sized hands.
MAX_SEARCH_HAND = 11


@dataclass(frozen=True)
class Meld:
    type: MeldType
    cards: tuple[Card, ...]

    def with_card(self, card: Card) -> "Meld":
        return Meld(type=self.type, cards=self.cards + (card,))

    def __str__(self) -> str:
        label = "Set" if self.type == "set" else "Run"
        return f"{label}: " + " ".join(str(c) for c in self.cards)


class MeldGrouping(NamedTuple):
    """Best arrangement of a hand: disjoint melds plus what is left over."""
    melds: tuple[Meld, ...]
    deadwood: tuple[Card, ...]
    deadwood_value: int


def sum_deadwood(cards: Iterable[Card]) -> int:
    return sum(c.value for c in cards)


def sort_by_rank(cards: Iterable[Card]) -> list[Card]:
    return sorted(cards, key=lambda c: RANK_ORDER[c.rank])


def remove_cards(hand: Sequence[Card], to_remove: Iterable[Card]) -> list[Card]:
    """Copy of ``hand`` without ``to_remove`` (matched by rank and suit, one each)."""
    remaining = list(hand)
    for card in to_remove:
        if card in remaining:
            remaining.remove(card)
    return remaining


def find_all_sets(hand: Sequence[Card]) -> list[Meld]:
    """
    Every candidate set. A rank held four times yields the 4-card set and each
    of its four 3-card subsets, so the search can free one card for a run.
    """
    by_rank: dict[str, list[Card]] = {}
    for card in hand:
        by_rank.setdefault(card.rank, []).append(card)

    melds: list[Meld] = []
    for cards in by_rank.values():
        if len(cards) >= 4:
            melds.append(Meld("set", tuple(cards)))
            for i in range(len(cards)):
                melds.append(Meld("set", tuple(c for j, c in enumerate(cards) if j != i)))
        elif len(cards) == 3:
            melds.append(Meld("set", tuple(cards)))
    return melds


def find_all_runs(hand: Sequence[Card]) -> list[Meld]:
    """Every contiguous same-suit run of length >= 3, including sub-runs of longer runs."""
    by_suit: dict[str, list[Card]] = {}
    for card in hand:
        by_suit.setdefault(card.suit, []).append(card)

    melds: list[Meld] = []
    for cards in by_suit.values():
        ordered = sort_by_rank(cards)
        for start in range(len(ordered)):
            run = [ordered[start]]
            for nxt in ordered[start + 1:]:
                if nxt.order != run[-1].order + 1:
                    break
                run.append(nxt)
                if len(run) >= 3:
                    melds.append(Meld("run", tuple(run)))
    return melds


def find_all_melds(hand: Sequence[Card]) -> list[Meld]:
    return find_all_sets(hand) + find_all_runs(hand)


def find_optimal_melds(hand: Sequence[Card]) -> MeldGrouping:
    """
    Grouping of non-overlapping melds with minimum deadwood.

    Backtracks over the candidate melds: each candidate is either skipped or,
    when all of its cards are still available, taken. The search stops
    descending once a grouping reaches zero deadwood.
    """
    if len(hand) > MAX_SEARCH_HAND:
        raise ValueError(f"Meld search supports at most {MAX_SEARCH_HAND} cards, got {len(hand)}")

    candidates = find_all_melds(hand)
    best = MeldGrouping(melds=(), deadwood=tuple(hand), deadwood_value=sum_deadwood(hand))

    def backtrack(remaining: list[Card], used: list[Meld], start: int) -> None:
        nonlocal best
        dw = sum_deadwood(remaining)
        if dw < best.deadwood_value:
            best = MeldGrouping(melds=tuple(used), deadwood=tuple(remaining), deadwood_value=dw)
        if dw == 0:
            return
        for i in range(start, len(candidates)):
            meld = candidates[i]
            if not all(c in remaining for c in meld.cards):
                continue
            used.append(meld)
            backtrack(remove_cards(remaining, meld.cards), used, i + 1)
            used.pop()

    backtrack(list(hand), [], 0)
    return best


def can_lay_off(card: Card, meld: Meld) -> bool:
    """
    True if ``card`` may be attached to ``meld``: a set takes a missing suit of
    its rank (up to 4 cards); a run takes the next card below or above it.
    """
    if meld.type == "set":
        return (
            card.rank == meld.cards[0].rank
            and all(mc.suit != card.suit for mc in meld.cards)
            and len(meld.cards) < 4
        )
    if meld.type == "run":
        ordered = sort_by_rank(meld.cards)
        if card.suit != ordered[0].suit:
            return False
        return card.order == ordered[0].order - 1 or card.order == ordered[-1].order + 1
    return False


def find_lay_off_options(
    opponent_hand: Sequence[Card],
    knocker_melds: Sequence[Meld],
) -> list[tuple[Card, int]]:
    """All (card, meld_index) pairs the opponent could lay off right now."""
    return [
        (card, mi)
        for card in opponent_hand
        for mi, meld in enumerate(knocker_melds)
        if can_lay_off(card, meld)
    ]


def describe_melds(melds: Iterable[Meld]) -> str:
    return ", ".join(str(m) for m in melds)


__all__ = [
    "Meld",
    "MeldGrouping",
    "MAX_SEARCH_HAND",
    "sum_deadwood",
    "remove_cards",
    "find_all_sets",
    "find_all_runs",
    "find_all_melds",
    "find_optimal_melds",
    "can_lay_off",
    "find_lay_off_options",
    "describe_melds",
]
