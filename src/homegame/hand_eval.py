"""
Poker hand evaluation with optional wild cards (Holm, 3-5-7).

The best five-card hand is chosen among all 5-card subsets; hands with fewer
than five cards are evaluated as they are (only of-a-kind categories and high
card exist there). Every card of the wild rank can stand for any rank and
suit, which makes five of a kind reachable.

``value`` packs the category and up to five tie-break ranks in base 15, so
comparing two values compares the hands.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from itertools import combinations
from typing import List, Sequence, Tuple

from .cards import Card, RANK_ORDER

ACE_HIGH = 14
_BASE = 15
_KICKER_SLOTS = 5


class HandRank(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    FIVE_OF_A_KIND = 9

    @property
    def label(self) -> str:
        """Kebab-case id, e.g. "three-of-a-kind"."""
        return self.name.lower().replace("_", "-")


HAND_RANK_NAMES = {
    HandRank.HIGH_CARD: "High Card",
    HandRank.PAIR: "Pair",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.STRAIGHT: "Straight",
    HandRank.FLUSH: "Flush",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FIVE_OF_A_KIND: "Five of a Kind",
}

# 3-5-7: round 1 deals 3 cards (3s wild), round 2 five (5s wild), round 3 seven (7s wild).
ROUND_WILD_RANKS = {1: "3", 2: "5", 3: "7"}


@dataclass(frozen=True)
class HandEvaluation:
    rank: HandRank
    value: int
    kickers: Tuple[int, ...] = ()  # poker values (A=14), most significant first


def hand_value(rank: HandRank, kickers: Sequence[int]) -> int:
    value = int(rank)
    for i in range(_KICKER_SLOTS):
        value = value * _BASE + (kickers[i] if i < len(kickers) else 0)
    return value


def wild_rank_for_round(round_number: int) -> str:
    if round_number not in ROUND_WILD_RANKS:
        raise ValueError(f"3-5-7 has rounds 1-3, got {round_number}")
    return ROUND_WILD_RANKS[round_number]


def default_wild_rank(card_count: int) -> str:
    """Wild rank implied by the number of cards held in 3-5-7."""
    if card_count <= 3:
        return "3"
    if card_count == 5:
        return "5"
    return "7"


def _straight_high(values: set[int]) -> int | None:
    """Highest straight the distinct naturals fit into, wilds filling the gaps."""
    for high in range(ACE_HIGH, 4, -1):
        window = {ACE_HIGH, 2, 3, 4, 5} if high == 5 else set(range(high - 4, high + 1))
        if values <= window:
            return high
    return None


def _evaluate_group(naturals: Sequence[Card], wilds: int) -> Tuple[HandRank, List[int]]:
    """Best category for at most five cards, ``wilds`` of which are wild."""
    n = len(naturals) + wilds
    values = sorted((c.poker_value for c in naturals), reverse=True)
    counts = Counter(values)
    distinct = set(values)
    same_suit = len({c.suit for c in naturals}) <= 1
    no_dupes = len(distinct) == len(values)

    def best_of_a_kind(size: int) -> int | None:
        if not values:
            return ACE_HIGH if wilds >= size else None
        hits = [v for v in counts if counts[v] + wilds >= size]
        return max(hits) if hits else None

    def rest(*used: int) -> List[int]:
        return [v for v in values if v not in used]

    if n == 5 and len(distinct) <= 1:
        return HandRank.FIVE_OF_A_KIND, [values[0] if values else ACE_HIGH]

    if n == 5 and same_suit and no_dupes:
        high = _straight_high(distinct)
        if high is not None:
            return HandRank.STRAIGHT_FLUSH, [high]

    if n >= 4:
        quad = best_of_a_kind(4)
        if quad is not None:
            return HandRank.FOUR_OF_A_KIND, [quad] + rest(quad)[: n - 4]

    if n == 5 and len(distinct) == 2:
        hi, lo = max(distinct), min(distinct)
        if counts[hi] <= 3 and counts[lo] <= 2:
            return HandRank.FULL_HOUSE, [hi, lo]
        return HandRank.FULL_HOUSE, [lo, hi]

    if n == 5 and same_suit:
        fill = [v for v in range(ACE_HIGH, 1, -1) if v not in distinct][:wilds]
        return HandRank.FLUSH, sorted(values + fill, reverse=True)

    if n == 5 and no_dupes:
        high = _straight_high(distinct)
        if high is not None:
            return HandRank.STRAIGHT, [high]

    trips = best_of_a_kind(3)
    if trips is not None:
        return HandRank.THREE_OF_A_KIND, [trips] + rest(trips)[: n - 3]

    pairs = sorted((v for v in counts if counts[v] >= 2), reverse=True)
    if n >= 4 and len(pairs) >= 2:
        return HandRank.TWO_PAIR, [pairs[0], pairs[1]] + rest(pairs[0], pairs[1])[: n - 4]

    pair = best_of_a_kind(2)
    if pair is not None:
        return HandRank.PAIR, [pair] + rest(pair)[: n - 2]

    return HandRank.HIGH_CARD, values[:_KICKER_SLOTS]


def evaluate_hand(
    cards: Sequence[Card],
    use_wild: bool = False,
    wild_rank: str | None = None,
) -> HandEvaluation:
    """
    Best hand among ``cards`` (3, 4, 5, 7 or more). With ``use_wild`` every
    card of ``wild_rank`` is wild; when no rank is given the 3-5-7 default for
    the card count applies.
    """
    if not cards:
        return HandEvaluation(HandRank.HIGH_CARD, 0)
    if use_wild:
        if wild_rank is None:
            wild_rank = default_wild_rank(len(cards))
        if wild_rank not in RANK_ORDER:
            raise ValueError(f"Invalid wild rank: {wild_rank!r}")
    else:
        wild_rank = None

    def evaluate_group(group: Tuple[Card, ...]) -> HandEvaluation:
        naturals = [c for c in group if c.rank != wild_rank]
        rank, kickers = _evaluate_group(naturals, len(group) - len(naturals))
        return HandEvaluation(rank, hand_value(rank, kickers), tuple(kickers))

    return max((evaluate_group(g) for g in combinations(cards, min(len(cards), 5))), key=lambda ev: ev.value)


def compare_hands(a: HandEvaluation, b: HandEvaluation) -> int:
    """1 if a wins, -1 if b wins, 0 for a tie."""
    if a.value != b.value:
        return 1 if a.value > b.value else -1
    return 0


def format_hand_rank(rank: HandRank) -> str:
    return HAND_RANK_NAMES[rank]


def rank_name(value: int) -> str:
    """Display name for a poker value: 14 -> "A", 10 -> "10"."""
    if value in (1, ACE_HIGH):
        return "A"
    return {13: "K", 12: "Q", 11: "J"}.get(value, str(value))


def rank_name_plural(value: int) -> str:
    return rank_name(value) + "s"


def format_hand_rank_detailed(
    cards: Sequence[Card],
    use_wild: bool = False,
    wild_rank: str | None = None,
) -> str:
    """e.g. "Two Pair, Js and 8s", "Straight, K high", "Pair of 3s"."""
    if not cards:
        return "No Cards"
    ev = evaluate_hand(cards, use_wild=use_wild, wild_rank=wild_rank)
    k = ev.kickers
    if ev.rank == HandRank.FIVE_OF_A_KIND:
        return f"Five of a Kind, {rank_name_plural(k[0])}"
    if ev.rank == HandRank.STRAIGHT_FLUSH:
        return f"Straight Flush, {rank_name(k[0])} high"
    if ev.rank == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {rank_name_plural(k[0])}"
    if ev.rank == HandRank.FULL_HOUSE:
        return f"Full House, {rank_name_plural(k[0])} full of {rank_name_plural(k[1])}"
    if ev.rank == HandRank.FLUSH:
        return f"Flush, {rank_name(k[0])} high"
    if ev.rank == HandRank.STRAIGHT:
        return f"Straight, {rank_name(k[0])} high"
    if ev.rank == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {rank_name_plural(k[0])}"
    if ev.rank == HandRank.TWO_PAIR:
        return f"Two Pair, {rank_name_plural(k[0])} and {rank_name_plural(k[1])}"
    if ev.rank == HandRank.PAIR:
        return f"Pair of {rank_name_plural(k[0])}"
    return f"{rank_name(k[0])} High"


__all__ = [
    "HandRank",
    "HandEvaluation",
    "HAND_RANK_NAMES",
    "evaluate_hand",
    "compare_hands",
    "hand_value",
    "wild_rank_for_round",
    "default_wild_rank",
    "format_hand_rank",
    "format_hand_rank_detailed",
    "rank_name",
    "rank_name_plural",
]
