"""
Horses dice engine.

Five dice, up to three rolls, any dice may be held between rolls. 1s are
wild. Ranking: more of a kind wins, then the higher face (five 6s > five 5s >
four 6s ...); five natural 1s beat everything. Ties re-ante.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from .dice import MAX_ROLLS, NUM_DICE, format_dice_values, roll_values, winners_by_rank

logger = logging.getLogger(__name__)

WILD_FACE = 1
ALL_WILDS_RANK = 100


@dataclass(frozen=True)
class HorsesDie:
    value: int = 0  # 1-6, or 0 before the first roll
    is_held: bool = False


@dataclass(frozen=True)
class HorsesHand:
    dice: Tuple[HorsesDie, ...]
    rolls_remaining: int = MAX_ROLLS
    is_complete: bool = False


@dataclass(frozen=True)
class HorsesHandResult:
    rank: int  # of_a_kind * 10 + face; high card 10 + face; five 1s = 100
    description: str  # e.g. "4 6s", "6 high"
    of_a_kind_count: int
    high_value: int


def create_initial_horses_hand() -> HorsesHand:
    return HorsesHand(dice=tuple(HorsesDie() for _ in range(NUM_DICE)))


def roll_horses_dice(
    hand: HorsesHand,
    rng: random.Random | None = None,
    values: Sequence[int] | None = None,
) -> HorsesHand:
    """Roll every unheld die; the last roll holds everything."""
    if hand.rolls_remaining <= 0 or hand.is_complete:
        return hand
    free = [i for i, d in enumerate(hand.dice) if not d.is_held]
    faces = roll_values(len(free), rng, values)
    dice = list(hand.dice)
    for i in free:
        dice[i] = replace(dice[i], value=next(faces))
    rolls_remaining = hand.rolls_remaining - 1
    is_complete = rolls_remaining == 0
    if is_complete:
        dice = [replace(d, is_held=True) for d in dice]
    return HorsesHand(dice=tuple(dice), rolls_remaining=rolls_remaining, is_complete=is_complete)


def toggle_hold(hand: HorsesHand, die_index: int) -> HorsesHand:
    """Flip the hold on one die. No-op before the first roll or once complete."""
    if hand.is_complete or hand.rolls_remaining == MAX_ROLLS:
        return hand
    return replace(
        hand,
        dice=tuple(replace(d, is_held=not d.is_held) if i == die_index else d for i, d in enumerate(hand.dice)),
    )


def lock_in_horses_hand(hand: HorsesHand) -> HorsesHand:
    if hand.rolls_remaining == MAX_ROLLS:
        return hand
    return HorsesHand(
        dice=tuple(replace(d, is_held=True) for d in hand.dice),
        rolls_remaining=0,
        is_complete=True,
    )


def evaluate_horses_hand(dice: Sequence[HorsesDie]) -> HorsesHandResult:
    values = [d.value for d in dice]
    wilds = values.count(WILD_FACE)
    if wilds == NUM_DICE:
        return HorsesHandResult(rank=ALL_WILDS_RANK, description="5 1s (Wilds!)", of_a_kind_count=5, high_value=1)

    best_count, best_value = 0, 0
    for face in range(6, 1, -1):
        total = values.count(face) + wilds
        if total > best_count:
            best_count, best_value = total, face
    best_count = min(best_count, NUM_DICE)

    if best_count >= 2:
        result = HorsesHandResult(
            rank=best_count * 10 + best_value,
            description=f"{best_count} {best_value}s",
            of_a_kind_count=best_count,
            high_value=best_value,
        )
    else:
        naturals = [v for v in values if v != WILD_FACE]
        high = max(naturals) if naturals else max(values)
        result = HorsesHandResult(
            rank=10 + high,
            description=f"{high} high",
            of_a_kind_count=best_count,
            high_value=high,
        )
    logger.debug("Horses hand %s -> %s (rank %d)", values, result.description, result.rank)
    return result


def compare_horses_hands(hand1: HorsesHandResult, hand2: HorsesHandResult) -> int:
    if hand1.rank > hand2.rank:
        return 1
    if hand1.rank < hand2.rank:
        return -1
    return 0


def determine_horses_winners(hands: Sequence[HorsesHandResult]) -> List[int]:
    return winners_by_rank(hands, lambda h: h.rank)


def format_dice_display(dice: Sequence[HorsesDie]) -> str:
    return format_dice_values([d.value for d in dice])


def has_rolled_once(hand: HorsesHand) -> bool:
    return hand.rolls_remaining < MAX_ROLLS


def get_held_count(hand: HorsesHand) -> int:
    return sum(1 for d in hand.dice if d.is_held)


__all__ = [
    "HorsesDie",
    "HorsesHand",
    "HorsesHandResult",
    "create_initial_horses_hand",
    "roll_horses_dice",
    "toggle_hold",
    "lock_in_horses_hand",
    "evaluate_horses_hand",
    "compare_horses_hands",
    "determine_horses_winners",
    "format_dice_display",
    "has_rolled_once",
    "get_held_count",
]
