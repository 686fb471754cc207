"""
Ship-Captain-Crew dice engine.

Five dice, up to three rolls. Ship (6), Captain (5) and Crew (4) must be
acquired in that order; they freeze automatically when rolled. The other two
dice are the cargo, scored as their sum (2-12). Without all three positions
the hand is NQ (not qualified) and loses to any qualified hand.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from .dice import MAX_ROLLS, NUM_DICE, format_dice_values, roll_values

logger = logging.getLogger(__name__)

# Position -> face value, in acquisition order.
SCC_SEQUENCE: Tuple[Tuple[str, int], ...] = (("ship", 6), ("captain", 5), ("crew", 4))


@dataclass(frozen=True)
class SCCDie:
    value: int = 0  # 1-6, or 0 before the first roll
    is_held: bool = False
    is_scc: bool = False
    scc_type: Optional[str] = None  # "ship" | "captain" | "crew"


@dataclass(frozen=True)
class SCCHand:
    dice: Tuple[SCCDie, ...]
    rolls_remaining: int = MAX_ROLLS
    is_complete: bool = False
    has_ship: bool = False
    has_captain: bool = False
    has_crew: bool = False


@dataclass(frozen=True)
class SCCHandResult:
    rank: int  # 0 = NQ, otherwise the cargo sum
    description: str
    is_qualified: bool
    cargo_sum: int  # 0 if not qualified


def create_initial_scc_hand() -> SCCHand:
    return SCCHand(dice=tuple(SCCDie() for _ in range(NUM_DICE)))


def roll_scc_dice(
    hand: SCCHand,
    rng: random.Random | None = None,
    values: Sequence[int] | None = None,
) -> SCCHand:
    """
    Re-roll every non-held die, then auto-lock Ship, Captain and Crew in order.

    A position is only checked once every earlier position is held, so a 5 or
    a 4 rolled before the Ship is ignored. Each position locks at most one die.
    ``values`` gives the faces for the non-held dice, in die order.
    No-op once the hand is complete or out of rolls.
    """
    if hand.rolls_remaining <= 0 or hand.is_complete:
        return hand

    free = [i for i, d in enumerate(hand.dice) if not d.is_held]
    faces = roll_values(len(free), rng, values)
    dice: List[SCCDie] = list(hand.dice)
    for i in free:
        dice[i] = replace(dice[i], value=next(faces))

    acquired = {"ship": hand.has_ship, "captain": hand.has_captain, "crew": hand.has_crew}
    for position, face in SCC_SEQUENCE:
        if acquired[position]:
            continue
        idx = next((i for i, d in enumerate(dice) if d.value == face and not d.is_scc), None)
        if idx is None:
            break
        dice[idx] = replace(dice[idx], is_held=True, is_scc=True, scc_type=position)
        acquired[position] = True

    rolls_remaining = hand.rolls_remaining - 1
    is_complete = rolls_remaining == 0
    if is_complete:
        dice = [replace(d, is_held=True) for d in dice]

    return SCCHand(
        dice=tuple(dice),
        rolls_remaining=rolls_remaining,
        is_complete=is_complete,
        has_ship=acquired["ship"],
        has_captain=acquired["captain"],
        has_crew=acquired["crew"],
    )


def is_qualified(hand: SCCHand) -> bool:
    return hand.has_ship and hand.has_captain and hand.has_crew


def has_rolled_once(hand: SCCHand) -> bool:
    return hand.rolls_remaining < MAX_ROLLS


def lock_in_scc_hand(hand: SCCHand) -> SCCHand:
    """Stop rolling early. Only allowed after the first roll and once qualified; otherwise a no-op."""
    if not has_rolled_once(hand) or not is_qualified(hand):
        return hand
    return replace(
        hand,
        dice=tuple(replace(d, is_held=True) for d in hand.dice),
        rolls_remaining=0,
        is_complete=True,
    )


def evaluate_scc_hand(hand: SCCHand) -> SCCHandResult:
    if not is_qualified(hand):
        logger.debug("SCC hand not qualified - missing Ship/Captain/Crew")
        return SCCHandResult(rank=0, description="NQ", is_qualified=False, cargo_sum=0)
    cargo = sum(d.value for d in hand.dice if not d.is_scc)
    logger.debug("SCC qualified with cargo sum %d", cargo)
    return SCCHandResult(rank=cargo, description=str(cargo), is_qualified=True, cargo_sum=cargo)


def compare_scc_hands(hand1: SCCHandResult, hand2: SCCHandResult) -> int:
    """1 if hand1 wins, -1 if hand2 wins, 0 on a tie. Two NQ hands tie."""
    if not hand1.is_qualified and not hand2.is_qualified:
        return 0
    if not hand1.is_qualified:
        return -1
    if not hand2.is_qualified:
        return 1
    if hand1.cargo_sum != hand2.cargo_sum:
        return 1 if hand1.cargo_sum > hand2.cargo_sum else -1
    return 0


def determine_scc_winners(hands: Sequence[SCCHandResult]) -> List[int]:
    """
    Indices of the winning hands. Everyone NQ -> everyone ties (the pot rolls
    over); otherwise every qualified hand with the top cargo shares the win.
    """
    if not hands:
        return []
    qualified = [i for i, h in enumerate(hands) if h.is_qualified]
    if not qualified:
        return list(range(len(hands)))
    best = max(hands[i].cargo_sum for i in qualified)
    return [i for i in qualified if hands[i].cargo_sum == best]


def get_scc_display_order(hand: SCCHand) -> List[Tuple[SCCDie, int]]:
    """Ship, Captain, Crew first, then cargo dice; each paired with its original index."""
    order: List[Tuple[SCCDie, int]] = []
    for position, _ in SCC_SEQUENCE:
        for i, d in enumerate(hand.dice):
            if d.scc_type == position:
                order.append((d, i))
                break
    order.extend((d, i) for i, d in enumerate(hand.dice) if not d.is_scc)
    return order


def format_scc_display(hand: SCCHand) -> str:
    return format_dice_values([d.value for d, _ in get_scc_display_order(hand)])


__all__ = [
    "SCC_SEQUENCE",
    "SCCDie",
    "SCCHand",
    "SCCHandResult",
    "create_initial_scc_hand",
    "roll_scc_dice",
    "lock_in_scc_hand",
    "evaluate_scc_hand",
    "compare_scc_hands",
    "determine_scc_winners",
    "is_qualified",
    "has_rolled_once",
    "get_scc_display_order",
    "format_scc_display",
]
