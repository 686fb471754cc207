"""Shared five-dice primitives for Ship-Captain-Crew and Horses."""
from __future__ import annotations

import random
from typing import Callable, Iterator, List, Sequence, TypeVar

NUM_DICE = 5
MAX_ROLLS = 3

R = TypeVar("R")


def roll_die(rng: random.Random) -> int:
    return rng.randint(1, 6)


def roll_values(
    count: int,
    rng: random.Random | None = None,
    values: Sequence[int] | None = None,
) -> Iterator[int]:
    """
    Values for ``count`` freshly rolled dice. ``values`` replays a known roll
    (in die order) instead of drawing from ``rng``.
    """
    if values is not None:
        if len(values) != count:
            raise ValueError(f"Expected {count} die values, got {len(values)}")
        for v in values:
            if not 1 <= v <= 6:
                raise ValueError(f"Die value out of range: {v}")
        return iter(list(values))
    if rng is None:
        rng = random.Random()
    return iter([roll_die(rng) for _ in range(count)])


def winners_by_rank(results: Sequence[R], rank: Callable[[R], int]) -> List[int]:
    """Indices of every result sharing the highest rank (several on a tie)."""
    if not results:
        return []
    best = max(rank(r) for r in results)
    return [i for i, r in enumerate(results) if rank(r) == best]


def format_dice_values(values: Sequence[int]) -> str:
    """Unrolled dice (value 0) show as "?"."""
    return " ".join(str(v) if v else "?" for v in values)
