"""
Random self-play drivers for the game engines.

Used for smoke testing the state machines end to end and for quick outcome
statistics (how often hands end in gin, undercuts, voids, SCC qualification).
"""
from __future__ import annotations

import random
from typing import Any, Dict, List

import numpy as np

from .cards import make_deck_52
from .config import GinRummyConfig
from .gin_rummy import (
    GinRummyState,
    all_cards_in_play,
    apply_action,
    create_initial_gin_rummy_state,
    deal_hand,
    legal_actions,
    score_hand,
)
from .scc import create_initial_scc_hand, evaluate_scc_hand, is_qualified, lock_in_scc_hand, roll_scc_dice

MAX_STEPS = 10_000

_FULL_DECK = frozenset(make_deck_52())


def _check_conservation(state: GinRummyState) -> None:
    cards = all_cards_in_play(state)
    if len(cards) != 52 or set(cards) != _FULL_DECK:
        raise RuntimeError(f"Deck conservation broken at seq {state.event_seq}: {len(cards)} cards")


def _acting_players(state: GinRummyState) -> List[str]:
    if state.phase == "first_draw" and state.first_draw_offered_to is not None:
        return [state.first_draw_offered_to]
    return [state.current_turn_player_id]


def play_random_gin_hand(
    rng: random.Random,
    config: GinRummyConfig | None = None,
    dealer: str = "p1",
    non_dealer: str = "p2",
) -> GinRummyState:
    """
    Deal and play one hand with both players picking uniformly among their
    legal actions. Knocking is always taken when offered, which keeps hands
    reasonably short. Returns the completed (scored or void) state.
    """
    state = create_initial_gin_rummy_state(dealer, non_dealer, config=config)
    state = deal_hand(state, rng).unwrap()
    _check_conservation(state)

    steps = 0
    while state.phase not in ("scoring", "complete") and steps < MAX_STEPS:
        options = [a for pid in _acting_players(state) for a in legal_actions(state, pid)]
        if not options:
            raise RuntimeError(f"No legal action in phase {state.phase}")
        knocks = [a for a in options if a["type"] in ("knock", "gin")]
        action = rng.choice(knocks) if knocks else rng.choice(options)
        state = apply_action(state, action).unwrap()
        _check_conservation(state)
        steps += 1

    if state.phase == "scoring":
        state = score_hand(state).unwrap()
    return state


def simulate_gin_hands(n: int, seed: int = 0, config: GinRummyConfig | None = None) -> Dict[str, Any]:
    """Play ``n`` random hands and summarize the outcomes."""
    if n <= 0:
        raise ValueError("n must be positive")
    rng = random.Random(seed)
    outcomes = np.zeros((n, 4), dtype=bool)  # knock, gin, undercut, void
    points = np.zeros(n, dtype=np.int64)
    for i in range(n):
        final = play_random_gin_hand(rng, config=config)
        result = final.knock_result
        if result is None:
            outcomes[i, 3] = True
            continue
        outcomes[i] = (not result.is_gin, result.is_gin, result.is_undercut, False)
        points[i] = result.points_awarded

    scored = ~outcomes[:, 3]
    return {
        "hands": n,
        "knock_rate": float(outcomes[:, 0].mean()),
        "gin_rate": float(outcomes[:, 1].mean()),
        "undercut_rate": float(outcomes[:, 2].mean()),
        "void_rate": float(outcomes[:, 3].mean()),
        "mean_points": float(points[scored].mean()) if scored.any() else 0.0,
    }


def simulate_scc_turns(n: int, seed: int = 0) -> Dict[str, Any]:
    """
    Roll ``n`` SCC turns. A qualified hand stops early when its cargo is 8 or
    better; otherwise every roll is used.
    """
    if n <= 0:
        raise ValueError("n must be positive")
    rng = random.Random(seed)
    cargo: List[int] = []
    for _ in range(n):
        hand = create_initial_scc_hand()
        while not hand.is_complete:
            hand = roll_scc_dice(hand, rng)
            if is_qualified(hand) and evaluate_scc_hand(hand).cargo_sum >= 8:
                hand = lock_in_scc_hand(hand)
        result = evaluate_scc_hand(hand)
        if result.is_qualified:
            cargo.append(result.cargo_sum)

    arr = np.asarray(cargo, dtype=np.int64)
    summary: Dict[str, Any] = {
        "turns": n,
        "qualified_rate": len(cargo) / n,
        "cargo_mean": float(arr.mean()) if arr.size else 0.0,
    }
    if arr.size:
        p25, p50, p75 = np.percentile(arr, [25, 50, 75])
        summary.update(cargo_p25=float(p25), cargo_median=float(p50), cargo_p75=float(p75))
    return summary


__all__ = [
    "play_random_gin_hand",
    "simulate_gin_hands",
    "simulate_scc_turns",
]
