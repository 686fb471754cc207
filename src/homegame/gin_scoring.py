"""
Knock / Gin / Undercut scoring.

Gin: knocker scores the opponent's deadwood + gin bonus.
Undercut: opponent's deadwood <= knocker's (ties included) -> opponent scores
the difference + undercut bonus.
Otherwise the knocker scores the difference.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Sequence

from .cards import Card
from .config import KNOCK_DEADWOOD_LIMIT, STOCK_EXHAUSTION_THRESHOLD, GinRummyConfig
from .melds import find_optimal_melds, remove_cards

if TYPE_CHECKING:
    from .gin_rummy import GinRummyState


@dataclass(frozen=True)
class KnockResult:
    knocker_id: str
    opponent_id: str
    knocker_deadwood: int
    opponent_deadwood: int
    is_gin: bool
    is_undercut: bool
    points_awarded: int  # points earned by the hand winner
    winner_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "KnockResult":
        return cls(
            knocker_id=d["knocker_id"],
            opponent_id=d["opponent_id"],
            knocker_deadwood=int(d["knocker_deadwood"]),
            opponent_deadwood=int(d["opponent_deadwood"]),
            is_gin=bool(d["is_gin"]),
            is_undercut=bool(d["is_undercut"]),
            points_awarded=int(d["points_awarded"]),
            winner_id=d["winner_id"],
        )


def score_knock(
    knocker_id: str,
    opponent_id: str,
    knocker_hand: Sequence[Card],
    opponent_hand: Sequence[Card],
    opponent_laid_off: Sequence[Card],
    is_gin: bool,
    config: GinRummyConfig | None = None,
) -> KnockResult:
    """
    Score a finished knock. Laid-off cards joined the knocker's melds, so they
    are removed from the opponent's hand before counting its deadwood.
    """
    if config is None:
        config = GinRummyConfig()
    knocker_deadwood = find_optimal_melds(knocker_hand).deadwood_value
    opponent_remaining = remove_cards(opponent_hand, opponent_laid_off)
    opponent_deadwood = find_optimal_melds(opponent_remaining).deadwood_value

    if is_gin:
        return KnockResult(
            knocker_id=knocker_id,
            opponent_id=opponent_id,
            knocker_deadwood=0,
            opponent_deadwood=opponent_deadwood,
            is_gin=True,
            is_undercut=False,
            points_awarded=opponent_deadwood + config.gin_bonus,
            winner_id=knocker_id,
        )

    if opponent_deadwood <= knocker_deadwood:
        return KnockResult(
            knocker_id=knocker_id,
            opponent_id=opponent_id,
            knocker_deadwood=knocker_deadwood,
            opponent_deadwood=opponent_deadwood,
            is_gin=False,
            is_undercut=True,
            points_awarded=knocker_deadwood - opponent_deadwood + config.undercut_bonus,
            winner_id=opponent_id,
        )

    return KnockResult(
        knocker_id=knocker_id,
        opponent_id=opponent_id,
        knocker_deadwood=knocker_deadwood,
        opponent_deadwood=opponent_deadwood,
        is_gin=False,
        is_undercut=False,
        points_awarded=opponent_deadwood - knocker_deadwood,
        winner_id=knocker_id,
    )


def can_knock(hand: Sequence[Card], limit: int = KNOCK_DEADWOOD_LIMIT) -> bool:
    return find_optimal_melds(hand).deadwood_value <= limit


def has_gin(hand: Sequence[Card]) -> bool:
    return find_optimal_melds(hand).deadwood_value == 0


def can_draw_from_stock(stock_pile: Sequence[Card], reserve: int = STOCK_EXHAUSTION_THRESHOLD) -> bool:
    """Drawing must leave at least ``reserve`` cards in the stock."""
    return len(stock_pile) > reserve


def describe_knock_result(result: KnockResult) -> str:
    """One-line hand history entry."""
    if result.is_gin:
        return f"Gin! +{result.points_awarded} pts"
    if result.is_undercut:
        return f"Undercut! +{result.points_awarded} pts"
    return f"Knock ({result.knocker_deadwood} vs {result.opponent_deadwood}) +{result.points_awarded} pts"


def match_payout(state: "GinRummyState") -> Dict[str, int]:
    """
    Chip changes once a match is won: the loser pays the ante plus
    ``point_value`` per point of final score differential.
    """
    winner = state.winner_player_id
    if winner is None:
        raise ValueError("Match has no winner yet")
    loser = state.non_dealer_player_id if winner == state.dealer_player_id else state.dealer_player_id
    cfg = state.config
    amount = cfg.ante_amount
    if cfg.point_value > 0:
        diff = state.match_scores.get(winner, 0) - state.match_scores.get(loser, 0)
        amount += diff * cfg.point_value
    return {winner: amount, loser: -amount}


__all__ = [
    "KnockResult",
    "score_knock",
    "can_knock",
    "has_gin",
    "can_draw_from_stock",
    "describe_knock_result",
    "match_payout",
]
