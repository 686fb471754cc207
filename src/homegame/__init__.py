"""Rule and scoring engines for home card and dice games (Gin Rummy, Ship-Captain-Crew, Horses, Holm, 3-5-7)."""

__version__ = "0.1.0"

from .cards import Card, make_deck_52, parse_card, parse_cards, shuffled_deck
from .config import GinRummyConfig
from .errors import Err, ErrorKind, IllegalMove, Ok, Result
from .melds import Meld, MeldGrouping, can_lay_off, find_optimal_melds
from .gin_scoring import KnockResult, can_knock, has_gin, match_payout, score_knock
from .gin_rummy import (
    GinRummyState,
    GinPlayerState,
    GinAction,
    create_initial_gin_rummy_state,
    deal_hand,
    take_first_draw_card,
    pass_first_draw,
    draw_from_stock,
    draw_from_discard,
    discard_card,
    declare_knock,
    lay_off_card,
    finish_laying_off,
    score_hand,
    start_next_hand,
    legal_actions,
    apply_action,
)
from .scc import (
    SCCHand,
    SCCHandResult,
    create_initial_scc_hand,
    roll_scc_dice,
    lock_in_scc_hand,
    evaluate_scc_hand,
    compare_scc_hands,
    determine_scc_winners,
)
from .horses import (
    HorsesHand,
    HorsesHandResult,
    create_initial_horses_hand,
    roll_horses_dice,
    lock_in_horses_hand,
    evaluate_horses_hand,
    determine_horses_winners,
)
from .hand_eval import HandRank, HandEvaluation, evaluate_hand, compare_hands, format_hand_rank_detailed
