"""
Gin Rummy hand engine: deal -> first draw -> draw/discard loop -> knock or gin
-> lay-off -> score.

Every transition takes a ``GinRummyState`` and returns ``Ok(new_state)`` or
``Err(kind, message)``; the input state is never modified. The event sequence
number used to order the action log lives in the state (``event_seq``) and
is bumped by every player action.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .cards import Card, shuffled_deck
from .config import CARDS_PER_PLAYER, GinRummyConfig
from .errors import Err, ErrorKind, Ok, Result
from .gin_scoring import KnockResult, can_draw_from_stock, score_knock
from .melds import Meld, can_lay_off, find_lay_off_options, find_optimal_melds, remove_cards

logger = logging.getLogger(__name__)

PHASES = ("dealing", "first_draw", "playing", "knocking", "laying_off", "scoring", "complete")

ACTION_TYPES = (
    "draw_stock",
    "draw_discard",
    "discard",
    "knock",
    "gin",
    "pass_first_draw",
    "lay_off",
    "decline_lay_off",
)


@dataclass(frozen=True)
class GinAction:
    """A player action as recorded in ``last_action``; ``seq`` orders the event log."""

    type: str
    player_id: str
    card: Optional[Card] = None
    seq: int = 0


@dataclass(frozen=True)
class GinPlayerState:
    player_id: str
    hand: Tuple[Card, ...] = ()
    # Melds/deadwood are filled in at knock (knocker) and at scoring (opponent).
    melds: Tuple[Meld, ...] = ()
    deadwood: Tuple[Card, ...] = ()
    deadwood_value: int = 0
    has_knocked: bool = False
    has_gin: bool = False
    laid_off_cards: Tuple[Card, ...] = ()


@dataclass(frozen=True)
class GinRummyState:
    """Authoritative snapshot of one hand (plus the running match score)."""

    phase: str
    dealer_player_id: str
    non_dealer_player_id: str
    player_states: Mapping[str, GinPlayerState]
    turn_order: Tuple[str, str]  # (non-dealer, dealer): non-dealer acts first
    stock_pile: Tuple[Card, ...] = ()  # face down, last element = top
    discard_pile: Tuple[Card, ...] = ()  # face up, last element = top
    current_turn_player_id: str = ""
    turn_phase: str = "draw"  # "draw" | "discard"
    draw_source: Optional[str] = None  # "stock" | "discard" | None
    first_draw_offered_to: Optional[str] = None
    first_draw_passed: Tuple[str, ...] = ()
    config: GinRummyConfig = field(default_factory=GinRummyConfig)
    match_scores: Mapping[str, int] = field(default_factory=dict)
    knock_result: Optional[KnockResult] = None
    last_action: Optional[GinAction] = None
    winner_player_id: Optional[str] = None
    event_seq: int = 0

    def player(self, player_id: str) -> GinPlayerState:
        return self.player_states[player_id]

    def hand(self, player_id: str) -> Tuple[Card, ...]:
        return self.player_states[player_id].hand


# ---- State factory ----


def create_initial_gin_rummy_state(
    dealer_player_id: str,
    non_dealer_player_id: str,
    config: GinRummyConfig | None = None,
    match_scores: Mapping[str, int] | None = None,
    event_seq: int = 0,
) -> GinRummyState:
    """Empty state for a new hand, phase ``dealing``."""
    if dealer_player_id == non_dealer_player_id:
        raise ValueError("Gin Rummy needs two distinct players")
    if config is None:
        config = GinRummyConfig()
    if match_scores is None:
        match_scores = {dealer_player_id: 0, non_dealer_player_id: 0}
    return GinRummyState(
        phase="dealing",
        dealer_player_id=dealer_player_id,
        non_dealer_player_id=non_dealer_player_id,
        player_states={
            dealer_player_id: GinPlayerState(dealer_player_id),
            non_dealer_player_id: GinPlayerState(non_dealer_player_id),
        },
        turn_order=(non_dealer_player_id, dealer_player_id),
        current_turn_player_id=non_dealer_player_id,
        config=config,
        match_scores=dict(match_scores),
        event_seq=event_seq,
    )


# ---- Internal helpers ----


def _err(kind: ErrorKind, message: str) -> Err:
    return Err(kind, message)


def _with_player(state: GinRummyState, player_id: str, **changes: Any) -> Dict[str, GinPlayerState]:
    players = dict(state.player_states)
    players[player_id] = replace(players[player_id], **changes)
    return players


def _record(state: GinRummyState, action_type: str, player_id: str, card: Card | None = None, **changes: Any) -> GinRummyState:
    seq = state.event_seq + 1
    logger.debug("gin seq=%d %s by %s card=%s", seq, action_type, player_id, card)
    # Each snapshot owns its mappings.
    changes.setdefault("player_states", dict(state.player_states))
    changes.setdefault("match_scores", dict(state.match_scores))
    return replace(
        state,
        last_action=GinAction(type=action_type, player_id=player_id, card=card, seq=seq),
        event_seq=seq,
        **changes,
    )


def _check_turn(state: GinRummyState, player_id: str, turn_phase: str, verb: str) -> Err | None:
    if state.phase != "playing":
        return _err(ErrorKind.ILLEGAL_TURN, f"Cannot {verb} in phase: {state.phase}")
    if state.current_turn_player_id != player_id:
        return _err(ErrorKind.ILLEGAL_TURN, "Not your turn")
    if state.turn_phase != turn_phase:
        if turn_phase == "draw":
            return _err(ErrorKind.ILLEGAL_TURN, "You must discard first")
        return _err(ErrorKind.ILLEGAL_TURN, "You must draw first")
    return None


def _is_just_drawn_discard(state: GinRummyState, card: Card) -> bool:
    last = state.last_action
    return state.draw_source == "discard" and last is not None and last.card == card


def get_opponent(state: GinRummyState, player_id: str) -> str:
    return state.non_dealer_player_id if player_id == state.dealer_player_id else state.dealer_player_id


def get_knocker(state: GinRummyState) -> str:
    for pid, ps in state.player_states.items():
        if ps.has_knocked or ps.has_gin:
            return pid
    raise ValueError("No player has knocked")


# ---- Deal ----


def deal_hand(state: GinRummyState, rng: random.Random | None = None) -> Result[GinRummyState]:
    """10 cards each (non-dealer first), one up-card on the discard pile, the rest is stock."""
    if state.phase != "dealing":
        return _err(ErrorKind.ILLEGAL_TURN, f"Cannot deal in phase: {state.phase}")
    deck = shuffled_deck(rng)
    n = CARDS_PER_PLAYER
    non_dealer_hand = tuple(deck[:n])
    dealer_hand = tuple(deck[n:2 * n])
    up_card = deck[2 * n]
    stock = tuple(deck[2 * n + 1:])

    players = dict(state.player_states)
    players[state.dealer_player_id] = replace(players[state.dealer_player_id], hand=dealer_hand)
    players[state.non_dealer_player_id] = replace(players[state.non_dealer_player_id], hand=non_dealer_hand)
    logger.debug("gin deal: up-card %s, stock %d", up_card, len(stock))
    return Ok(
        replace(
            state,
            phase="first_draw",
            player_states=players,
            match_scores=dict(state.match_scores),
            stock_pile=stock,
            discard_pile=(up_card,),
            current_turn_player_id=state.non_dealer_player_id,
            turn_phase="draw",
            draw_source=None,
            first_draw_offered_to=state.non_dealer_player_id,
            first_draw_passed=(),
        )
    )


# ---- First draw: non-dealer may take the up-card, then the dealer, then a forced stock draw ----


def take_first_draw_card(state: GinRummyState, player_id: str) -> Result[GinRummyState]:
    if state.phase != "first_draw":
        return _err(ErrorKind.ILLEGAL_TURN, "Not in first_draw phase")
    if state.first_draw_offered_to != player_id:
        return _err(ErrorKind.ILLEGAL_TURN, "Not your turn to draw")

    up_card = state.discard_pile[-1]
    return Ok(
        _record(
            state,
            "draw_discard",
            player_id,
            up_card,
            phase="playing",
            player_states=_with_player(state, player_id, hand=state.hand(player_id) + (up_card,)),
            discard_pile=state.discard_pile[:-1],
            current_turn_player_id=player_id,
            turn_phase="discard",
            draw_source="discard",
            first_draw_offered_to=None,
            first_draw_passed=(),
        )
    )


def pass_first_draw(state: GinRummyState, player_id: str) -> Result[GinRummyState]:
    if state.phase != "first_draw":
        return _err(ErrorKind.ILLEGAL_TURN, "Not in first_draw phase")
    if state.first_draw_offered_to != player_id:
        return _err(ErrorKind.ILLEGAL_TURN, "Not your turn")

    passed = state.first_draw_passed + (player_id,)
    if len(passed) == 1:
        return Ok(
            _record(
                state,
                "pass_first_draw",
                player_id,
                first_draw_offered_to=state.dealer_player_id,
                first_draw_passed=passed,
            )
        )

    # Both passed: the non-dealer draws from the stock and play begins.
    non_dealer = state.non_dealer_player_id
    top = state.stock_pile[-1]
    return Ok(
        _record(
            state,
            "draw_stock",
            non_dealer,
            phase="playing",
            player_states=_with_player(state, non_dealer, hand=state.hand(non_dealer) + (top,)),
            stock_pile=state.stock_pile[:-1],
            current_turn_player_id=non_dealer,
            turn_phase="discard",
            draw_source="stock",
            first_draw_offered_to=None,
            first_draw_passed=(),
        )
    )


# ---- Draw ----


def draw_from_stock(state: GinRummyState, player_id: str) -> Result[GinRummyState]:
    err = _check_turn(state, player_id, "draw", "draw")
    if err is not None:
        return err
    if not can_draw_from_stock(state.stock_pile, state.config.stock_reserve):
        return _err(ErrorKind.RESOURCE_EXHAUSTED, "Stock pile exhausted; hand is void")

    top = state.stock_pile[-1]
    return Ok(
        _record(
            state,
            "draw_stock",
            player_id,
            player_states=_with_player(state, player_id, hand=state.hand(player_id) + (top,)),
            stock_pile=state.stock_pile[:-1],
            turn_phase="discard",
            draw_source="stock",
        )
    )


def draw_from_discard(state: GinRummyState, player_id: str) -> Result[GinRummyState]:
    err = _check_turn(state, player_id, "draw", "draw")
    if err is not None:
        return err
    if not state.discard_pile:
        return _err(ErrorKind.RESOURCE_EXHAUSTED, "Discard pile is empty")

    top = state.discard_pile[-1]
    return Ok(
        _record(
            state,
            "draw_discard",
            player_id,
            top,
            player_states=_with_player(state, player_id, hand=state.hand(player_id) + (top,)),
            discard_pile=state.discard_pile[:-1],
            turn_phase="discard",
            draw_source="discard",
        )
    )


# ---- Discard ----


def _check_discard(state: GinRummyState, player_id: str, card: Card, verb: str) -> Err | None:
    err = _check_turn(state, player_id, "discard", verb)
    if err is not None:
        return err
    if card not in state.hand(player_id):
        return _err(ErrorKind.ILLEGAL_CARD, "Card not in hand")
    if _is_just_drawn_discard(state, card):
        return _err(ErrorKind.ILLEGAL_CARD, "Cannot discard the card you just drew from the discard pile")
    return None


def discard_card(state: GinRummyState, player_id: str, card: Card) -> Result[GinRummyState]:
    """Discard and pass the turn. With the stock down to the reserve the hand is void."""
    err = _check_discard(state, player_id, card, "discard")
    if err is not None:
        return err

    new_state = _record(
        state,
        "discard",
        player_id,
        card,
        player_states=_with_player(state, player_id, hand=tuple(remove_cards(state.hand(player_id), [card]))),
        discard_pile=state.discard_pile + (card,),
        current_turn_player_id=get_opponent(state, player_id),
        turn_phase="draw",
        draw_source=None,
    )
    if len(state.stock_pile) <= state.config.stock_reserve:
        logger.info("gin hand void: stock down to %d cards", len(state.stock_pile))
        return Ok(replace(new_state, phase="complete", knock_result=None))
    return Ok(new_state)


# ---- Knock / Gin ----


def declare_knock(state: GinRummyState, player_id: str, card: Card) -> Result[GinRummyState]:
    """
    Discard ``card`` and knock. Zero deadwood is gin and goes straight to
    scoring; otherwise the opponent gets the turn to lay off.
    """
    err = _check_discard(state, player_id, card, "knock")
    if err is not None:
        return err

    knock_hand = tuple(remove_cards(state.hand(player_id), [card]))
    grouping = find_optimal_melds(knock_hand)
    is_gin = grouping.deadwood_value == 0
    limit = state.config.knock_limit
    if grouping.deadwood_value > limit and not is_gin:
        return _err(
            ErrorKind.ILLEGAL_KNOCK,
            f"Deadwood ({grouping.deadwood_value}) exceeds knock limit of {limit}",
        )

    opponent = get_opponent(state, player_id)
    return Ok(
        _record(
            state,
            "gin" if is_gin else "knock",
            player_id,
            card,
            phase="scoring" if is_gin else "knocking",
            current_turn_player_id=player_id if is_gin else opponent,
            player_states=_with_player(
                state,
                player_id,
                hand=knock_hand,
                melds=grouping.melds,
                deadwood=grouping.deadwood,
                deadwood_value=grouping.deadwood_value,
                has_knocked=True,
                has_gin=is_gin,
            ),
            discard_pile=state.discard_pile + (card,),
            draw_source=None,
        )
    )


# ---- Laying off ----


def lay_off_card(state: GinRummyState, player_id: str, card: Card, meld_index: int) -> Result[GinRummyState]:
    """Opponent attaches ``card`` to the knocker's meld at ``meld_index``."""
    if state.phase not in ("knocking", "laying_off"):
        return _err(ErrorKind.ILLEGAL_TURN, "Not in laying off phase")
    knocker = get_knocker(state)
    if player_id == knocker:
        return _err(ErrorKind.ILLEGAL_LAY_OFF, "Knocker cannot lay off cards")
    if player_id not in state.player_states:
        return _err(ErrorKind.ILLEGAL_TURN, "Not your turn")
    if card not in state.hand(player_id):
        return _err(ErrorKind.ILLEGAL_CARD, "Card not in hand")
    knocker_melds = list(state.player(knocker).melds)
    if not 0 <= meld_index < len(knocker_melds):
        return _err(ErrorKind.ILLEGAL_LAY_OFF, f"No meld at index {meld_index}")
    if not can_lay_off(card, knocker_melds[meld_index]):
        return _err(ErrorKind.ILLEGAL_LAY_OFF, f"{card} does not fit {knocker_melds[meld_index]}")

    knocker_melds[meld_index] = knocker_melds[meld_index].with_card(card)
    players = dict(state.player_states)
    opp = players[player_id]
    players[player_id] = replace(
        opp,
        hand=tuple(remove_cards(opp.hand, [card])),
        laid_off_cards=opp.laid_off_cards + (card,),
    )
    players[knocker] = replace(players[knocker], melds=tuple(knocker_melds))
    return Ok(_record(state, "lay_off", player_id, card, phase="laying_off", player_states=players))


def finish_laying_off(state: GinRummyState, player_id: str) -> Result[GinRummyState]:
    """Opponent declines further lay-offs; the hand moves to scoring."""
    if state.phase not in ("knocking", "laying_off"):
        return _err(ErrorKind.ILLEGAL_TURN, "Not in laying off phase")
    if player_id != get_opponent(state, get_knocker(state)):
        return _err(ErrorKind.ILLEGAL_TURN, "Only the knocker's opponent may finish laying off")
    return Ok(_record(state, "decline_lay_off", player_id, phase="scoring"))


# ---- Scoring ----


def score_hand(state: GinRummyState) -> Result[GinRummyState]:
    """Score the knock, update match totals and set the match winner if the target is reached."""
    if state.phase != "scoring":
        return _err(ErrorKind.ILLEGAL_TURN, "Not in scoring phase")

    knocker_id = get_knocker(state)
    opponent_id = get_opponent(state, knocker_id)
    knocker = state.player(knocker_id)
    opponent = state.player(opponent_id)

    result = score_knock(
        knocker_id,
        opponent_id,
        knocker.hand,
        opponent.hand,
        opponent.laid_off_cards,
        knocker.has_gin,
        config=state.config,
    )

    scores = dict(state.match_scores)
    scores[result.winner_id] = scores.get(result.winner_id, 0) + result.points_awarded
    match_winner = result.winner_id if scores[result.winner_id] >= state.config.points_to_win else None

    # Opponent's arrangement, for display.
    opponent_grouping = find_optimal_melds(remove_cards(opponent.hand, opponent.laid_off_cards))
    logger.info(
        "gin hand scored: winner=%s points=%d gin=%s undercut=%s",
        result.winner_id,
        result.points_awarded,
        result.is_gin,
        result.is_undercut,
    )
    return Ok(
        replace(
            state,
            phase="complete",
            knock_result=result,
            match_scores=scores,
            winner_player_id=match_winner,
            player_states=_with_player(
                state,
                opponent_id,
                melds=opponent_grouping.melds,
                deadwood=opponent_grouping.deadwood,
                deadwood_value=opponent_grouping.deadwood_value,
            ),
        )
    )


# ---- Queries ----


def is_stock_exhausted(state: GinRummyState) -> bool:
    return len(state.stock_pile) <= state.config.stock_reserve


def stock_remaining(state: GinRummyState) -> int:
    return len(state.stock_pile)


def get_discard_top(state: GinRummyState) -> Card | None:
    return state.discard_pile[-1] if state.discard_pile else None


def get_next_dealer(state: GinRummyState) -> str:
    """Loser of the hand deals next; after a void hand the non-dealer deals."""
    if state.knock_result is None:
        return state.non_dealer_player_id
    if state.knock_result.winner_id == state.dealer_player_id:
        return state.non_dealer_player_id
    return state.dealer_player_id


def start_next_hand(previous: GinRummyState, rng: random.Random | None = None) -> Result[GinRummyState]:
    """Fresh, dealt state for the next hand of the same match."""
    if previous.phase != "complete":
        return _err(ErrorKind.ILLEGAL_TURN, "Previous hand is not complete")
    if previous.winner_player_id is not None:
        return _err(ErrorKind.ILLEGAL_TURN, "Match is already over")
    dealer = get_next_dealer(previous)
    other = previous.dealer_player_id if dealer == previous.non_dealer_player_id else previous.non_dealer_player_id
    fresh = create_initial_gin_rummy_state(
        dealer,
        other,
        config=previous.config,
        match_scores=previous.match_scores,
        event_seq=previous.event_seq,
    )
    return deal_hand(fresh, rng)


def legal_actions(state: GinRummyState, player_id: str) -> List[Dict[str, Any]]:
    """Every action ``player_id`` may submit right now, as ``apply_action`` mappings."""
    actions: List[Dict[str, Any]] = []
    if state.phase == "first_draw":
        if state.first_draw_offered_to == player_id:
            actions.append({"type": "draw_discard", "player_id": player_id})
            actions.append({"type": "pass_first_draw", "player_id": player_id})
        return actions

    if state.phase == "playing" and state.current_turn_player_id == player_id:
        if state.turn_phase == "draw":
            if can_draw_from_stock(state.stock_pile, state.config.stock_reserve):
                actions.append({"type": "draw_stock", "player_id": player_id})
            if state.discard_pile:
                actions.append({"type": "draw_discard", "player_id": player_id})
            return actions
        hand = state.hand(player_id)
        for card in hand:
            if _is_just_drawn_discard(state, card):
                continue
            actions.append({"type": "discard", "player_id": player_id, "card": card})
            rest = remove_cards(hand, [card])
            dw = find_optimal_melds(rest).deadwood_value
            if dw <= state.config.knock_limit:
                actions.append({"type": "gin" if dw == 0 else "knock", "player_id": player_id, "card": card})
        return actions

    if state.phase in ("knocking", "laying_off"):
        knocker = get_knocker(state)
        if player_id != get_opponent(state, knocker):
            return actions
        for card, mi in find_lay_off_options(state.hand(player_id), state.player(knocker).melds):
            actions.append({"type": "lay_off", "player_id": player_id, "card": card, "meld_index": mi})
        actions.append({"type": "decline_lay_off", "player_id": player_id})
    return actions


def _action_card(action: Mapping[str, Any]) -> Card | None:
    card = action.get("card")
    if card is None or isinstance(card, Card):
        return card
    return Card.from_dict(card)


def apply_action(state: GinRummyState, action: Mapping[str, Any]) -> Result[GinRummyState]:
    """
    Dispatch a plain action mapping ({"type", "player_id", "card"?, "meld_index"?})
    to the matching transition. ``card`` may be a Card or its dict form.
    """
    kind = action.get("type")
    player_id = action.get("player_id", "")
    try:
        card = _action_card(action)
    except (KeyError, ValueError, TypeError) as exc:
        return _err(ErrorKind.ILLEGAL_CARD, f"Malformed card in {kind!r} action: {exc}")

    if kind in ("discard", "knock", "gin", "lay_off") and card is None:
        return _err(ErrorKind.ILLEGAL_CARD, f"Action {kind!r} needs a card")

    if kind == "pass_first_draw":
        return pass_first_draw(state, player_id)
    if kind == "draw_discard":
        if state.phase == "first_draw":
            return take_first_draw_card(state, player_id)
        return draw_from_discard(state, player_id)
    if kind == "draw_stock":
        return draw_from_stock(state, player_id)
    if kind == "discard":
        return discard_card(state, player_id, card)
    if kind in ("knock", "gin"):
        return declare_knock(state, player_id, card)
    if kind == "lay_off":
        meld_index = action.get("meld_index")
        if not isinstance(meld_index, int) or isinstance(meld_index, bool):
            return _err(ErrorKind.ILLEGAL_LAY_OFF, f"lay_off needs an integer meld_index, got {meld_index!r}")
        return lay_off_card(state, player_id, card, meld_index)
    if kind == "decline_lay_off":
        return finish_laying_off(state, player_id)
    return _err(ErrorKind.ILLEGAL_TURN, f"Unknown action type {kind!r}")


def all_cards_in_play(state: GinRummyState) -> List[Card]:
    """Stock + discard + hands + laid-off cards; always the 52 unique cards."""
    cards: List[Card] = list(state.stock_pile) + list(state.discard_pile)
    for ps in state.player_states.values():
        cards.extend(ps.hand)
        cards.extend(ps.laid_off_cards)
    return cards


__all__ = [
    "PHASES",
    "ACTION_TYPES",
    "GinAction",
    "GinPlayerState",
    "GinRummyState",
    "create_initial_gin_rummy_state",
    "deal_hand",
    "take_first_draw_card",
    "pass_first_draw",
    "draw_from_stock",
    "draw_from_discard",
    "discard_card",
    "declare_knock",
    "lay_off_card",
    "finish_laying_off",
    "score_hand",
    "get_opponent",
    "get_knocker",
    "is_stock_exhausted",
    "stock_remaining",
    "get_discard_top",
    "get_next_dealer",
    "start_next_hand",
    "legal_actions",
    "apply_action",
    "all_cards_in_play",
]
