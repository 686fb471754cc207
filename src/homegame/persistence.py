"""
State serialization for the orchestration layer.

Game states are stored between moves as opaque JSON documents. These helpers
turn ``GinRummyState``, ``SCCHand`` and ``HorsesHand`` values into
JSON-compatible dicts (and back) without losing any field.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict

from .cards import Card
from .config import GinRummyConfig
from .gin_rummy import GinAction, GinPlayerState, GinRummyState
from .gin_scoring import KnockResult
from .horses import HorsesDie, HorsesHand
from .melds import Meld
from .scc import SCCDie, SCCHand

SCHEMA_VERSION = 1


def _cards_to_list(cards) -> list[Dict[str, Any]]:
    return [c.to_dict() for c in cards]


def _cards_from_list(items) -> tuple[Card, ...]:
    return tuple(Card.from_dict(d) for d in items)


def _meld_to_dict(meld: Meld) -> Dict[str, Any]:
    return {"type": meld.type, "cards": _cards_to_list(meld.cards)}


def _meld_from_dict(d: Dict[str, Any]) -> Meld:
    return Meld(type=d["type"], cards=_cards_from_list(d["cards"]))


def _player_to_dict(ps: GinPlayerState) -> Dict[str, Any]:
    return {
        "player_id": ps.player_id,
        "hand": _cards_to_list(ps.hand),
        "melds": [_meld_to_dict(m) for m in ps.melds],
        "deadwood": _cards_to_list(ps.deadwood),
        "deadwood_value": ps.deadwood_value,
        "has_knocked": ps.has_knocked,
        "has_gin": ps.has_gin,
        "laid_off_cards": _cards_to_list(ps.laid_off_cards),
    }


def _player_from_dict(d: Dict[str, Any]) -> GinPlayerState:
    return GinPlayerState(
        player_id=d["player_id"],
        hand=_cards_from_list(d.get("hand", [])),
        melds=tuple(_meld_from_dict(m) for m in d.get("melds", [])),
        deadwood=_cards_from_list(d.get("deadwood", [])),
        deadwood_value=int(d.get("deadwood_value", 0)),
        has_knocked=bool(d.get("has_knocked", False)),
        has_gin=bool(d.get("has_gin", False)),
        laid_off_cards=_cards_from_list(d.get("laid_off_cards", [])),
    )


def _action_to_dict(action: GinAction | None) -> Dict[str, Any] | None:
    if action is None:
        return None
    return {
        "type": action.type,
        "player_id": action.player_id,
        "card": action.card.to_dict() if action.card is not None else None,
        "seq": action.seq,
    }


def _action_from_dict(d: Dict[str, Any] | None) -> GinAction | None:
    if d is None:
        return None
    card = d.get("card")
    return GinAction(
        type=d["type"],
        player_id=d["player_id"],
        card=Card.from_dict(card) if card is not None else None,
        seq=int(d.get("seq", 0)),
    )


def gin_state_to_dict(state: GinRummyState, *, metadata: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Serialize a GinRummyState to a JSON-compatible dict.

    Args:
        state: The state to serialize.
        metadata: Optional extra metadata (e.g. round id, hand number).

    Returns:
        Dict with schema_version, exported_at, state, and optional metadata.
    """
    body = {
        "phase": state.phase,
        "dealer_player_id": state.dealer_player_id,
        "non_dealer_player_id": state.non_dealer_player_id,
        "player_states": {pid: _player_to_dict(ps) for pid, ps in state.player_states.items()},
        "turn_order": list(state.turn_order),
        "stock_pile": _cards_to_list(state.stock_pile),
        "discard_pile": _cards_to_list(state.discard_pile),
        "current_turn_player_id": state.current_turn_player_id,
        "turn_phase": state.turn_phase,
        "draw_source": state.draw_source,
        "first_draw_offered_to": state.first_draw_offered_to,
        "first_draw_passed": list(state.first_draw_passed),
        "config": state.config.to_dict(),
        "match_scores": dict(state.match_scores),
        "knock_result": state.knock_result.to_dict() if state.knock_result is not None else None,
        "last_action": _action_to_dict(state.last_action),
        "winner_player_id": state.winner_player_id,
        "event_seq": state.event_seq,
    }
    result: Dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "state": body,
    }
    if metadata:
        result["metadata"] = metadata
    return result


def gin_state_from_dict(d: Dict[str, Any]) -> GinRummyState:
    """Deserialize a GinRummyState from a dict produced by gin_state_to_dict."""
    version = d.get("schema_version")
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported gin state schema_version {version!r}")
    s = d["state"]
    knock = s.get("knock_result")
    return GinRummyState(
        phase=s["phase"],
        dealer_player_id=s["dealer_player_id"],
        non_dealer_player_id=s["non_dealer_player_id"],
        player_states={pid: _player_from_dict(ps) for pid, ps in s["player_states"].items()},
        turn_order=(s["turn_order"][0], s["turn_order"][1]),
        stock_pile=_cards_from_list(s.get("stock_pile", [])),
        discard_pile=_cards_from_list(s.get("discard_pile", [])),
        current_turn_player_id=s["current_turn_player_id"],
        turn_phase=s.get("turn_phase", "draw"),
        draw_source=s.get("draw_source"),
        first_draw_offered_to=s.get("first_draw_offered_to"),
        first_draw_passed=tuple(s.get("first_draw_passed", [])),
        config=GinRummyConfig.from_dict(s.get("config", {})),
        match_scores={k: int(v) for k, v in s.get("match_scores", {}).items()},
        knock_result=KnockResult.from_dict(knock) if knock is not None else None,
        last_action=_action_from_dict(s.get("last_action")),
        winner_player_id=s.get("winner_player_id"),
        event_seq=int(s.get("event_seq", 0)),
    )


def gin_state_to_json(state: GinRummyState, *, metadata: Dict[str, Any] | None = None) -> str:
    return json.dumps(gin_state_to_dict(state, metadata=metadata), indent=2, ensure_ascii=False)


def gin_state_from_json(s: str) -> GinRummyState:
    return gin_state_from_dict(json.loads(s))


def scc_hand_to_dict(hand: SCCHand) -> Dict[str, Any]:
    return {
        "dice": [
            {"value": d.value, "is_held": d.is_held, "is_scc": d.is_scc, "scc_type": d.scc_type}
            for d in hand.dice
        ],
        "rolls_remaining": hand.rolls_remaining,
        "is_complete": hand.is_complete,
        "has_ship": hand.has_ship,
        "has_captain": hand.has_captain,
        "has_crew": hand.has_crew,
    }


def scc_hand_from_dict(d: Dict[str, Any]) -> SCCHand:
    return SCCHand(
        dice=tuple(
            SCCDie(
                value=int(x["value"]),
                is_held=bool(x["is_held"]),
                is_scc=bool(x["is_scc"]),
                scc_type=x.get("scc_type"),
            )
            for x in d["dice"]
        ),
        rolls_remaining=int(d["rolls_remaining"]),
        is_complete=bool(d["is_complete"]),
        has_ship=bool(d["has_ship"]),
        has_captain=bool(d["has_captain"]),
        has_crew=bool(d["has_crew"]),
    )


def horses_hand_to_dict(hand: HorsesHand) -> Dict[str, Any]:
    return {
        "dice": [{"value": d.value, "is_held": d.is_held} for d in hand.dice],
        "rolls_remaining": hand.rolls_remaining,
        "is_complete": hand.is_complete,
    }


def horses_hand_from_dict(d: Dict[str, Any]) -> HorsesHand:
    return HorsesHand(
        dice=tuple(HorsesDie(value=int(x["value"]), is_held=bool(x["is_held"])) for x in d["dice"]),
        rolls_remaining=int(d["rolls_remaining"]),
        is_complete=bool(d["is_complete"]),
    )


__all__ = [
    "SCHEMA_VERSION",
    "gin_state_to_dict",
    "gin_state_from_dict",
    "gin_state_to_json",
    "gin_state_from_json",
    "scc_hand_to_dict",
    "scc_hand_from_dict",
    "horses_hand_to_dict",
    "horses_hand_from_dict",
]
