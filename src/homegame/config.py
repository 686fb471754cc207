"""
Gin Rummy rule constants and the match configuration.

``GinRummyConfig`` is closed: every recognised option is a field with its
default applied at construction, and ``from_dict`` refuses unknown keys.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

CARDS_PER_PLAYER = 10
GIN_BONUS = 25
UNDERCUT_BONUS = 25
KNOCK_DEADWOOD_LIMIT = 10
# Once the stock is down to this many cards after a discard the hand is void.
STOCK_EXHAUSTION_THRESHOLD = 2

# Match presets: mode -> points to win ("custom" takes an explicit target).
MATCH_MODES: Dict[str, int] = {
    "standard": 100,
    "short": 50,
    "quick": 25,
}


@dataclass(frozen=True)
class GinRummyConfig:
    """Per-match Gin Rummy options."""

    ante_amount: int = 1
    points_to_win: int = 100
    gin_bonus: int = GIN_BONUS
    undercut_bonus: int = UNDERCUT_BONUS
    # Chips per point of final score differential, paid on top of the ante at match end.
    point_value: int = 0
    knock_limit: int = KNOCK_DEADWOOD_LIMIT
    stock_reserve: int = STOCK_EXHAUSTION_THRESHOLD

    def __post_init__(self) -> None:
        if self.points_to_win <= 0:
            raise ValueError(f"points_to_win must be positive, got {self.points_to_win}")
        for name in ("ante_amount", "gin_bonus", "undercut_bonus", "point_value", "knock_limit", "stock_reserve"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GinRummyConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown Gin Rummy config option(s): {', '.join(unknown)}")
        return cls(**{k: int(v) for k, v in d.items()})

    @classmethod
    def for_match_mode(cls, mode: str, **overrides: int) -> "GinRummyConfig":
        """Preset match length ("standard", "short", "quick")."""
        if mode not in MATCH_MODES:
            raise ValueError(f"Unknown match mode {mode!r}; expected one of {sorted(MATCH_MODES)}")
        return cls(points_to_win=MATCH_MODES[mode], **overrides)


__all__ = [
    "CARDS_PER_PLAYER",
    "GIN_BONUS",
    "UNDERCUT_BONUS",
    "KNOCK_DEADWOOD_LIMIT",
    "STOCK_EXHAUSTION_THRESHOLD",
    "MATCH_MODES",
    "GinRummyConfig",
]
