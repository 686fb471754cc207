"""
Failure taxonomy and the Ok/Err result returned by every state transition.

All failures are caller errors (the command is invalid for the current state);
none of them is transient, so retrying the same command never helps.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    ILLEGAL_TURN = "illegal_turn"            # not your turn, or wrong phase / turn phase
    ILLEGAL_CARD = "illegal_card"            # card not in hand, or re-discarding the drawn discard
    ILLEGAL_KNOCK = "illegal_knock"          # deadwood over the knock limit
    ILLEGAL_LAY_OFF = "illegal_lay_off"      # knocker laying off, or card does not fit the meld
    RESOURCE_EXHAUSTED = "resource_exhausted"  # pile too small to draw from


class IllegalMove(ValueError):
    """Raised by Result.unwrap() for callers that prefer exceptions."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise IllegalMove(self.kind, self.message)


Result = Union[Ok[T], Err]


__all__ = ["ErrorKind", "IllegalMove", "Ok", "Err", "Result"]
