"""
Token registry: who owns which token, where it sits, and whether it is sliding.

Tokens are identified by their index in the registry (placement order).
The registry is the single owner of token objects; everything else refers to
tokens by index.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence

import numpy as np

from .board import check_slot, contains, is_free, slot_position
from .errors import IllegalMoveError, SlotOccupiedError


class Player(Enum):
    A = 1
    B = 2

    @property
    def other(self) -> "Player":
        return Player.B if self is Player.A else Player.A

    @property
    def label(self) -> str:
        return f"Player {self.name}"


def _vec(xy: Sequence[float]) -> np.ndarray:
    return np.array(xy, dtype=float)


@dataclass(eq=False)
class Token:
    owner: Player
    slot: int
    destination: Optional[int] = None
    selected: bool = False
    moving: bool = False
    position: np.ndarray = field(default=None)  # type: ignore[assignment]
    target: np.ndarray = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.position is None:
            self.position = _vec(slot_position(self.slot))
        if self.target is None:
            self.target = self.position.copy()


class TokenRegistry:
    def __init__(self) -> None:
        self._tokens: List[Token] = []

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def is_valid_index(self, index: Optional[int]) -> bool:
        return index is not None and 0 <= index < len(self._tokens)

    def clear(self) -> None:
        self._tokens.clear()

    def count(self, owner: Player) -> int:
        return sum(1 for t in self._tokens if t.owner == owner)

    def place_token(self, owner: Player, slot: int) -> Token:
        if not is_free(slot, self._tokens):
            raise SlotOccupiedError(f"Slot {slot} is occupied or reserved")
        token = Token(owner=owner, slot=slot)
        self._tokens.append(token)
        return token

    def begin_move(self, index: int, destination: int) -> Token:
        """Start sliding token ``index``; ``destination`` is reserved immediately."""
        token = self._tokens[index]
        if token.moving:
            raise IllegalMoveError(f"Token {index} is already moving")
        if not is_free(destination, self._tokens):
            raise SlotOccupiedError(f"Slot {destination} is occupied or reserved")
        token.moving = True
        token.destination = destination
        token.target = _vec(slot_position(destination))
        token.selected = False
        return token

    def complete_move(self, index: int) -> Token:
        token = self._tokens[index]
        if not token.moving or token.destination is None:
            raise IllegalMoveError(f"Token {index} is not moving")
        token.slot = check_slot(token.destination)
        token.destination = None
        token.moving = False
        token.position = token.target.copy()
        return token

    def moving_tokens(self) -> List[int]:
        return [i for i, t in enumerate(self._tokens) if t.moving]

    def index_on_slot(self, slot: int, owner: Optional[Player] = None) -> Optional[int]:
        for i, t in enumerate(self._tokens):
            if t.slot == slot and not t.moving and (owner is None or t.owner == owner):
                return i
        return None

    def token_at(self, position: Sequence[float], owner: Optional[Player] = None) -> Optional[int]:
        """Index of the first token whose box around its drawn position contains ``position``."""
        for i, t in enumerate(self._tokens):
            if owner is not None and t.owner != owner:
                continue
            if contains(t.position, position):
                return i
        return None
