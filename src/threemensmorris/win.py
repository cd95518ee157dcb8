"""
Win detection by prime products.
Teaching notes:
- Each winning line is stored as the product of its three slot primes.
- A player's position is the product of the primes under their tokens.
- Prime factorisation is unique, so the player holds a line exactly when
  their product is divisible by that line's product.
- A player with fewer than three tokens lacks the factors, so no guard is needed.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional, Sequence, Tuple

from .board import SLOTS, WIN_LINES, Slot

if TYPE_CHECKING:  # pragma: no cover
    from .tokens import Player, Token


def line_product(line: Sequence[int], slots: Sequence[Slot] = SLOTS) -> int:
    p = 1
    for i in line:
        p *= slots[i].prime
    return p


def compute_win_masks(
    lines: Iterable[Sequence[int]] = WIN_LINES,
    slots: Sequence[Slot] = SLOTS,
) -> FrozenSet[int]:
    return frozenset(line_product(line, slots) for line in lines)


WIN_MASKS: FrozenSet[int] = compute_win_masks()


def player_product(tokens: Iterable["Token"], player: "Player") -> int:
    # a sliding token still counts for its origin until complete_move
    product = 1
    for t in tokens:
        if t.owner == player:
            product *= SLOTS[t.slot].prime
    return product


def has_won(
    tokens: Iterable["Token"],
    player: "Player",
    win_masks: Iterable[int] = WIN_MASKS,
) -> bool:
    product = player_product(tokens, player)
    return any(product % mask == 0 for mask in win_masks)


def winning_line(tokens: Iterable["Token"], player: "Player") -> Optional[Tuple[int, int, int]]:
    """Return the first line held by ``player``, or None."""
    product = player_product(tokens, player)
    for line in WIN_LINES:
        if product % line_product(line) == 0:
            return line
    return None
