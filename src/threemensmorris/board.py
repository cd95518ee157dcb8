"""
Board basics: slot layout, prime weights, adjacency, winning lines, occupancy.
Teaching notes:
- The board is 9 slots, indexed row-major:
    | 0 | 1 | 2 |
    | 3 | 4 | 5 |
    | 6 | 7 | 8 |
- Each slot carries a distinct prime. A set of slots is identified by the
  product of its primes, so "holds this line" becomes a divisibility test.
- A token moves one step along a board line: corners and edges reach their two
  line neighbours plus the centre; the centre reaches everything.
- Occupancy counts reservations: a sliding token blocks its destination from
  the moment the slide starts.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from .errors import InvalidSlotError

if TYPE_CHECKING:  # pragma: no cover
    from .tokens import Token

SLOT_SIZE = 50.0
HALF_SLOT = SLOT_SIZE / 2


@dataclass(frozen=True)
class Slot:
    index: int
    position: Tuple[float, float]
    prime: int


SLOTS: Tuple[Slot, ...] = (
    Slot(0, (50.0, 50.0), 13), Slot(1, (300.0, 50.0), 3), Slot(2, (550.0, 50.0), 23),
    Slot(3, (50.0, 300.0), 17), Slot(4, (300.0, 300.0), 11), Slot(5, (550.0, 300.0), 5),
    Slot(6, (50.0, 550.0), 29), Slot(7, (300.0, 550.0), 7), Slot(8, (550.0, 550.0), 19),
)

CENTER = 4

WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)

ADJACENCY: Dict[int, FrozenSet[int]] = {
    0: frozenset({1, 3, 4}),
    1: frozenset({0, 2, 4}),
    2: frozenset({1, 4, 5}),
    3: frozenset({0, 4, 6}),
    4: frozenset({0, 1, 2, 3, 5, 6, 7, 8}),
    5: frozenset({2, 4, 8}),
    6: frozenset({3, 4, 7}),
    7: frozenset({4, 6, 8}),
    8: frozenset({4, 5, 7}),
}


def check_slot(slot: int) -> int:
    if not isinstance(slot, int) or isinstance(slot, bool) or not 0 <= slot < len(SLOTS):
        raise InvalidSlotError(f"Slot index out of range 0..8: {slot!r}")
    return slot


def is_adjacent(a: int, b: int) -> bool:
    """True if a token on slot ``a`` can slide to slot ``b`` in one move."""
    return b in ADJACENCY[check_slot(a)]


def slot_position(slot: int) -> Tuple[float, float]:
    return SLOTS[check_slot(slot)].position


def contains(center: Sequence[float], point: Sequence[float], half: float = HALF_SLOT) -> bool:
    # half-open box, left/top edges inclusive
    cx, cy = float(center[0]), float(center[1])
    x, y = float(point[0]), float(point[1])
    return cx - half <= x < cx + half and cy - half <= y < cy + half


def slot_at(position: Sequence[float]) -> Optional[int]:
    for s in SLOTS:
        if contains(s.position, position):
            return s.index
    return None


def occupied_slots(tokens: Iterable["Token"]) -> Set[int]:
    taken: Set[int] = set()
    for t in tokens:
        taken.add(t.slot)
        if t.moving and t.destination is not None:
            taken.add(t.destination)
    return taken


def is_free(slot: int, tokens: Iterable["Token"]) -> bool:
    return check_slot(slot) not in occupied_slots(tokens)


def free_slot_at(position: Sequence[float], tokens: Iterable["Token"]) -> Optional[int]:
    """Return the unoccupied slot under ``position``, or None."""
    slot = slot_at(position)
    if slot is None:
        return None
    return slot if slot not in occupied_slots(tokens) else None


def free_slots(tokens: Iterable["Token"]) -> List[int]:
    taken = occupied_slots(tokens)
    return [s.index for s in SLOTS if s.index not in taken]


def serialize_occupancy(tokens: Iterable["Token"]) -> str:
    """9-char board string: 0 empty, 1 player A, 2 player B (by current slot)."""
    cells = [0] * len(SLOTS)
    for t in tokens:
        cells[t.slot] = t.owner.value
    return ''.join(str(c) for c in cells)
