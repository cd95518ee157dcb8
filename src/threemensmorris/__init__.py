"""threemensmorris package.

Rule engine for Three Men's Morris (board, win detection, tokens, state
machine, motion), a pygame front end, and a small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import is_adjacent, free_slot_at
from .engine import Banner, FrameView, Game, Phase
from .tokens import Player, TokenRegistry
from .win import WIN_MASKS, compute_win_masks, has_won

__all__ = [
    "Game",
    "Phase",
    "Banner",
    "FrameView",
    "Player",
    "TokenRegistry",
    "is_adjacent",
    "free_slot_at",
    "compute_win_masks",
    "has_won",
    "WIN_MASKS",
]
