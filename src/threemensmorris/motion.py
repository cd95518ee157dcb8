"""
Straight-line interpolation for sliding tokens.
Teaching notes:
- Each frame a moving token covers ``speed * dt`` pixels toward its target.
- When the remaining distance is no more than that step, the token snaps to
  the target instead of overshooting and is reported as arrived.
- Arrival bookkeeping (slot update, win check, turn) belongs to the caller.
"""
from __future__ import annotations

from typing import List

import numpy as np

from .tokens import TokenRegistry

DEFAULT_SPEED = 400.0


def step_towards(position: np.ndarray, target: np.ndarray, step: float) -> tuple[np.ndarray, bool]:
    """Return (new_position, arrived)."""
    delta = target - position
    dist = float(np.linalg.norm(delta))
    if dist <= step:
        return target.copy(), True
    return position + delta / dist * step, False


def advance(registry: TokenRegistry, dt: float, speed: float = DEFAULT_SPEED) -> List[int]:
    """Move every sliding token one frame; return indices of tokens that arrived."""
    arrived: List[int] = []
    step = max(speed * dt, 0.0)
    for i in registry.moving_tokens():
        token = registry[i]
        token.position, done = step_towards(token.position, token.target, step)
        if done:
            arrived.append(i)
    return arrived
