"""Runtime configuration with environment-first lookups.

Order for the event log: TMM_LOG_FILE -> TMM_LOG_DIR/game.log -> ./game.log.
Speed and frame rate come from TMM_SPEED / TMM_FPS when set; CLI flags win
over both.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple

from .errors import ConfigError
from .motion import DEFAULT_SPEED

LOG_FILENAME = "game.log"
DEFAULT_FPS = 60
WINDOW_SIZE = (600, 800)


def log_path() -> Path:
    p = os.getenv("TMM_LOG_FILE")
    if p:
        return Path(p)
    d = os.getenv("TMM_LOG_DIR")
    if d:
        return Path(d) / LOG_FILENAME
    return Path.cwd() / LOG_FILENAME


def _env_number(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a positive number, got {raw!r}")
    return value


@dataclass(frozen=True)
class GameConfig:
    speed: float = DEFAULT_SPEED
    fps: int = DEFAULT_FPS
    window_size: Tuple[int, int] = WINDOW_SIZE
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "GameConfig":
        return cls(
            speed=_env_number("TMM_SPEED", float, DEFAULT_SPEED),
            fps=_env_number("TMM_FPS", int, DEFAULT_FPS),
            log_file=log_path(),
        )

    def with_overrides(
        self,
        speed: Optional[float] = None,
        fps: Optional[int] = None,
        log_file: Optional[Path] = None,
    ) -> "GameConfig":
        cfg = self
        if speed is not None:
            if not math.isfinite(speed) or speed <= 0:
                raise ConfigError(f"speed must be a positive number, got {speed}")
            cfg = replace(cfg, speed=float(speed))
        if fps is not None:
            if fps <= 0:
                raise ConfigError(f"fps must be positive, got {fps}")
            cfg = replace(cfg, fps=int(fps))
        if log_file is not None:
            cfg = replace(cfg, log_file=log_file)
        return cfg
