"""
Plain-text event log for game sessions.

Each line is a timestamped, human-readable event such as
``[Mon Jul 14 12:34:56 2025] - Game started.``. The file is append-only and
never read back by the program.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

EVENT_LOGGER = "threemensmorris.events"
EVENT_FORMAT = "[%(asctime)s] - %(message)s"
EVENT_DATEFMT = "%a %b %d %H:%M:%S %Y"


def event_logger() -> logging.Logger:
    return logging.getLogger(EVENT_LOGGER)


@contextmanager
def open_event_log(path: Optional[Path]) -> Iterator[logging.Logger]:
    """Attach a file handler for ``path`` for the duration of the block.

    With ``path=None`` the logger is yielded without a file handler, so events
    still reach whatever console handlers the root logger has.
    """
    logger = event_logger()
    logger.setLevel(logging.INFO)
    if path is None:
        yield logger
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(EVENT_FORMAT, datefmt=EVENT_DATEFMT))
    logger.addHandler(handler)
    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        handler.close()
