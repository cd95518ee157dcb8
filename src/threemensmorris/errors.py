"""Exception types for the rule engine and its front ends.

Invalid player input is never an error: the state machine ignores it.
These exceptions mark programming or configuration mistakes.
"""
from __future__ import annotations


class MorrisError(Exception):
    """Base class for all package errors."""


class InvalidSlotError(MorrisError, ValueError):
    pass


class SlotOccupiedError(MorrisError):
    pass


class IllegalMoveError(MorrisError):
    pass


class ConfigError(MorrisError, ValueError):
    pass
