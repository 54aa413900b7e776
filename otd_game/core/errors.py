"""Exceptions raised by the game core."""

from __future__ import annotations


class GameError(Exception):
    """Base class for recoverable game failures."""


class FetchError(GameError):
    """Raised when the day's events cannot be fetched from the catalog."""


class SelectionError(GameError):
    """Raised when a date has too few eligible events to build a question."""


class DeserializationError(GameError):
    """Raised when persisted game state cannot be parsed."""
