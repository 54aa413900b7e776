"""Result variants emitted by the game manager.

``GameResult`` is a closed union; consumers are expected to ``match`` on it
and handle every variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from otd_game.core.errors import GameError
from otd_game.core.models import GameState


@dataclass(frozen=True, slots=True)
class Loading:
    """A load is in flight."""


@dataclass(frozen=True, slots=True)
class Success:
    """State changed (or was resumed) without a notable transition."""

    state: GameState


@dataclass(frozen=True, slots=True)
class GameStarted:
    state: GameState


@dataclass(frozen=True, slots=True)
class GameEnded:
    state: GameState


@dataclass(frozen=True, slots=True)
class CurrentQuestionCorrect:
    state: GameState


@dataclass(frozen=True, slots=True)
class CurrentQuestionIncorrect:
    state: GameState


@dataclass(frozen=True, slots=True)
class Error:
    error: GameError


GameResult = Union[
    Loading,
    Success,
    GameStarted,
    GameEnded,
    CurrentQuestionCorrect,
    CurrentQuestionIncorrect,
    Error,
]


def result_kind(result: GameResult) -> str:
    """Return a stable, snake_case name for a result variant."""
    match result:
        case Loading():
            return "loading"
        case Success():
            return "success"
        case GameStarted():
            return "game_started"
        case GameEnded():
            return "game_ended"
        case CurrentQuestionCorrect():
            return "current_question_correct"
        case CurrentQuestionIncorrect():
            return "current_question_incorrect"
        case Error():
            return "error"
    raise TypeError(f"Unknown game result: {result!r}")
