"""Domain models for the daily history game."""

from __future__ import annotations

from dataclasses import dataclass, field

from otd_game.constants.game_constants import DEFAULT_QUESTIONS_PER_DAY, MAX_QUESTIONS

HistoryKey = tuple[int, int, int]
AnswerHistory = dict[HistoryKey, tuple[bool, ...]]


@dataclass(frozen=True, slots=True)
class PageRef:
    """Summary of a reference page attached to a historical event."""

    title: str
    display_title: str | None = None
    description: str | None = None
    extract: str | None = None
    thumbnail_url: str | None = None


@dataclass(frozen=True, slots=True)
class Event:
    """A historical occurrence for a given month and day."""

    year: int
    text: str
    pages: tuple[PageRef, ...] = ()


@dataclass(frozen=True, slots=True)
class QuestionState:
    """One quiz question: guess the year of ``event1``."""

    event1: Event
    event2: Event
    month: int = 0
    day: int = 0
    year_selected: int | None = None
    go_to_next: bool = False


def empty_answer_state() -> tuple[bool, ...]:
    return (False,) * MAX_QUESTIONS


@dataclass(frozen=True, slots=True)
class GameState:
    """Progress through the current day's game plus the long-term history."""

    current_question_state: QuestionState
    total_questions: int = DEFAULT_QUESTIONS_PER_DAY
    current_question_index: int = 0
    # today's answers (correct vs incorrect)
    answer_state: tuple[bool, ...] = field(default_factory=empty_answer_state)
    # pages mentioned by today's answered questions
    articles: tuple[PageRef, ...] = ()
    # (year, month, day) -> answers for that day
    answer_state_history: AnswerHistory = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.current_question_index >= self.total_questions

    def is_on_day(self, month: int, day: int) -> bool:
        question = self.current_question_state
        return question.month == month and question.day == day
