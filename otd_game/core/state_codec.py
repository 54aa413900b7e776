"""Text serialization of :class:`GameState` for the key-value store.

The stored document is JSON with camelCase keys; the answer history is kept in
its nested ``year -> month -> day`` shape, e.g.::

    {
      "totalQuestions": 5,
      "currentQuestionIndex": 2,
      "answerState": [true, false, false, ...],
      "articles": [{"title": "Apollo_11", ...}],
      "answerStateHistory": {"2024": {"7": {"20": [true, true, ...]}}},
      "currentQuestionState": {"event1": {...}, "event2": {...},
                               "month": 7, "day": 20,
                               "yearSelected": null, "goToNext": false}
    }
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from otd_game.constants.game_constants import DEFAULT_QUESTIONS_PER_DAY, MAX_QUESTIONS
from otd_game.core.errors import DeserializationError
from otd_game.core.history import flatten_history, nest_history
from otd_game.core.models import Event, GameState, PageRef, QuestionState, empty_answer_state

logger = logging.getLogger(__name__)


class _StoredModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class StoredPage(_StoredModel):
    title: str
    display_title: str | None = None
    description: str | None = None
    extract: str | None = None
    thumbnail_url: str | None = None


class StoredEvent(_StoredModel):
    year: int
    text: str
    pages: list[StoredPage] = Field(default_factory=list)


class StoredQuestionState(_StoredModel):
    event1: StoredEvent
    event2: StoredEvent
    month: int = 0
    day: int = 0
    year_selected: int | None = None
    go_to_next: bool = False


class StoredGameState(_StoredModel):
    total_questions: int = Field(default=DEFAULT_QUESTIONS_PER_DAY, ge=1, le=MAX_QUESTIONS)
    current_question_index: int = Field(default=0, ge=0)
    answer_state: list[bool] = Field(
        default_factory=lambda: list(empty_answer_state()),
        min_length=MAX_QUESTIONS,
        max_length=MAX_QUESTIONS,
    )
    articles: list[StoredPage] = Field(default_factory=list)
    answer_state_history: dict[int, dict[int, dict[int, list[bool]]]] = Field(default_factory=dict)
    current_question_state: StoredQuestionState

    @model_validator(mode="after")
    def _check_index(self) -> "StoredGameState":
        if self.current_question_index > self.total_questions:
            raise ValueError(
                f"currentQuestionIndex {self.current_question_index} exceeds "
                f"totalQuestions {self.total_questions}"
            )
        return self


def encode_game_state(state: GameState) -> str:
    """Serialize ``state`` to the stored JSON text."""
    question = state.current_question_state
    stored = StoredGameState(
        total_questions=state.total_questions,
        current_question_index=state.current_question_index,
        answer_state=list(state.answer_state),
        articles=[_page_to_stored(page) for page in state.articles],
        answer_state_history=nest_history(state.answer_state_history),
        current_question_state=StoredQuestionState(
            event1=_event_to_stored(question.event1),
            event2=_event_to_stored(question.event2),
            month=question.month,
            day=question.day,
            year_selected=question.year_selected,
            go_to_next=question.go_to_next,
        ),
    )
    return stored.model_dump_json(by_alias=True)


def decode_game_state_strict(text: str) -> GameState:
    """Parse stored JSON text, raising :class:`DeserializationError` when invalid."""
    try:
        stored = StoredGameState.model_validate_json(text)
    except ValidationError as exc:
        raise DeserializationError(f"Stored game state is invalid: {exc}") from exc

    question = stored.current_question_state
    return GameState(
        total_questions=stored.total_questions,
        current_question_index=stored.current_question_index,
        answer_state=tuple(stored.answer_state),
        articles=tuple(_page_from_stored(page) for page in stored.articles),
        answer_state_history=flatten_history(stored.answer_state_history),
        current_question_state=QuestionState(
            event1=_event_from_stored(question.event1),
            event2=_event_from_stored(question.event2),
            month=question.month,
            day=question.day,
            year_selected=question.year_selected,
            go_to_next=question.go_to_next,
        ),
    )


def decode_game_state(text: str | None) -> GameState | None:
    """Parse stored JSON text; absent or malformed input yields ``None``."""
    if not text:
        return None
    try:
        return decode_game_state_strict(text)
    except DeserializationError as exc:
        logger.warning("Discarding unreadable game state: %s", exc)
        return None


def _page_to_stored(page: PageRef) -> StoredPage:
    return StoredPage(
        title=page.title,
        display_title=page.display_title,
        description=page.description,
        extract=page.extract,
        thumbnail_url=page.thumbnail_url,
    )


def _page_from_stored(page: StoredPage) -> PageRef:
    return PageRef(
        title=page.title,
        display_title=page.display_title,
        description=page.description,
        extract=page.extract,
        thumbnail_url=page.thumbnail_url,
    )


def _event_to_stored(event: Event) -> StoredEvent:
    return StoredEvent(year=event.year, text=event.text, pages=[_page_to_stored(p) for p in event.pages])


def _event_from_stored(event: StoredEvent) -> Event:
    return Event(year=event.year, text=event.text, pages=tuple(_page_from_stored(p) for p in event.pages))
