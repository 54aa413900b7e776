"""Business logic for the daily game: loading, answering, advancing and resetting."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date, datetime, timezone
import logging
from threading import Lock

from otd_game.constants.game_constants import PAGES_PER_ANSWER
from otd_game.core.errors import FetchError, GameError, SelectionError
from otd_game.core.history import record_day
from otd_game.core.models import Event, GameState, PageRef, QuestionState, empty_answer_state
from otd_game.core.question_selector import select_question
from otd_game.core.results import (
    CurrentQuestionCorrect,
    CurrentQuestionIncorrect,
    Error,
    GameEnded,
    GameResult,
    GameStarted,
    Loading,
    Success,
)
from otd_game.core.services.event_catalog import EventCatalog
from otd_game.core.services.game_preferences import GamePreferences
from otd_game.core.services.saved_pages import SavedPagesLookup
from otd_game.core.state_codec import decode_game_state, encode_game_state

logger = logging.getLogger(__name__)

ResultListener = Callable[[GameResult], None]


def date_from_timestamp(epoch_seconds: int) -> date:
    """Calendar date (UTC) of an epoch-seconds timestamp."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).date()


class GameManager:
    """Owns the game state of one player session.

    Mutations are sequential: ``submit_answer``, ``advance`` and
    ``reset_current_day_state`` are synchronous, and ``load_game_state`` only
    suspends while fetching the day's events and while a worker thread
    reconciles and stores them. Starting a new load cancels the previous one.
    The state is written to the preferences after every change.
    """

    def __init__(
        self,
        catalog: EventCatalog,
        preferences: GamePreferences,
        saved_pages: SavedPagesLookup | None = None,
        override_timestamp: int | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._lock = Lock()
        self._catalog = catalog
        self._preferences = preferences
        self._saved_pages_lookup = saved_pages
        self._clock = clock
        self._override_date = (
            date_from_timestamp(override_timestamp) if override_timestamp is not None else None
        )

        self._events: list[Event] = []
        self._state: GameState | None = None
        self._saved_pages: list[PageRef] = []
        self._current_date: date = self._resolve_date()
        self._load_task: asyncio.Task[GameResult] | None = None
        self._load_generation = 0
        self._latest_result: GameResult = Loading()
        self._listeners: list[ResultListener] = []

        self._preferences.last_visit_date = clock().isoformat()

    # --- Session info ---

    @property
    def current_date(self) -> date:
        return self._current_date

    @property
    def has_date_override(self) -> bool:
        return self._override_date is not None

    @property
    def latest_result(self) -> GameResult:
        return self._latest_result

    @property
    def saved_pages(self) -> list[PageRef]:
        """Articles of the current state that are in one of the reading lists."""
        return list(self._saved_pages)

    def add_listener(self, listener: ResultListener) -> None:
        self._listeners.append(listener)

    def get_current_game_state(self) -> GameState:
        with self._lock:
            return self._require_state()

    # --- Loading ---

    def start_load(self) -> asyncio.Task[GameResult]:
        """Schedule a load on the running loop, superseding any load in flight."""
        previous = self._load_task
        if previous is not None and not previous.done():
            logger.info("Cancelling superseded game load")
            previous.cancel()
        self._load_generation += 1
        self._load_task = asyncio.get_running_loop().create_task(self._load(self._load_generation))
        return self._load_task

    async def load_game_state(self) -> GameResult:
        """Load (or reload) today's game and return the reconciled result.

        When this load is superseded by a newer one, the newer load's result is
        returned instead.
        """
        task = self.start_load()
        while True:
            try:
                return await task
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if (current is not None and current.cancelling()) or self._load_task is task:
                    raise
                task = self._load_task

    async def _load(self, generation: int) -> GameResult:
        self._post(Loading())
        today = self._resolve_date()

        try:
            events = await self._catalog.fetch_events(today.month, today.day)
        except FetchError as exc:
            return self._post(self._error(exc))
        except Exception as exc:
            return self._post(self._error(FetchError(f"Event catalog failed: {exc}")))

        # Reconciling reads and writes the store, which may block on disk I/O.
        result = await asyncio.to_thread(self._apply_loaded_events, generation, today, events)
        if result is None:
            raise asyncio.CancelledError()
        return self._post(result)

    def _apply_loaded_events(self, generation: int, today: date, events: Sequence[Event]) -> GameResult | None:
        with self._lock:
            if generation != self._load_generation:
                # a newer load owns the session
                return None
            try:
                state, result = self._reconcile(today, events)
            except SelectionError as exc:
                return self._error(exc)
            self._current_date = today
            self._events = list(events)
            self._state = state
            self._saved_pages = self._find_saved_pages(state.articles)
            self._persist()
            return result

    def _reconcile(self, today: date, events: Sequence[Event]) -> tuple[GameState, GameResult]:
        month, day = today.month, today.day
        restored = decode_game_state(self._preferences.game_state)
        if restored is None:
            state = GameState(
                current_question_state=self._compose(events, today, 0),
                total_questions=self._preferences.questions_per_day,
            )
        elif self._override_date is not None:
            state = replace(restored, current_question_state=self._compose(events, today, 0))
        else:
            state = restored

        if state.is_on_day(month, day) and state.current_question_index == 0 and not state.current_question_state.go_to_next:
            # just starting today's game
            state = replace(state, articles=())
            logger.info("Starting game for %s", today.isoformat())
            return state, GameStarted(state)

        if state.is_on_day(month, day) and state.is_complete:
            logger.info("Game for %s is already complete", today.isoformat())
            return state, GameEnded(state)

        if not state.is_on_day(month, day) and state.is_complete:
            # previous day's game finished; start a new one for today
            state = replace(
                state,
                current_question_state=self._compose(events, today, 0),
                total_questions=self._preferences.questions_per_day,
                current_question_index=0,
                answer_state=empty_answer_state(),
                articles=(),
            )
            logger.info("Rolled over to a new game for %s", today.isoformat())
            return state, GameStarted(state)

        logger.info(
            "Resuming game at question %d of %d",
            state.current_question_index + 1,
            state.total_questions,
        )
        return state, Success(state)

    # --- Answering ---

    def submit_answer(self, selected_year: int) -> GameResult:
        """Answer the current question with a year guess."""
        with self._lock:
            result = self._answer_locked(selected_year)
        return self._post(result)

    def advance(self) -> GameResult:
        """Move past an answered question, ending the day after the last one."""
        with self._lock:
            result = self._advance_locked()
        return self._post(result)

    def submit_current_response(self, selected_year: int) -> GameResult:
        """Single entry point: answers the question, or advances once it is answered."""
        with self._lock:
            if self._require_state().current_question_state.go_to_next:
                result = self._advance_locked()
            else:
                result = self._answer_locked(selected_year)
        return self._post(result)

    def _answer_locked(self, selected_year: int) -> GameResult:
        state = self._require_in_progress()
        question = state.current_question_state
        if question.go_to_next:
            raise RuntimeError("The current question has already been answered.")

        is_correct = question.event1.year == selected_year
        answers = list(state.answer_state)
        answers[state.current_question_index] = is_correct
        state = replace(
            state,
            current_question_state=replace(question, year_selected=selected_year, go_to_next=True),
            answer_state=tuple(answers),
            articles=state.articles + question.event1.pages[:PAGES_PER_ANSWER],
        )
        self._state = state
        self._persist()
        return CurrentQuestionCorrect(state) if is_correct else CurrentQuestionIncorrect(state)

    def _advance_locked(self) -> GameResult:
        state = self._require_in_progress()
        if not state.current_question_state.go_to_next:
            raise RuntimeError("The current question has not been answered yet.")

        today = self._current_date
        next_index = state.current_question_index + 1
        try:
            next_question = self._compose(self._events, today, next_index)
        except SelectionError as exc:
            return self._error(exc)

        state = replace(state, current_question_state=next_question, current_question_index=next_index)
        result: GameResult
        if next_index >= state.total_questions:
            history = record_day(
                state.answer_state_history,
                today.year,
                today.month,
                today.day,
                state.answer_state,
            )
            state = replace(state, answer_state_history=history)
            logger.info(
                "Game for %s finished with %d of %d correct",
                today.isoformat(),
                sum(state.answer_state[: state.total_questions]),
                state.total_questions,
            )
            result = GameEnded(state)
        else:
            result = Success(state)
        self._state = state
        self._persist()
        return result

    def reset_current_day_state(self) -> GameResult:
        """Restart today's game; history and collected articles are kept."""
        with self._lock:
            state = self._require_state()
            try:
                first_question = self._compose(self._events, self._current_date, 0)
            except SelectionError as exc:
                result: GameResult = self._error(exc)
            else:
                state = replace(
                    state,
                    current_question_state=first_question,
                    current_question_index=0,
                    answer_state=empty_answer_state(),
                )
                self._state = state
                self._persist()
                result = Success(state)
        return self._post(result)

    # --- Internals ---

    def _resolve_date(self) -> date:
        return self._override_date if self._override_date is not None else self._clock()

    def _compose(self, events: Sequence[Event], today: date, index: int) -> QuestionState:
        return select_question(events, today.month, today.day, index, current_year=today.year)

    def _require_state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("Game state has not been loaded.")
        return self._state

    def _require_in_progress(self) -> GameState:
        state = self._require_state()
        if state.is_complete:
            raise RuntimeError("Today's game is already complete.")
        return state

    def _find_saved_pages(self, articles: Sequence[PageRef]) -> list[PageRef]:
        if self._saved_pages_lookup is None:
            return []
        saved: list[PageRef] = []
        for page in articles:
            try:
                if self._saved_pages_lookup.is_page_saved(page):
                    saved.append(page)
            except Exception as exc:
                logger.warning("Saved-page lookup failed for %s: %s", page.title, exc)
        return saved

    def _persist(self) -> None:
        if self._state is None:
            return
        try:
            self._preferences.game_state = encode_game_state(self._state)
        except OSError:
            logger.exception("Could not persist game state")

    @staticmethod
    def _error(exc: GameError) -> Error:
        logger.error("%s: %s", type(exc).__name__, exc)
        return Error(exc)

    def _post(self, result: GameResult) -> GameResult:
        self._latest_result = result
        for listener in self._listeners:
            listener(result)
        return result
