"""Persisted game settings and date markers."""

from __future__ import annotations

from datetime import date
import logging

from otd_game.constants.game_constants import DEFAULT_QUESTIONS_PER_DAY, MAX_QUESTIONS
from otd_game.constants.storage_constants import (
    GAME_END_DATE_KEY,
    GAME_START_DATE_KEY,
    GAME_STATE_KEY,
    LAST_VISIT_DATE_KEY,
    QUESTIONS_PER_DAY_KEY,
)
from otd_game.core.services.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

EPOCH_DAY_ZERO = date(1970, 1, 1)


class GamePreferences:
    """Typed access to the values the game keeps in a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def game_state(self) -> str:
        return self._store.get(GAME_STATE_KEY) or ""

    @game_state.setter
    def game_state(self, value: str) -> None:
        self._store.set(GAME_STATE_KEY, value)

    @property
    def last_visit_date(self) -> str:
        return self._store.get(LAST_VISIT_DATE_KEY) or ""

    @last_visit_date.setter
    def last_visit_date(self, value: str) -> None:
        self._store.set(LAST_VISIT_DATE_KEY, value)

    @property
    def game_start_date(self) -> str:
        return self._store.get(GAME_START_DATE_KEY) or ""

    @game_start_date.setter
    def game_start_date(self, value: str) -> None:
        self._store.set(GAME_START_DATE_KEY, value)

    @property
    def game_end_date(self) -> str:
        return self._store.get(GAME_END_DATE_KEY) or ""

    @game_end_date.setter
    def game_end_date(self, value: str) -> None:
        self._store.set(GAME_END_DATE_KEY, value)

    @property
    def questions_per_day(self) -> int:
        raw_value = self._store.get(QUESTIONS_PER_DAY_KEY)
        if not raw_value:
            return DEFAULT_QUESTIONS_PER_DAY
        try:
            parsed_value = int(raw_value)
        except ValueError:
            logger.warning("Invalid questions-per-day setting %r; using default", raw_value)
            return DEFAULT_QUESTIONS_PER_DAY
        return min(max(parsed_value, 1), MAX_QUESTIONS)

    @questions_per_day.setter
    def questions_per_day(self, value: int) -> None:
        if not 1 <= value <= MAX_QUESTIONS:
            raise ValueError(f"Questions per day must be between 1 and {MAX_QUESTIONS}.")
        self._store.set(QUESTIONS_PER_DAY_KEY, str(value))


def _parse_date_or_epoch(raw_value: str) -> date:
    try:
        return date.fromisoformat(raw_value)
    except ValueError:
        return EPOCH_DAY_ZERO


def should_show_entry_dialog(prefs: GamePreferences, today: date) -> bool:
    """Whether the entry prompt should be offered.

    Only the day of the month is compared with the last visit.
    """
    if not prefs.last_visit_date:
        return True
    try:
        previous = date.fromisoformat(prefs.last_visit_date)
    except ValueError:
        return True
    return previous.day != today.day


def game_start_date(prefs: GamePreferences) -> date:
    return _parse_date_or_epoch(prefs.game_start_date)


def game_end_date(prefs: GamePreferences) -> date:
    return _parse_date_or_epoch(prefs.game_end_date)


def is_game_active() -> bool:
    # The availability window is tracked but not enforced.
    return True


def game_for_today(prefs: GamePreferences, today: date) -> int:
    """Number of days since the game window opened."""
    return today.toordinal() - game_start_date(prefs).toordinal()


def days_left(prefs: GamePreferences, today: date) -> int:
    return game_end_date(prefs).toordinal() - today.toordinal()
