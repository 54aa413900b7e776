"""Deterministic selection of the day's question from the event catalog."""

from __future__ import annotations

import re
from collections.abc import Sequence

from otd_game.core.errors import SelectionError
from otd_game.core.models import Event, QuestionState
from otd_game.core.seeded_random import XorWowRandom

# Event text containing a bare 1-4 digit number would give the answer away.
# `.` stops at every line terminator, not only "\n", as on the mobile clients.
_LINE_CHAR = r"[^\n\r\u0085\u2028\u2029]"
_YEAR_PATTERN = re.compile(rf"{_LINE_CHAR}*\b\d{{1,4}}\b{_LINE_CHAR}*")


def seed_for_date(month: int, day: int) -> int:
    return month * 100 + day


def eligible_events(events: Sequence[Event], current_year: int) -> list[Event]:
    """Return the events that can be asked about, in catalog order."""
    return [
        event
        for event in events
        if 0 < event.year <= current_year and not _YEAR_PATTERN.fullmatch(event.text)
    ]


def select_question(
    events: Sequence[Event],
    month: int,
    day: int,
    index: int,
    current_year: int,
) -> QuestionState:
    """Build the question for ``(month, day)``.

    The shuffle is seeded by the date alone, so every question of a given day
    (whatever its ``index``) is drawn from the same permutation and the same
    date always produces the same pair.
    """
    if index < 0:
        raise ValueError(f"Question index must not be negative, got {index}")

    candidates = eligible_events(events, current_year)
    if len(candidates) < 2:
        raise SelectionError(
            f"Only {len(candidates)} eligible event(s) for {month:02d}-{day:02d}; "
            "at least two are required."
        )

    XorWowRandom(seed_for_date(month, day)).shuffle(candidates)
    return QuestionState(event1=candidates[0], event2=candidates[1], month=month, day=day)
