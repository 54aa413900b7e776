"""Helpers for the per-day answer history.

Internally the history is a flat mapping keyed by ``(year, month, day)``; the
nested ``year -> month -> day`` shape is only used when the state is stored.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from otd_game.core.models import AnswerHistory

NestedHistory = dict[int, dict[int, dict[int, list[bool]]]]


def record_day(
    history: Mapping[tuple[int, int, int], tuple[bool, ...]],
    year: int,
    month: int,
    day: int,
    answers: Iterable[bool],
) -> AnswerHistory:
    """Return a copy of ``history`` with the entry for the given day replaced."""
    updated = dict(history)
    updated[(year, month, day)] = tuple(bool(answer) for answer in answers)
    return updated


def nest_history(history: Mapping[tuple[int, int, int], tuple[bool, ...]]) -> NestedHistory:
    nested: NestedHistory = {}
    for (year, month, day), answers in sorted(history.items()):
        nested.setdefault(year, {}).setdefault(month, {})[day] = list(answers)
    return nested


def flatten_history(nested: Mapping[int, Mapping[int, Mapping[int, Iterable[bool]]]]) -> AnswerHistory:
    flat: AnswerHistory = {}
    for year, months in nested.items():
        for month, days in months.items():
            for day, answers in days.items():
                flat[(int(year), int(month), int(day))] = tuple(bool(a) for a in answers)
    return flat
