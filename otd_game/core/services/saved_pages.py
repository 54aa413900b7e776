"""Lookups answering whether a page is in any of the user's reading lists."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from otd_game.core.models import PageRef


class SavedPagesLookup(Protocol):
    def is_page_saved(self, page: PageRef) -> bool: ...


class InMemorySavedPages:
    """Reading-list membership backed by a set of page titles."""

    def __init__(self, titles: Iterable[str] = ()) -> None:
        self._titles: set[str] = {self._normalize(title) for title in titles}

    def save(self, title: str) -> None:
        self._titles.add(self._normalize(title))

    def is_page_saved(self, page: PageRef) -> bool:
        return self._normalize(page.title) in self._titles

    @staticmethod
    def _normalize(title: str) -> str:
        return title.strip().replace(" ", "_")
