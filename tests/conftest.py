"""Shared fixtures and fakes for the game tests."""

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from otd_game.core.errors import FetchError
from otd_game.core.game_manager import GameManager
from otd_game.core.models import Event, PageRef
from otd_game.core.services.game_preferences import GamePreferences
from otd_game.core.services.key_value_store import MemoryStore

TODAY = date(2024, 6, 15)


def make_event(year: int, text: str, page_count: int = 3) -> Event:
    slug = text.split()[0]
    pages = tuple(PageRef(title=f"{slug}_{year}_{n}") for n in range(page_count))
    return Event(year=year, text=text, pages=pages)


SAMPLE_EVENTS = [
    make_event(1900, "Boxer Rebellion reaches Peking"),
    make_event(1950, "Korean War begins"),
    make_event(1980, "Mount St. Helens erupts again"),
]


class FakeCatalog:
    """Catalog returning a fixed list of events and recording requests."""

    def __init__(self, events: list[Event] | None = None, error: Exception | None = None) -> None:
        self.events = list(SAMPLE_EVENTS if events is None else events)
        self.error = error
        self.requests: list[tuple[int, int]] = []

    async def fetch_events(self, month: int, day: int) -> list[Event]:
        self.requests.append((month, day))
        if self.error is not None:
            raise self.error
        return list(self.events)


class GatedCatalog(FakeCatalog):
    """Catalog whose fetch blocks until :meth:`release` is called."""

    def __init__(self, events: list[Event] | None = None) -> None:
        super().__init__(events)
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def fetch_events(self, month: int, day: int) -> list[Event]:
        self.requests.append((month, day))
        await self._gate.wait()
        return list(self.events)


class FailingCatalog(FakeCatalog):
    def __init__(self) -> None:
        super().__init__(error=FetchError("catalog unreachable"))


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def preferences(store: MemoryStore) -> GamePreferences:
    prefs = GamePreferences(store)
    prefs.questions_per_day = 10
    return prefs


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


def make_manager(catalog, preferences: GamePreferences, today: date = TODAY, **kwargs) -> GameManager:
    return GameManager(catalog=catalog, preferences=preferences, clock=lambda: today, **kwargs)


def load(manager: GameManager):
    return asyncio.run(manager.load_game_state())
