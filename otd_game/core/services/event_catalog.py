"""Sources of historical events for a given month and day."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from otd_game.constants.network_constants import (
    DEFAULT_LANGUAGE,
    EVENT_CATALOG_TIMEOUT_SECONDS,
    EVENT_CATALOG_URL_TEMPLATE,
    EVENT_CATALOG_USER_AGENT,
)
from otd_game.core.errors import FetchError
from otd_game.core.models import Event, PageRef

logger = logging.getLogger(__name__)


class EventCatalog(Protocol):
    """Provides the ordered list of events that happened on a month/day."""

    async def fetch_events(self, month: int, day: int) -> list[Event]: ...


class _Thumbnail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    source: str | None = None


class _PageSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    displaytitle: str | None = None
    description: str | None = None
    extract: str | None = None
    thumbnail: _Thumbnail | None = None


class _FeedEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    year: int = 0
    text: str = ""
    pages: list[_PageSummary] = Field(default_factory=list)


class _FeedResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    events: list[_FeedEvent] = Field(default_factory=list)


def parse_feed_events(payload: object) -> list[Event]:
    """Convert a decoded ``feed/onthisday/events`` response into events."""
    try:
        feed = _FeedResponse.model_validate(payload)
    except ValidationError as exc:
        raise FetchError(f"Unexpected event feed payload: {exc}") from exc
    return [
        Event(
            year=item.year,
            text=item.text,
            pages=tuple(
                PageRef(
                    title=page.title,
                    display_title=page.displaytitle,
                    description=page.description,
                    extract=page.extract,
                    thumbnail_url=page.thumbnail.source if page.thumbnail else None,
                )
                for page in item.pages
            ),
        )
        for item in feed.events
    ]


class WikipediaEventCatalog:
    """Reads events from the Wikipedia REST ``onthisday`` feed."""

    def __init__(
        self,
        language: str = DEFAULT_LANGUAGE,
        timeout: float = EVENT_CATALOG_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = EVENT_CATALOG_URL_TEMPLATE.format(language=language)
        self._timeout = timeout
        self._transport = transport

    async def fetch_events(self, month: int, day: int) -> list[Event]:
        path = f"feed/onthisday/events/{month:02d}/{day:02d}"
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={"User-Agent": EVENT_CATALOG_USER_AGENT, "Accept": "application/json"},
                transport=self._transport,
            ) as client:
                response = await client.get(path)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not fetch events for {month:02d}-{day:02d}: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"Event feed for {month:02d}-{day:02d} is not valid JSON") from exc

        events = parse_feed_events(payload)
        logger.info("Fetched %d events for %02d-%02d", len(events), month, day)
        return events
