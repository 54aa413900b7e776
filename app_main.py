"""Application entry point for the On This Day game server."""

from __future__ import annotations

import argparse
from pathlib import Path

from otd_game.constants.network_constants import DEFAULT_HOST, DEFAULT_LANGUAGE, DEFAULT_PORT
from otd_game.constants.storage_constants import DEFAULT_STATE_FILE
from otd_game.core.game_manager import GameManager
from otd_game.core.services.event_catalog import WikipediaEventCatalog
from otd_game.core.services.game_preferences import GamePreferences
from otd_game.core.services.key_value_store import JsonFileStore
from otd_game.core.services.saved_pages import InMemorySavedPages
from otd_game.server.api_server import start_api_server
from otd_game.utils.logging_config import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the daily On This Day history game.")
    parser.add_argument("--state-file", type=Path, default=Path(DEFAULT_STATE_FILE))
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--language", default=DEFAULT_LANGUAGE, help="Wikipedia language code")
    parser.add_argument(
        "--date",
        type=int,
        default=None,
        help="Play the game of another day, given as an epoch-seconds timestamp (UTC)",
    )
    parser.add_argument(
        "--saved-page",
        action="append",
        default=[],
        help="Title of a page in the reading list (repeatable)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, wire the game manager and run the API server."""
    args = _parse_args(argv)
    logger = configure_logging()
    logger.info("Starting On This Day game server…")

    preferences = GamePreferences(JsonFileStore(args.state_file))
    game_manager = GameManager(
        catalog=WikipediaEventCatalog(language=args.language),
        preferences=preferences,
        saved_pages=InMemorySavedPages(args.saved_page),
        override_timestamp=args.date,
    )
    logger.info("Game state stored in %s", args.state_file.resolve())
    if game_manager.has_date_override:
        logger.info("Playing the game for %s", game_manager.current_date.isoformat())

    server_thread = start_api_server(game_manager, preferences, host=args.host, port=args.port)
    logger.info("Game available at http://%s:%d/game", args.host, args.port)
    server_thread.join()


if __name__ == "__main__":
    main()
