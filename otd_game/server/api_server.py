"""FastAPI server that exposes the daily game to web clients."""

from __future__ import annotations

from datetime import date
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from otd_game.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from otd_game.core.errors import FetchError, SelectionError
from otd_game.core.game_manager import GameManager
from otd_game.core.markdown_renderer import renderer
from otd_game.core.models import Event, GameState, PageRef
from otd_game.core.results import Error, GameResult, result_kind
from otd_game.core.services.game_preferences import (
    GamePreferences,
    days_left,
    game_end_date,
    game_for_today,
    game_start_date,
    is_game_active,
    should_show_entry_dialog,
)


class AnswerPayload(BaseModel):
    """Payload schema for a submitted year guess."""

    selected_year: int


def _page_view(page: PageRef) -> dict[str, object]:
    return {
        "title": page.title,
        "display_title": page.display_title,
        "description": page.description,
        "thumbnail_url": page.thumbnail_url,
    }


def _event_view(event: Event, reveal_year: bool) -> dict[str, object]:
    return {
        "year": event.year if reveal_year else None,
        "text": event.text,
        "text_html": renderer.render_fragment(event.text),
    }


def _state_view(state: GameState, saved_pages: list[PageRef]) -> dict[str, object]:
    question = state.current_question_state
    saved_titles = {page.title for page in saved_pages}
    # Years stay hidden until the question has been answered.
    answered = question.go_to_next
    return {
        "total_questions": state.total_questions,
        "current_question_index": state.current_question_index,
        "answer_state": list(state.answer_state[: state.total_questions]),
        "complete": state.is_complete,
        "question": {
            "month": question.month,
            "day": question.day,
            "event1": _event_view(question.event1, reveal_year=answered),
            "event2": _event_view(question.event2, reveal_year=answered),
            "year_selected": question.year_selected,
            "go_to_next": question.go_to_next,
        },
        "articles": [
            {**_page_view(page), "saved": page.title in saved_titles} for page in state.articles
        ],
        "history": {
            f"{year:04d}-{month:02d}-{day:02d}": list(answers)
            for (year, month, day), answers in sorted(state.answer_state_history.items())
        },
    }


def _result_response(result: GameResult, manager: GameManager) -> dict[str, object]:
    if isinstance(result, Error):
        if isinstance(result.error, FetchError):
            raise HTTPException(status_code=502, detail=str(result.error))
        if isinstance(result.error, SelectionError):
            raise HTTPException(status_code=422, detail=str(result.error))
        raise HTTPException(status_code=500, detail=str(result.error))
    state = manager.get_current_game_state()
    return {
        "result": result_kind(result),
        "date": manager.current_date.isoformat(),
        "state": _state_view(state, manager.saved_pages),
    }


def _get_game_manager_dependency(game_manager: GameManager):
    def dependency() -> GameManager:
        return game_manager

    return dependency


def _get_preferences_dependency(preferences: GamePreferences):
    def dependency() -> GamePreferences:
        return preferences

    return dependency


def create_api_app(game_manager: GameManager, preferences: GamePreferences) -> FastAPI:
    """Create a FastAPI application wired to the provided game manager."""
    app = FastAPI(title="On This Day Game API", version="0.1.0")
    game_manager_dep = _get_game_manager_dependency(game_manager)
    preferences_dep = _get_preferences_dependency(preferences)

    @app.get("/game")
    async def load_game(manager: GameManager = Depends(game_manager_dep)) -> dict[str, object]:
        result = await manager.load_game_state()
        return _result_response(result, manager)

    @app.get("/state")
    def get_state(manager: GameManager = Depends(game_manager_dep)) -> dict[str, object]:
        try:
            return _result_response(manager.latest_result, manager)
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    @app.post("/answer")
    def submit_answer(
        payload: AnswerPayload,
        manager: GameManager = Depends(game_manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.submit_answer(payload.selected_year)
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _result_response(result, manager)

    @app.post("/advance")
    def advance(manager: GameManager = Depends(game_manager_dep)) -> dict[str, object]:
        try:
            result = manager.advance()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _result_response(result, manager)

    @app.post("/respond")
    def respond(
        payload: AnswerPayload,
        manager: GameManager = Depends(game_manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.submit_current_response(payload.selected_year)
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _result_response(result, manager)

    @app.post("/reset")
    def reset(manager: GameManager = Depends(game_manager_dep)) -> dict[str, object]:
        try:
            result = manager.reset_current_day_state()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _result_response(result, manager)

    @app.get("/entry-dialog")
    def entry_dialog(prefs: GamePreferences = Depends(preferences_dep)) -> dict[str, object]:
        return {"show": should_show_entry_dialog(prefs, date.today())}

    @app.get("/window")
    def game_window(prefs: GamePreferences = Depends(preferences_dep)) -> dict[str, object]:
        today = date.today()
        return {
            "start_date": game_start_date(prefs).isoformat(),
            "end_date": game_end_date(prefs).isoformat(),
            "active": is_game_active(),
            "game_for_today": game_for_today(prefs, today),
            "days_left": days_left(prefs, today),
        }

    return app


def start_api_server(
    game_manager: GameManager,
    preferences: GamePreferences,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background thread."""
    app = create_api_app(game_manager, preferences)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="GameApiServer")
    thread.start()
    return thread
