from datetime import date

from fastapi.testclient import TestClient
import pytest

from conftest import FailingCatalog, FakeCatalog, make_event, make_manager
from otd_game.server.api_server import create_api_app


@pytest.fixture
def client(catalog, preferences) -> TestClient:
    manager = make_manager(catalog, preferences)
    return TestClient(create_api_app(manager, preferences))


def test_state_before_load_is_a_conflict(client):
    assert client.get("/state").status_code == 409


def test_load_answer_and_advance(client):
    loaded = client.get("/game")
    assert loaded.status_code == 200
    body = loaded.json()
    assert body["result"] == "game_started"
    assert body["date"] == "2024-06-15"
    question = body["state"]["question"]
    assert question["event1"]["year"] is None
    assert question["event1"]["text_html"].startswith("<p>")

    answered = client.post("/answer", json={"selected_year": 1})
    assert answered.status_code == 200
    answered_body = answered.json()
    assert answered_body["result"] == "current_question_incorrect"
    assert answered_body["state"]["question"]["event1"]["year"] is not None
    assert answered_body["state"]["answer_state"][0] is False

    assert client.post("/answer", json={"selected_year": 1}).status_code == 409

    advanced = client.post("/advance")
    assert advanced.status_code == 200
    assert advanced.json()["state"]["current_question_index"] == 1

    assert client.get("/state").json()["result"] == "success"


def test_respond_and_reset(client):
    client.get("/game")
    assert client.post("/respond", json={"selected_year": 1}).json()["result"] == "current_question_incorrect"
    assert client.post("/respond", json={"selected_year": 1}).json()["result"] == "success"

    reset = client.post("/reset")
    assert reset.status_code == 200
    assert reset.json()["state"]["current_question_index"] == 0


def test_invalid_payload_is_rejected(client):
    client.get("/game")
    assert client.post("/answer", json={"selected_year": "soon"}).status_code == 422


def test_fetch_failure_maps_to_bad_gateway(preferences):
    manager = make_manager(FailingCatalog(), preferences)
    client = TestClient(create_api_app(manager, preferences))
    assert client.get("/game").status_code == 502


def test_selection_failure_maps_to_unprocessable(preferences):
    catalog = FakeCatalog(events=[make_event(1900, "Lonely event")])
    client = TestClient(create_api_app(make_manager(catalog, preferences), preferences))
    assert client.get("/game").status_code == 422


def test_entry_dialog_hidden_after_visit_today(catalog, preferences):
    manager = make_manager(catalog, preferences, today=date.today())
    client = TestClient(create_api_app(manager, preferences))
    assert client.get("/entry-dialog").json() == {"show": False}


def test_window_defaults(client):
    body = client.get("/window").json()
    assert body["start_date"] == "1970-01-01"
    assert body["end_date"] == "1970-01-01"
    assert body["active"] is True


def test_event_text_is_escaped_not_formatted(preferences):
    catalog = FakeCatalog(
        events=[make_event(1900, "Rebels seize *the* fort_a"), make_event(1950, "Treaty <signed>")]
    )
    client = TestClient(create_api_app(make_manager(catalog, preferences), preferences))
    question = client.get("/game").json()["state"]["question"]
    rendered = {question["event1"]["text_html"], question["event2"]["text_html"]}
    assert rendered == {"<p>Rebels seize *the* fort_a</p>\n", "<p>Treaty &lt;signed&gt;</p>\n"}
