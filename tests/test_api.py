"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)


@pytest.fixture(autouse=True)
def manual_scheduler(monkeypatch, scheduler):
    monkeypatch.setattr(ui, "SCHEDULER", scheduler)
    return scheduler


def test_create_game_and_first_move(manual_scheduler):
    response = client.post("/api/game", json={"mode": "ai", "symbol": "X"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["aiSymbol"] == "O"
    assert payload["cells"] == [""] * 9
    assert payload["moveLog"] == []

    game_id = payload["id"]
    move_response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 4})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["cells"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True
    assert state["lastMove"] == {"player": "X", "cellIndex": 4}

    manual_scheduler.run_pending()
    final_state = client.get(f"/api/game/{game_id}").json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["aiPending"] is False
    assert final_state["moveLog"][-1]["player"] == "O"
    assert final_state["cells"].count("O") == 1


def test_occupied_cell_returns_unchanged_state():
    game_id = client.post("/api/game", json={"mode": "friend"}).json()["id"]
    first = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0}).json()
    second = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert second.status_code == 200
    assert second.json()["cells"] == first["cells"]
    assert second.json()["currentPlayer"] == "O"


def test_friend_game_win_and_restart():
    game_id = client.post("/api/game", json={"mode": "friend", "symbol": "O"}).json()["id"]
    state = None
    for index in (0, 3, 1, 4, 2):
        state = client.post(f"/api/game/{game_id}/move", json={"cellIndex": index}).json()

    assert state["winner"] == "O"
    assert state["winningLine"] == [0, 1, 2]
    assert state["status"] == "O wins!"
    assert state["gameOver"] is True
    assert state["active"] is False

    restarted = client.post(f"/api/game/{game_id}/restart").json()
    assert restarted["id"] == game_id
    assert restarted["cells"] == [""] * 9
    assert restarted["status"] == ""
    assert restarted["gameOver"] is False
    assert restarted["currentPlayer"] == "O"


def test_rejects_unknown_mode_and_symbol():
    assert client.post("/api/game", json={"mode": "online"}).status_code == 422
    assert client.post("/api/game", json={"symbol": "Z"}).status_code == 422


def test_rejects_out_of_range_cell():
    game_id = client.post("/api/game", json={}).json()["id"]
    response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 9})
    assert response.status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert client.post("/api/game/missing/restart").status_code == 404


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "restartButton" in response.text
