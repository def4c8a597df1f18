"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = 0.0


def test_create_game_against_computer_playing_o():
    response = client.post("/api/game", json={"vsComputer": True, "computerMark": "O"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["computerMark"] == "O"
    assert payload["moveLog"] == []
    assert payload["aiPending"] is False
    assert payload["note"] == "Player has turn."

    game_id = payload["id"]
    move_response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 4})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["cells"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True
    assert state["note"] == "Computer has turn."

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["aiPending"] is False
    assert final_state["moveLog"][-1]["player"] == "O"
    assert final_state["cells"].count("O") == 1


def test_computer_opens_when_it_plays_x():
    response = client.post("/api/game", json={"vsComputer": True, "computerMark": "X"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["aiPending"] is True

    state = client.get(f"/api/game/{payload['id']}").json()
    assert state["cells"].count("X") == 1
    assert state["currentPlayer"] == "O"
    assert state["lastMove"]["player"] == "X"


def test_computer_never_loses():
    payload = client.post(
        "/api/game", json={"vsComputer": True, "computerMark": "X"}
    ).json()
    game_id = payload["id"]
    state = client.get(f"/api/game/{game_id}").json()
    while not state["winner"] and not state["drawn"]:
        move = state["availableMoves"][0]
        response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": move})
        assert response.status_code == 200
        state = client.get(f"/api/game/{game_id}").json()
    assert state["winner"] != "O"


def test_two_player_game_reports_winner():
    payload = client.post("/api/game", json={"vsComputer": False}).json()
    assert payload["vsComputer"] is False
    assert payload["note"] == "Player 1 has turn."
    game_id = payload["id"]

    state = None
    for index in (0, 3, 1, 4, 2):
        response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": index})
        assert response.status_code == 200
        state = response.json()
        assert state["aiPending"] is False

    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 1, 2]
    assert state["note"] == "Player 1 wins!"
    assert state["availableMoves"] == []

    late = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 8})
    assert late.status_code == 400


def test_two_player_tie_note():
    game_id = client.post("/api/game", json={"vsComputer": False}).json()["id"]
    state = None
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        state = client.post(
            f"/api/game/{game_id}/move", json={"cellIndex": index}
        ).json()
    assert state["drawn"] is True
    assert state["note"] == "It's a tie game."


def test_invalid_move_rejected():
    game_id = client.post("/api/game", json={"vsComputer": False}).json()["id"]

    first_move = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert first_move.status_code == 200

    # Attempting to play the same cell should fail.
    duplicate_move = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]


def test_rejects_out_of_range_cell():
    game_id = client.post("/api/game", json={"vsComputer": False}).json()["id"]
    response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 9})
    assert response.status_code == 422


def test_rejects_unknown_mark():
    response = client.post("/api/game", json={"vsComputer": True, "computerMark": "Z"})
    assert response.status_code == 422


def test_missing_game_returns_404():
    missing = client.get("/api/game/INVALID")
    assert missing.status_code == 404


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text
