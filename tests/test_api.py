"""
API tests for the game server: lifecycle, moves, computer turns and error paths.
"""

import pytest
from fastapi.testclient import TestClient

from qubic3d.main import app, games


@pytest.fixture
def client():
    games.clear()
    with TestClient(app) as c:
        yield c
    games.clear()


def _new_game(client, **body):
    r = client.post("/games", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_get_game(client):
    created = _new_game(client, size=6)
    state = created["state"]
    assert state["size"] == 6
    assert state["status"] == "in_progress"
    assert state["current_player"] == 1
    assert len(state["board"]) == 6

    r = client.get(f"/games/{created['game_id']}")
    assert r.status_code == 200
    assert r.json()["move_count"] == 0


def test_create_game_without_body_uses_defaults(client, monkeypatch):
    monkeypatch.setenv("QUBIC_BOARD_SIZE", "8")
    r = client.post("/games")
    assert r.status_code == 201
    assert r.json()["state"]["size"] == 8


@pytest.mark.parametrize(
    "name,value",
    [
        ("QUBIC_BOARD_SIZE", "5"),
        ("QUBIC_BOARD_SIZE", "four"),
        ("QUBIC_OPPONENT_MODE", "ai-vs-ai"),
        ("QUBIC_DIFFICULTY", "expert"),
    ],
)
def test_bad_env_settings_rejected(client, monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    r = client.post("/games")
    assert r.status_code == 400
    assert games == {}


def test_invalid_size_rejected(client):
    r = client.post("/games", json={"size": 5})
    assert r.status_code == 400
    assert games == {}


def test_unknown_game_is_404(client):
    assert client.get("/games/nope").status_code == 404
    assert client.post("/games/nope/move", json={"x": 0, "z": 0}).status_code == 404
    assert client.delete("/games/nope").status_code == 404


def test_row_win_over_http(client):
    game_id = _new_game(client)["game_id"]
    for x, z in [(0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1)]:
        r = client.post(f"/games/{game_id}/move", json={"x": x, "z": z})
        assert r.status_code == 200
        assert r.json()["status"] == "in_progress"

    r = client.post(f"/games/{game_id}/move", json={"x": 3, "z": 0})
    body = r.json()
    assert body["status"] == "win"
    assert body["player"] == 1
    assert body["winning_coords"] == [[0, 0, 0], [1, 0, 0], [2, 0, 0], [3, 0, 0]]
    assert body["state"]["game_over"] is True

    r = client.post(f"/games/{game_id}/move", json={"x": 3, "z": 3})
    assert r.status_code == 409


def test_move_reports_landing_cell_and_hints(client):
    game_id = _new_game(client)["game_id"]
    client.post(f"/games/{game_id}/move", json={"x": 0, "z": 0})
    client.post(f"/games/{game_id}/move", json={"x": 0, "z": 1})
    client.post(f"/games/{game_id}/move", json={"x": 1, "z": 0})
    client.post(f"/games/{game_id}/move", json={"x": 1, "z": 1})
    r = client.post(f"/games/{game_id}/move", json={"x": 2, "z": 0})
    body = r.json()
    assert body["cell"] == [2, 0, 0]
    # player 2 to move: own threat none, player 1 threatens (3,0,0)
    assert body["hints"] == {"own": [], "danger": [[3, 0, 0]]}

    r = client.get(f"/games/{game_id}/hints")
    assert r.json() == {"own": [], "danger": [[3, 0, 0]]}


def test_hints_hidden_in_hard_mode(client):
    game_id = _new_game(client, difficulty="hard")["game_id"]
    r = client.post(f"/games/{game_id}/move", json={"x": 0, "z": 0})
    assert r.json()["hints"] is None
    assert client.get(f"/games/{game_id}/hints").json() == {"own": [], "danger": []}


def test_column_full_and_out_of_range(client):
    game_id = _new_game(client)["game_id"]
    for _ in range(4):
        client.post(f"/games/{game_id}/move", json={"x": 2, "z": 2})
    r = client.get(f"/games/{game_id}/columns/2/2")
    assert r.json()["lowest_empty"] is None

    r = client.post(f"/games/{game_id}/move", json={"x": 2, "z": 2})
    assert r.status_code == 409
    r = client.post(f"/games/{game_id}/move", json={"x": 9, "z": 0})
    assert r.status_code == 400
    assert client.get(f"/games/{game_id}").json()["move_count"] == 4


def test_not_your_turn(client):
    game_id = _new_game(client)["game_id"]
    r = client.post(f"/games/{game_id}/move", json={"x": 0, "z": 0, "player": 2})
    assert r.status_code == 409
    r = client.post(f"/games/{game_id}/move", json={"x": 0, "z": 0, "player": 1})
    assert r.status_code == 200


def test_computer_turn_flow(client):
    game_id = _new_game(client, opponent_mode="ai-first-vs-human", difficulty="hard")["game_id"]
    state = client.get(f"/games/{game_id}").json()
    assert state["computer_player"] == 1

    # humans cannot move for the computer
    r = client.post(f"/games/{game_id}/move", json={"x": 0, "z": 0})
    assert r.status_code == 409

    r = client.post(f"/games/{game_id}/auto-step")
    assert r.status_code == 200
    body = r.json()
    assert body["player"] == 1
    assert body["cell"] in [[0, 0, 0], [0, 3, 0], [3, 0, 0], [3, 3, 0]]

    # now it is the human's turn
    assert client.post(f"/games/{game_id}/auto-step").status_code == 409
    r = client.post(f"/games/{game_id}/move", json={"x": 1, "z": 1})
    assert r.status_code == 200
    assert r.json()["state"]["current_player"] == 1


def test_human_cannot_claim_computer_turn(client):
    game_id = _new_game(client, opponent_mode="human-first-vs-ai")["game_id"]
    assert client.post(f"/games/{game_id}/move", json={"x": 0, "z": 0}).status_code == 200

    # naming the computer's player does not help
    r = client.post(f"/games/{game_id}/move", json={"x": 3, "z": 3, "player": 2})
    assert r.status_code == 409
    state = client.get(f"/games/{game_id}").json()
    assert state["move_count"] == 1
    assert state["current_player"] == 2

    r = client.post(f"/games/{game_id}/auto-step")
    assert r.status_code == 200
    assert r.json()["player"] == 2


def test_suggest_does_not_move(client):
    game_id = _new_game(client)["game_id"]
    r = client.get(f"/games/{game_id}/suggest", params={"difficulty": "hard"})
    assert r.status_code == 200
    body = r.json()
    assert body["player"] == 1
    assert body["difficulty"] == "hard"
    assert body["move"][2] == 0
    assert client.get(f"/games/{game_id}").json()["move_count"] == 0


def test_reset_changes_size(client):
    game_id = _new_game(client)["game_id"]
    client.post(f"/games/{game_id}/move", json={"x": 0, "z": 0})
    r = client.post(f"/games/{game_id}/reset", json={"size": 8, "opponent_mode": "human-first-vs-ai"})
    assert r.status_code == 200
    state = r.json()
    assert state["size"] == 8
    assert state["move_count"] == 0
    assert state["computer_player"] == 2

    r = client.post(f"/games/{game_id}/reset", json={"size": 5})
    assert r.status_code == 400
    assert client.get(f"/games/{game_id}").json()["size"] == 8


def test_delete_game(client):
    game_id = _new_game(client)["game_id"]
    assert client.delete(f"/games/{game_id}").status_code == 204
    assert client.get(f"/games/{game_id}").status_code == 404
    assert client.delete(f"/games/{game_id}").status_code == 404
