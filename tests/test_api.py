"""Tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from engine.registry import MatchRegistry
from main import app
from models.maze import CellState


@pytest.fixture
def client():
    """Test client backed by a fresh, empty registry."""
    app.state.registry = MatchRegistry()
    yield TestClient(app)
    app.state.registry = MatchRegistry()


def _create_match(client: TestClient, width: int = 5, height: int = 5, mode: str = "ai_vs_user") -> str:
    """Helper: create a match and return its id."""
    resp = client.post(
        "/matches",
        json={"mode": mode, "maze_width": width, "maze_height": height},
    )
    assert resp.status_code == 200
    return resp.json()["match_id"]


def _open_interior(match_id: str) -> None:
    """Helper: clear every interior wall so moves are deterministic."""
    maze = app.state.registry.get(match_id).maze
    for y in range(1, maze.height - 1):
        for x in range(1, maze.width - 1):
            if maze.grid[y][x] == CellState.WALL:
                maze.grid[y][x] = CellState.EMPTY


def _join(client: TestClient, match_id: str, name: str, kind: str = "user") -> dict:
    """Helper: add a combatant and return the response body."""
    resp = client.post(
        f"/matches/{match_id}/combatants",
        json={"name": name, "type": kind},
    )
    assert resp.status_code == 200
    return resp.json()


def _start_open_match(client: TestClient) -> tuple[str, str, str]:
    """Helper: open 5x5 match with two combatants; returns ids."""
    match_id = _create_match(client)
    _open_interior(match_id)
    a = _join(client, match_id, "A")["combatant_id"]
    b = _join(client, match_id, "B", "ai")["combatant_id"]
    return match_id, a, b


def _act(client: TestClient, match_id: str, combatant_id: str, action: str, direction: str):
    return client.post(
        f"/matches/{match_id}/action",
        json={"combatant_id": combatant_id, "action": action, "direction": direction},
    )


class TestServerInfo:
    """Tests for / and /health."""

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["status"] == "running"
        assert resp.json()["active_matches"] == 0

    def test_health(self, client):
        assert client.get("/health").json() == {"healthy": True}


class TestCreateMatch:
    """Tests for POST /matches."""

    def test_create_returns_snapshot(self, client):
        resp = client.post(
            "/matches",
            json={"mode": "ai_vs_ai", "maze_width": 9, "maze_height": 7},
        )
        assert resp.status_code == 200
        data = resp.json()
        state = data["state"]
        assert state["match_id"] == data["match_id"]
        assert state["status"] == "waiting"
        assert state["turn"] == 0
        assert state["maze"]["width"] == 9
        assert state["maze"]["height"] == 7
        assert state["combatants"] == []
        assert state["winner"] is None

    def test_sizes_are_clamped(self, client):
        resp = client.post(
            "/matches",
            json={"mode": "ai_vs_ai", "maze_width": 1, "maze_height": 500},
        )
        maze = resp.json()["state"]["maze"]
        assert maze["width"] == 5
        assert maze["height"] == 30

    def test_invalid_mode(self, client):
        resp = client.post("/matches", json={"mode": "user_vs_user"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_GAME_MODE"
        assert client.get("/matches").json() == []

    def test_list_matches(self, client):
        first = _create_match(client)
        second = _create_match(client, mode="ai_vs_ai")
        resp = client.get("/matches")
        assert resp.status_code == 200
        ids = {m["match_id"] for m in resp.json()}
        assert ids == {first, second}


class TestAddCombatant:
    """Tests for POST /matches/{id}/combatants."""

    def test_first_join_waits(self, client):
        match_id = _create_match(client)
        data = _join(client, match_id, "A")
        assert data["status"] == "waiting"
        assert data["position"] == [1, 1]

    def test_second_join_starts(self, client):
        match_id = _create_match(client, width=6, height=7)
        _join(client, match_id, "A")
        data = _join(client, match_id, "B", "ai")
        assert data["status"] == "playing"
        assert data["position"] == [4, 5]

    def test_third_join_conflicts(self, client):
        match_id, _, _ = _start_open_match(client)
        resp = client.post(
            f"/matches/{match_id}/combatants",
            json={"name": "C", "type": "user"},
        )
        assert resp.status_code == 409
        assert resp.json()["error_code"] == "CAPACITY_EXCEEDED"

    def test_invalid_type(self, client):
        match_id = _create_match(client)
        resp = client.post(
            f"/matches/{match_id}/combatants",
            json={"name": "A", "type": "cyborg"},
        )
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_REQUEST"
        state = client.get(f"/matches/{match_id}/state").json()
        assert state["status"] == "waiting"
        assert state["combatants"] == []

    def test_unknown_match(self, client):
        resp = client.post(
            "/matches/missing/combatants",
            json={"name": "A", "type": "user"},
        )
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Match 'missing' not found"


class TestSubmitAction:
    """Tests for POST /matches/{id}/action."""

    def test_move(self, client):
        match_id, a, _ = _start_open_match(client)
        resp = _act(client, match_id, a, "move", "east")
        assert resp.status_code == 200
        data = resp.json()
        assert data["result"] == "success"
        assert data["state"]["turn"] == 2
        assert data["state"]["combatants"][0]["position"] == [2, 1]
        assert data["state"]["maze"]["grid"][1][2] == "occupied"

    def test_blocked_keeps_turn(self, client):
        match_id, a, _ = _start_open_match(client)
        resp = _act(client, match_id, a, "move", "north")
        assert resp.json()["result"] == "blocked"
        assert resp.json()["state"]["turn"] == 1
        assert resp.json()["state"]["current_turn_owner"] == a

    def test_not_your_turn(self, client):
        match_id, _, b = _start_open_match(client)
        resp = _act(client, match_id, b, "move", "north")
        assert resp.status_code == 409
        assert resp.json()["error_code"] == "NOT_YOUR_TURN"

    def test_invalid_action(self, client):
        match_id, a, _ = _start_open_match(client)
        resp = _act(client, match_id, a, "dance", "north")
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_ACTION"

    def test_invalid_direction(self, client):
        match_id, a, _ = _start_open_match(client)
        resp = _act(client, match_id, a, "move", "up")
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "INVALID_DIRECTION"

    def test_waiting_match(self, client):
        match_id = _create_match(client)
        a = _join(client, match_id, "A")["combatant_id"]
        resp = _act(client, match_id, a, "move", "east")
        assert resp.status_code == 409
        assert resp.json()["error_code"] == "NOT_PLAYING"

    def test_unknown_match(self, client):
        resp = _act(client, "missing", "x", "move", "east")
        assert resp.status_code == 404

    def test_full_match_to_finish(self, client):
        match_id, a, b = _start_open_match(client)
        assert _act(client, match_id, a, "move", "south").json()["result"] == "success"
        assert _act(client, match_id, b, "attack", "north").json()["result"] == "miss"
        assert _act(client, match_id, a, "move", "south").json()["result"] == "success"
        assert _act(client, match_id, b, "attack", "east").json()["result"] == "success"
        assert _act(client, match_id, a, "move", "east").json()["result"] == "success"
        assert _act(client, match_id, b, "attack", "south").json()["result"] == "success"

        resp = _act(client, match_id, a, "attack", "east")
        data = resp.json()
        assert data["result"] == "hit"
        assert data["state"]["status"] == "finished"
        assert data["state"]["winner"]["id"] == a
        assert data["state"]["winner_index"] == 0

        resp = _act(client, match_id, b, "attack", "west")
        assert resp.status_code == 409
        assert resp.json()["error_code"] == "GAME_ALREADY_FINISHED"


class TestStateAndLog:
    """Tests for GET state/log and DELETE."""

    def test_state(self, client):
        match_id, a, b = _start_open_match(client)
        resp = client.get(f"/matches/{match_id}/state")
        assert resp.status_code == 200
        state = resp.json()
        assert state["status"] == "playing"
        assert state["current_turn_owner"] == a
        assert [c["id"] for c in state["combatants"]] == [a, b]
        assert state["combatants"][1]["type"] == "ai"

    def test_state_unknown_match(self, client):
        resp = client.get("/matches/missing/state")
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "NOT_FOUND"

    def test_log(self, client):
        match_id, a, b = _start_open_match(client)
        _act(client, match_id, a, "move", "north")
        _act(client, match_id, a, "move", "east")
        resp = client.get(f"/matches/{match_id}/log")
        assert resp.status_code == 200
        events = resp.json()
        assert [e["result"] for e in events] == ["blocked", "success"]
        assert all(e["combatant_id"] == a for e in events)

    def test_delete(self, client):
        match_id = _create_match(client)
        resp = client.delete(f"/matches/{match_id}")
        assert resp.status_code == 200
        assert resp.json()["removed"] is True
        assert client.get(f"/matches/{match_id}/state").status_code == 404
        assert client.delete(f"/matches/{match_id}").status_code == 404
