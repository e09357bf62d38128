"""
Tests for the web backend – session routes and the JSON error contract.
"""

from __future__ import annotations

import threading

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.session import SESSION_TTL, SessionManager, session_manager


@pytest.fixture
def client():
    return TestClient(app)


def create(client, **body):
    resp = client.post("/api/games", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()


# ===================================================================
# Health
# ===================================================================

class TestHealth:

    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["sessions"] == len(session_manager)


# ===================================================================
# Create / fetch / delete
# ===================================================================

class TestLifecycle:

    def test_create_defaults(self, client):
        data = create(client)
        assert data["player_count"] == 2
        assert len(data["nodes"]) == 13
        assert len(data["edges"]) == 20
        assert data["current_player"] == 0
        assert data["current_player_kind"] == "human"
        assert data["waiting_for_human"] is True
        assert data["done"] is False
        assert [p["pieces"] for p in data["players"]] == [6, 6]

    def test_create_four_players(self, client):
        data = create(client, player_count=4, human_count=2, enable_rotation=True)
        assert len(data["nodes"]) == 32
        assert [p["kind"] for p in data["players"]] == ["human", "human", "computer", "computer"]
        assert data["rotation_angle"] != 0.0

    def test_get(self, client):
        sid = create(client)["session_id"]
        resp = client.get(f"/api/games/{sid}")
        assert resp.status_code == 200
        assert resp.json()["session_id"] == sid

    def test_delete(self, client):
        sid = create(client)["session_id"]
        assert client.delete(f"/api/games/{sid}").status_code == 204
        resp = client.get(f"/api/games/{sid}")
        assert resp.status_code == 404

    def test_unknown_session(self, client):
        resp = client.get("/api/games/nope")
        assert resp.status_code == 404
        body = resp.json()
        assert body["error_code"] == "SESSION_NOT_FOUND"
        assert set(body) == {"error_code", "message", "details"}

    def test_invalid_configuration(self, client):
        resp = client.post("/api/games", json={"player_count": 2, "names": ["Solo"]})
        assert resp.status_code == 422
        assert resp.json()["error_code"] == "INVALID_CONFIGURATION"

    def test_unknown_color(self, client):
        resp = client.post("/api/games", json={"colors": ["blue", "chartreuse"]})
        assert resp.status_code == 422
        assert resp.json()["error_code"] == "INVALID_CONFIGURATION"

    def test_out_of_range_player_count_rejected(self, client):
        resp = client.post("/api/games", json={"player_count": 5})
        assert resp.status_code == 422


# ===================================================================
# Human moves
# ===================================================================

class TestMoves:

    def test_select(self, client):
        sid = create(client)["session_id"]
        resp = client.post(f"/api/games/{sid}/select", json={"node": "T5"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["selected_node"] == "T5"
        assert data["highlighted"] == ["G"]

    def test_move(self, client):
        sid = create(client)["session_id"]
        resp = client.post(f"/api/games/{sid}/move", json={"source": "T5", "dest": "G"})
        assert resp.status_code == 200
        data = resp.json()
        centre = next(n for n in data["nodes"] if n["name"] == "G")
        assert centre["piece"] == 0
        assert data["current_player"] == 1
        assert data["move_count"] == 1
        assert data["last_move"] == {
            "player": 0, "source": "T5", "dest": "G", "captured": None, "passed": False,
        }

    def test_illegal_move(self, client):
        sid = create(client)["session_id"]
        resp = client.post(f"/api/games/{sid}/move", json={"source": "T1", "dest": "G"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["error_code"] == "ILLEGAL_MOVE"
        assert body["details"] == {"source": "T1", "dest": "G"}

    def test_move_on_missing_session(self, client):
        resp = client.post("/api/games/nope/move", json={"source": "T5", "dest": "G"})
        assert resp.status_code == 404

    def test_second_move_in_same_turn_rejected(self, client):
        sid = create(client, human_count=2)["session_id"]
        first = client.post(f"/api/games/{sid}/move", json={"source": "T5", "dest": "G"})
        assert first.status_code == 200
        again = client.post(f"/api/games/{sid}/move", json={"source": "T4", "dest": "T5"})
        assert again.status_code == 422
        assert again.json()["error_code"] == "ILLEGAL_MOVE"
        assert client.get(f"/api/games/{sid}").json()["move_count"] == 1

    def test_requests_on_one_session_are_serialised(self, client):
        sid = create(client)["session_id"]
        session = session_manager.get(sid)
        responses = []

        def move():
            responses.append(
                client.post(f"/api/games/{sid}/move", json={"source": "T5", "dest": "G"})
            )

        with session.lock:
            worker = threading.Thread(target=move)
            worker.start()
            worker.join(timeout=0.3)
            assert worker.is_alive()
            assert session.game.game.move_count == 0
        worker.join(timeout=5)
        assert not worker.is_alive()
        assert responses[0].status_code == 200
        assert session.game.game.move_count == 1


# ===================================================================
# Computer turns and reset
# ===================================================================

class TestComputerMove:

    def test_waiting_for_human(self, client):
        sid = create(client)["session_id"]
        resp = client.post(f"/api/games/{sid}/computer-move")
        assert resp.status_code == 409
        assert resp.json()["error_code"] == "WAITING_FOR_HUMAN"

    def test_computer_reply(self, client):
        sid = create(client)["session_id"]
        client.post(f"/api/games/{sid}/move", json={"source": "T5", "dest": "G"})
        resp = client.post(f"/api/games/{sid}/computer-move")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["computer_turns"]) == 1
        assert data["computer_turns"][0]["player"] == 1
        assert data["current_player"] == 0
        assert data["move_count"] == 2

    def test_reset(self, client):
        sid = create(client)["session_id"]
        client.post(f"/api/games/{sid}/move", json={"source": "T5", "dest": "G"})
        resp = client.post(f"/api/games/{sid}/reset")
        assert resp.status_code == 200
        data = resp.json()
        assert data["move_count"] == 0
        assert data["current_player"] == 0
        assert data["last_move"] is None


# ===================================================================
# Session manager
# ===================================================================

class TestSessionManager:

    def test_create_and_get(self):
        manager = SessionManager()
        sid, session = manager.create(2, 1)
        assert manager.get(sid) is session
        assert len(manager) == 1

    def test_cleanup_stale(self):
        manager = SessionManager()
        old_id, old = manager.create(2, 1)
        new_id, _ = manager.create(3, 1)
        old.last_accessed -= SESSION_TTL + 1
        assert manager.cleanup_stale() == 1
        assert manager.get(old_id) is None
        assert manager.get(new_id) is not None


# ===================================================================
# Unmatched routes
# ===================================================================

class TestUnknownRoutes:

    def test_unknown_api_path(self, client):
        resp = client.get("/api/gamez")
        assert resp.status_code == 404
        body = resp.json()
        assert body["error_code"] == "NOT_FOUND"
        assert body["details"] == {"path": "/api/gamez"}
        assert set(body) == {"error_code", "message", "details"}

    def test_root_is_not_served(self, client):
        resp = client.get("/")
        assert resp.status_code == 404
        assert resp.json()["error_code"] == "NOT_FOUND"

    def test_wrong_method(self, client):
        resp = client.put("/api/health")
        assert resp.status_code == 405
        assert resp.json()["error_code"] == "HTTP_ERROR"
