"""Tests for the goal API endpoints."""

from fastapi.testclient import TestClient

from commitment.main import app, get_storage
from commitment.goals.storage import MemoryGoalStorage

GOAL_RESPONSE_KEYS = ["id", "goalDays", "completedDays", "startDate", "lastCheckIn", "isActive"]


class BrokenStorage(MemoryGoalStorage):
    def reset_current_goal(self):
        raise RuntimeError("disk on fire")

    def list_goals(self):
        raise RuntimeError("disk on fire")


def _create(client, days):
    r = client.post("/api/goals", json={"goalDays": days})
    assert r.status_code == 200
    return r.json()


def test_root_lists_endpoints(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "endpoints" in r.json()


def test_status_reports_backend(client):
    data = client.get("/status").json()
    assert data["status"] == "running"
    assert "storage_backend" in data


def test_create_goal_returns_schema(client):
    data = _create(client, 30)
    for key in GOAL_RESPONSE_KEYS:
        assert key in data, f"Missing key: {key}"
    assert data["goalDays"] == 30
    assert data["completedDays"] == 0
    assert data["lastCheckIn"] is None
    assert data["isActive"] == "true"


def test_create_goal_rejects_invalid_data(client, storage):
    bodies = (
        {},
        {"goalDays": 0},
        {"goalDays": 366},
        {"goalDays": "many"},
        {"goalDays": "30"},
        {"goalDays": True},
        {"goalDays": 7.0},
    )
    for body in bodies:
        r = client.post("/api/goals", json=body)
        assert r.status_code == 400, body
        data = r.json()
        assert data["message"] == "Invalid goal data"
        assert isinstance(data["error"], list)
    assert storage.list_goals() == []


def test_current_goal_404_when_none(client):
    r = client.get("/api/goals/current")
    assert r.status_code == 404
    assert r.json() == {"message": "No active goal found"}


def test_current_goal_is_latest(client):
    _create(client, 30)
    newer = _create(client, 10)

    r = client.get("/api/goals/current")
    assert r.status_code == 200
    assert r.json()["id"] == newer["id"]
    assert r.json()["goalDays"] == 10

    history = client.get("/api/goals/history").json()
    assert [g["goalDays"] for g in history] == [10, 30]
    assert [g["isActive"] for g in history] == ["true", "false"]


def test_checkin_increments(client):
    goal = _create(client, 3)
    r = client.post("/api/goals/checkin", json={"goalId": goal["id"]})
    assert r.status_code == 200
    data = r.json()
    assert data["completedDays"] == 1
    assert data["lastCheckIn"] is not None


def test_checkin_past_completion_returns_unchanged(client):
    goal = _create(client, 2)
    for _ in range(2):
        client.post("/api/goals/checkin", json={"goalId": goal["id"]})
    done = client.get("/api/goals/current").json()

    r = client.post("/api/goals/checkin", json={"goalId": goal["id"]})
    assert r.status_code == 200
    assert r.json() == done


def test_checkin_unknown_goal_404(client, storage):
    goal = _create(client, 5)
    r = client.post("/api/goals/checkin", json={"goalId": "nonexistent-id"})
    assert r.status_code == 404
    assert r.json() == {"message": "Goal not found"}
    assert storage.get_goal(goal["id"]).completed_days == 0


def test_checkin_invalid_payload_400(client):
    r = client.post("/api/goals/checkin", json={"goal": "abc"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid check-in data"


def test_reset_deactivates_current(client):
    goal = _create(client, 5)
    r = client.post("/api/goals/reset")
    assert r.status_code == 200
    assert r.json() == {"message": "Goal reset successfully"}

    assert client.get("/api/goals/current").status_code == 404
    history = client.get("/api/goals/history").json()
    assert history[0]["id"] == goal["id"]
    assert history[0]["isActive"] == "false"

    r = client.post("/api/goals/checkin", json={"goalId": goal["id"]})
    assert r.status_code == 404


def test_reset_without_goal_is_ok(client):
    r = client.post("/api/goals/reset")
    assert r.status_code == 200


def test_progress_endpoint(client):
    goal = _create(client, 14)
    for _ in range(7):
        client.post("/api/goals/checkin", json={"goalId": goal["id"]})

    r = client.get("/api/goals/current/progress")
    assert r.status_code == 200
    data = r.json()
    assert data["percentage"] == 50
    assert data["remainingDays"] == 7
    assert data["achievement"] == "Halfway Hero"
    assert data["milestone"]["title"] == "Week 1 Complete!"
    assert data["weekProgress"] == ["completed"] * 7
    assert data["isComplete"] is False


def test_progress_404_without_goal(client):
    assert client.get("/api/goals/current/progress").status_code == 404


def test_storage_failures_return_500():
    app.dependency_overrides[get_storage] = lambda: BrokenStorage()
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.post("/api/goals/reset")
            assert r.status_code == 500
            assert r.json()["message"] == "Failed to reset goal"

            r = c.get("/api/goals/history")
            assert r.status_code == 500
            assert r.json() == {"message": "disk on fire"}
    finally:
        app.dependency_overrides.clear()
