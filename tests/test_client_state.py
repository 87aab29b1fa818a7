"""Tests for the locally persisted client state."""

import json
from datetime import datetime, timezone

from commitment.client.state import (
    STATE_KEY,
    ClientState,
    LocalStorage,
    load_state,
    save_state,
)


def test_missing_file_gives_setup_state(local_storage):
    state = load_state(local_storage)
    assert state == ClientState()
    assert state.mode == "setup"


def test_state_is_stored_as_json_text_under_fixed_key(local_storage):
    state = ClientState(
        mode="tracking",
        goal_id="abc",
        goal_days=30,
        completed_days=4,
        start_date=datetime(2026, 10, 1, tzinfo=timezone.utc),
    )
    save_state(local_storage, state)

    raw = json.loads(local_storage.path.read_text())
    assert list(raw) == [STATE_KEY]
    record = json.loads(raw[STATE_KEY])
    assert record["mode"] == "tracking"
    assert record["goalDays"] == 30
    assert record["completedDays"] == 4
    assert record["lastCheckIn"] is None

    assert load_state(local_storage) == state


def test_corrupt_value_falls_back_to_default(local_storage, caplog):
    local_storage.set_item(STATE_KEY, "{not json")
    assert load_state(local_storage) == ClientState()
    assert "Failed to load saved state" in caplog.text


def test_wrong_shape_falls_back_to_default(local_storage):
    local_storage.set_item(STATE_KEY, json.dumps({"mode": "party"}))
    assert load_state(local_storage) == ClientState()


def test_corrupt_file_falls_back_and_is_overwritten(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("garbage")
    storage = LocalStorage(str(path))

    assert load_state(storage) == ClientState()

    save_state(storage, ClientState(mode="tracking", goal_days=5))
    assert load_state(storage).goal_days == 5


def test_other_keys_are_preserved(local_storage):
    local_storage.set_item("theme", "dark")
    save_state(local_storage, ClientState())
    assert local_storage.get_item("theme") == "dark"
