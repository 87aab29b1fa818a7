"""Tests for the client tracker running against the API in-process."""

import pytest

from commitment.client.api import GoalApiClient, GoalApiError
from commitment.client.state import ClientState, load_state
from commitment.client.tracker import CommitmentTracker


def test_start_goal_switches_to_tracking(tracker, local_storage, storage):
    notices = tracker.start_goal("30")
    assert notices[0].title == "Goal Started!"
    assert tracker.state.mode == "tracking"
    assert tracker.state.goal_days == 30
    assert tracker.state.goal_id == storage.get_current_goal().id

    assert load_state(local_storage) == tracker.state


@pytest.mark.parametrize("days", ["0", "366", "abc", "", -5])
def test_start_goal_rejects_out_of_range(tracker, storage, days):
    notices = tracker.start_goal(days)
    assert notices[0].title == "Invalid Goal"
    assert notices[0].variant == "destructive"
    assert tracker.state.mode == "setup"
    assert storage.list_goals() == []


def test_check_in_mirrors_server(tracker, storage):
    tracker.start_goal(10)
    notices = tracker.check_in()
    assert notices[0].description == "You've completed day 1 of 10. Keep going!"
    assert tracker.state.completed_days == 1
    assert tracker.state.last_check_in is not None
    assert storage.get_current_goal().completed_days == 1


def test_check_in_announces_milestone(tracker):
    tracker.start_goal(10)
    for _ in range(6):
        tracker.check_in()
    notices = tracker.check_in()
    assert [n.title for n in notices] == ["Day Complete! 🎉", "🏆 Milestone Reached!"]
    assert notices[1].description.startswith("7 days completed!")


def test_check_in_after_completion_does_not_call_api(tracker, storage):
    tracker.start_goal(2)
    tracker.check_in()
    tracker.check_in()

    notices = tracker.check_in()
    assert notices[0].title == "Goal Already Complete!"
    assert storage.get_current_goal().completed_days == 2
    assert tracker.summary().achievement == "Goal Complete!"


def test_check_in_without_goal(tracker):
    notices = tracker.check_in()
    assert notices[0].title == "No Active Goal"


def test_check_in_on_goal_the_server_dropped(tracker, storage):
    tracker.start_goal(5)
    storage.reset_current_goal()

    notices = tracker.check_in()
    assert notices[0].title == "Goal Not Found"
    assert tracker.state == ClientState()


def test_reset_returns_to_setup(tracker, storage):
    tracker.start_goal(5)
    notices = tracker.reset()
    assert notices[0].title == "Goal Reset"
    assert tracker.state.mode == "setup"
    assert storage.get_current_goal() is None
    assert len(storage.list_goals()) == 1


def test_sync_pulls_server_state(api, local_storage, storage):
    goal = storage.create_goal(21)
    storage.check_in_goal(goal.id)

    tracker = CommitmentTracker(api, local_storage)
    assert tracker.state.mode == "setup"

    state = tracker.sync()
    assert state.mode == "tracking"
    assert state.goal_id == goal.id
    assert state.completed_days == 1

    storage.reset_current_goal()
    assert tracker.sync() == ClientState()


def test_state_is_read_once_at_startup(api, local_storage):
    first = CommitmentTracker(api, local_storage)
    first.start_goal(9)

    second = CommitmentTracker(api, local_storage)
    assert second.state == first.state


def test_api_client_history(api, storage):
    storage.create_goal(3)
    storage.create_goal(4)
    assert [g.goal_days for g in api.get_history()] == [4, 3]


def test_api_client_raises_on_server_error(api):
    with pytest.raises(GoalApiError):
        api._expect_ok(_FakeResponse(500, {"message": "boom"}), "/api/goals")


def test_api_client_wraps_connection_errors():
    api = GoalApiClient("http://127.0.0.1:9", timeout=0.5)
    with pytest.raises(GoalApiError):
        api.get_current_goal()


class _FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        return self._body


@pytest.mark.parametrize("days,expected", [("7.5", 7), ("12abc", 12), (" 30", 30)])
def test_start_goal_reads_leading_integer(tracker, storage, days, expected):
    notices = tracker.start_goal(days)
    assert notices[0].title == "Goal Started!"
    assert storage.get_current_goal().goal_days == expected


def test_check_in_when_server_already_finished(tracker, storage):
    tracker.start_goal(2)
    goal_id = tracker.state.goal_id
    storage.check_in_goal(goal_id)
    storage.check_in_goal(goal_id)

    notices = tracker.check_in()
    assert [n.title for n in notices] == ["Goal Already Complete!"]
    assert tracker.state.completed_days == 2
    assert storage.get_current_goal().completed_days == 2


def test_check_in_when_server_already_at_milestone(tracker, storage):
    tracker.start_goal(7)
    goal_id = tracker.state.goal_id
    for _ in range(7):
        storage.check_in_goal(goal_id)

    notices = tracker.check_in()
    assert "🏆 Milestone Reached!" not in [n.title for n in notices]
    assert notices[0].title == "Goal Already Complete!"


def test_check_in_final_day_is_reported(tracker):
    tracker.start_goal(2)
    tracker.check_in()
    notices = tracker.check_in()
    assert notices[0].description == "You've completed day 2 of 2. Keep going!"
