"""Commitment tracker client: setup/tracking flow over the goal API."""

import logging
import re
from dataclasses import dataclass
from typing import Union

from ..goals.models import MAX_GOAL_DAYS, MIN_GOAL_DAYS
from ..goals.progress import ProgressSummary, get_milestone, summarize
from .api import GoalApiClient
from .state import ClientState, LocalStorage, load_state, save_state

logger = logging.getLogger(__name__)

# Leading integer, the way a browser number input is read
LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class Notice:
    """A user-facing notification."""
    title: str
    description: str
    variant: str = "default"  # "default" or "destructive"


def _already_complete() -> Notice:
    return Notice(
        "Goal Already Complete!",
        "Congratulations on completing your goal. Start a new one to continue!",
    )


class CommitmentTracker:
    """Drives the goal lifecycle and keeps the local mirror in step with the API."""

    def __init__(self, api: GoalApiClient, storage: LocalStorage):
        self.api = api
        self.storage = storage
        self.state = load_state(storage)

    def _set_state(self, state: ClientState):
        self.state = state
        save_state(self.storage, state)

    def start_goal(self, days: Union[int, str]) -> list[Notice]:
        """
        Start a new goal of the given length.

        Args:
            days: Goal length, as typed by the user or as an int

        Returns:
            Notices to show
        """
        match = LEADING_INT.match(str(days))
        goal_days = int(match.group(1)) if match else 0

        if goal_days < MIN_GOAL_DAYS or goal_days > MAX_GOAL_DAYS:
            return [
                Notice(
                    "Invalid Goal",
                    f"Please enter a number between {MIN_GOAL_DAYS} and {MAX_GOAL_DAYS} days.",
                    "destructive",
                )
            ]

        goal = self.api.create_goal(goal_days)
        self._set_state(ClientState.from_goal(goal))
        logger.info(f"Started {goal_days}-day goal {goal.id}")

        return [
            Notice(
                "Goal Started!",
                f"Your {goal_days}-day commitment journey has begun. Stay strong!",
            )
        ]

    def check_in(self) -> list[Notice]:
        """Record today's check-in."""
        if self.state.mode != "tracking" or not self.state.goal_id:
            return [
                Notice(
                    "No Active Goal",
                    "Start a goal before checking in.",
                    "destructive",
                )
            ]

        if self.state.is_complete:
            return [_already_complete()]

        goal = self.api.check_in(self.state.goal_id)
        if goal is None:
            logger.warning(f"Server no longer tracks goal {self.state.goal_id}")
            self._set_state(ClientState())
            return [
                Notice(
                    "Goal Not Found",
                    "Your goal is no longer active. Start a new one to continue!",
                    "destructive",
                )
            ]

        previous = self.state.completed_days
        self._set_state(ClientState.from_goal(goal))

        # A finished goal comes back unchanged; only a one-day step counts as this check-in
        if goal.completed and goal.completed_days != previous + 1:
            return [_already_complete()]

        notices = [
            Notice(
                "Day Complete! 🎉",
                f"You've completed day {goal.completed_days} of {goal.goal_days}. Keep going!",
            )
        ]
        milestone = get_milestone(goal.completed_days)
        if milestone:
            notices.append(
                Notice(
                    "🏆 Milestone Reached!",
                    f"{milestone.days} days completed! You're building incredible discipline.",
                )
            )
        return notices

    def reset(self) -> list[Notice]:
        """Abandon the current goal and return to setup."""
        self.api.reset()
        self._set_state(ClientState())
        return [Notice("Goal Reset", "Ready to start a new commitment journey!")]

    def sync(self) -> ClientState:
        """Replace the local mirror with the server's active goal."""
        goal = self.api.get_current_goal()
        if goal is None:
            self._set_state(ClientState())
        else:
            self._set_state(ClientState.from_goal(goal))
        return self.state

    def summary(self) -> ProgressSummary:
        return summarize(
            self.state.goal_days,
            self.state.completed_days,
            start_date=self.state.start_date,
            last_check_in=self.state.last_check_in,
        )
