"""Progress, milestone and achievement calculation."""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Milestone:
    """A celebrated streak length."""
    days: int
    title: str
    message: str


MILESTONES = (
    Milestone(7, "Week 1 Complete!",
              "Week 1 Complete! You're building incredible discipline. Keep going strong!"),
    Milestone(14, "Two Weeks Strong!",
              "Two weeks strong! Your willpower is growing every day."),
    Milestone(21, "21 Days Achieved!",
              "21 days! You're forming lasting habits. Amazing progress!"),
    Milestone(30, "One Month Complete!",
              "One month achieved! This is a major milestone. You're unstoppable!"),
    Milestone(60, "Two Months Strong!",
              "Two months! Your dedication is truly inspiring."),
    Milestone(90, "90 Days Mastered!",
              "90 days! You've built incredible mental strength. Congratulations!"),
)

# (lowest percentage, label), checked from the top band down
ACHIEVEMENT_TIERS = (
    (100, "Goal Complete!"),
    (75, "Almost There"),
    (50, "Halfway Hero"),
    (25, "Committed"),
    (1, "Building Momentum"),
    (0, "Getting Started"),
)

WEEK_SLOTS = 7


@dataclass
class ProgressSummary:
    """Display values derived from a goal's counters."""
    goal_days: int
    completed_days: int
    remaining_days: int
    percentage: int
    is_complete: bool
    achievement: str
    milestone: Optional[Milestone] = None
    week_progress: list[str] = field(default_factory=list)
    started_on: str = "Not set"
    last_check_in: str = "No check-ins yet"


def progress_percentage(completed_days: int, goal_days: int) -> int:
    """
    Calculate completion percentage.

    Halves round up, so 1 of 8 days is 13%.

    Args:
        completed_days: Days checked in
        goal_days: Target streak length

    Returns:
        Whole percentage, 0 when there is no target
    """
    if goal_days <= 0:
        return 0
    return int(math.floor(completed_days / goal_days * 100 + 0.5))


def remaining_days(completed_days: int, goal_days: int) -> int:
    return goal_days - completed_days


def get_milestone(completed_days: int) -> Optional[Milestone]:
    """Return the milestone reached at exactly this many days, if any."""
    return next((m for m in MILESTONES if m.days == completed_days), None)


def achievement_tier(percentage: int) -> str:
    """Map a completion percentage to its achievement label."""
    for lowest, label in ACHIEVEMENT_TIERS:
        if percentage >= lowest:
            return label
    return ACHIEVEMENT_TIERS[-1][1]


def week_progress(completed_days: int) -> list[str]:
    """
    Build the seven-slot recent progress strip.

    Slot i shows day (completed_days - 6 + i), so the last slot is the most
    recent check-in.

    Args:
        completed_days: Days checked in

    Returns:
        Seven states, each "completed", "today" or "empty"
    """
    slots = []
    for i in range(WEEK_SLOTS):
        day_number = completed_days - (WEEK_SLOTS - 1) + i
        if 0 < day_number <= completed_days:
            slots.append("completed")
        elif day_number == completed_days + 1:
            slots.append("today")
        else:
            slots.append("empty")
    return slots


def format_date(value: Optional[datetime]) -> str:
    """Format a start date as e.g. "March 5, 2026"."""
    if value is None:
        return "Not set"
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_last_check_in(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Describe how long ago the last check-in happened.

    Args:
        value: Last check-in timestamp (naive values are taken as UTC)
        now: Reference time, defaults to the current time

    Returns:
        "No check-ins yet", "N hours ago" or "N day(s) ago"
    """
    if value is None:
        return "No check-ins yet"

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff_hours = math.floor((now - value).total_seconds() / 3600)
    if diff_hours < 24:
        return f"{diff_hours} hours ago"

    diff_days = diff_hours // 24
    return f"{diff_days} day{'s' if diff_days != 1 else ''} ago"


def summarize(
    goal_days: int,
    completed_days: int,
    start_date: Optional[datetime] = None,
    last_check_in: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> ProgressSummary:
    """Derive every display value for a goal in one pass."""
    percentage = progress_percentage(completed_days, goal_days)
    summary = ProgressSummary(
        goal_days=goal_days,
        completed_days=completed_days,
        remaining_days=remaining_days(completed_days, goal_days),
        percentage=percentage,
        is_complete=goal_days > 0 and completed_days >= goal_days,
        achievement=achievement_tier(percentage),
        milestone=get_milestone(completed_days),
        week_progress=week_progress(completed_days),
        started_on=format_date(start_date),
        last_check_in=format_last_check_in(last_check_in, now),
    )
    logger.debug(
        f"Progress {completed_days}/{goal_days} ({percentage}%, {summary.achievement})"
    )
    return summary
