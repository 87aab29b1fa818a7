"""Goal API models."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ACTIVE = "true"
INACTIVE = "false"

MIN_GOAL_DAYS = 1
MAX_GOAL_DAYS = 365


class Goal(BaseModel):
    """A commitment goal record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    goal_days: int = Field(alias="goalDays")
    completed_days: int = Field(0, alias="completedDays")
    start_date: datetime = Field(alias="startDate")
    last_check_in: Optional[datetime] = Field(None, alias="lastCheckIn")
    is_active: Literal["true", "false"] = Field(ACTIVE, alias="isActive")

    @property
    def active(self) -> bool:
        return self.is_active == ACTIVE

    @property
    def completed(self) -> bool:
        return self.completed_days >= self.goal_days


class GoalCreate(BaseModel):
    """Request body for POST /api/goals."""

    model_config = ConfigDict(populate_by_name=True)

    goal_days: int = Field(alias="goalDays", ge=MIN_GOAL_DAYS, le=MAX_GOAL_DAYS, strict=True)


class CheckInRequest(BaseModel):
    """Request body for POST /api/goals/checkin."""

    model_config = ConfigDict(populate_by_name=True)

    goal_id: str = Field(alias="goalId")


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


class MilestoneResponse(BaseModel):
    days: int
    title: str
    message: str


class ProgressResponse(BaseModel):
    """Derived progress for the active goal."""

    model_config = ConfigDict(populate_by_name=True)

    goal_days: int = Field(alias="goalDays")
    completed_days: int = Field(alias="completedDays")
    remaining_days: int = Field(alias="remainingDays")
    percentage: int
    is_complete: bool = Field(alias="isComplete")
    achievement: str
    milestone: Optional[MilestoneResponse] = None
    week_progress: list[str] = Field(alias="weekProgress")
    started_on: str = Field(alias="startedOn")
    last_check_in: str = Field(alias="lastCheckIn")
