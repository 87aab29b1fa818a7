"""Client-side goal state persisted to a local key/value file."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..goals.models import Goal

logger = logging.getLogger(__name__)

STATE_KEY = "commitmentTracker"


class ClientState(BaseModel):
    """Local mirror of the tracked goal."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Literal["setup", "tracking"] = "setup"
    goal_id: Optional[str] = Field(None, alias="goalId")
    goal_days: int = Field(0, alias="goalDays")
    completed_days: int = Field(0, alias="completedDays")
    start_date: Optional[datetime] = Field(None, alias="startDate")
    last_check_in: Optional[datetime] = Field(None, alias="lastCheckIn")

    @classmethod
    def from_goal(cls, goal: Goal) -> "ClientState":
        """Mirror an active goal returned by the API."""
        return cls(
            mode="tracking",
            goal_id=goal.id,
            goal_days=goal.goal_days,
            completed_days=goal.completed_days,
            start_date=goal.start_date,
            last_check_in=goal.last_check_in,
        )

    @property
    def is_complete(self) -> bool:
        return self.goal_days > 0 and self.completed_days >= self.goal_days


class LocalStorage:
    """String values stored under keys in a single JSON file."""

    def __init__(self, path: str = "data/client_state.json"):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str):
        try:
            data = self._read()
        except ValueError:
            logger.warning(f"Overwriting unreadable storage file {self.path}")
            data = {}

        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_state(storage: LocalStorage) -> ClientState:
    """
    Read the saved client state.

    Unreadable or malformed state is logged and discarded; the caller gets a
    fresh setup-mode state instead.
    """
    try:
        saved = storage.get_item(STATE_KEY)
        if saved:
            return ClientState.model_validate_json(saved)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load saved state: {e}")

    return ClientState()


def save_state(storage: LocalStorage, state: ClientState):
    """Write the client state under the fixed key."""
    storage.set_item(STATE_KEY, state.model_dump_json(by_alias=True))
