"""HTTP client for the goal API."""

import logging
from typing import Optional

import requests

from ..goals.models import Goal

logger = logging.getLogger(__name__)


class GoalApiError(Exception):
    """Raised when the goal API cannot be reached or answers unexpectedly."""


class GoalApiClient:
    """Thin wrapper over the four goal endpoints."""

    def __init__(self, base_url: str, timeout: float = 10.0, session=None):
        """
        Initialize API client.

        Args:
            base_url: Server URL (e.g., http://localhost:5000)
            timeout: Per-request timeout in seconds
            session: Object with requests-style get/post methods
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        logger.debug(f"{method.upper()} {url}")

        try:
            return getattr(self.session, method)(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise GoalApiError(f"Request to {url} failed: {e}") from e

    @staticmethod
    def _body(response):
        try:
            return response.json()
        except ValueError:
            return {}

    def _expect_ok(self, response, path: str):
        body = self._body(response)
        if response.status_code != 200:
            message = body.get("message", "Unknown error") if isinstance(body, dict) else body
            logger.error(f"{path} returned {response.status_code}: {message}")
            raise GoalApiError(f"{path} returned {response.status_code}: {message}")
        return body

    def create_goal(self, goal_days: int) -> Goal:
        response = self._request("post", "/api/goals", json={"goalDays": goal_days})
        return Goal.model_validate(self._expect_ok(response, "/api/goals"))

    def get_current_goal(self) -> Optional[Goal]:
        """Return the active goal, or None when the server has none."""
        response = self._request("get", "/api/goals/current")
        if response.status_code == 404:
            return None
        return Goal.model_validate(self._expect_ok(response, "/api/goals/current"))

    def check_in(self, goal_id: str) -> Optional[Goal]:
        """Check in on a goal, or None when the server does not know it."""
        response = self._request("post", "/api/goals/checkin", json={"goalId": goal_id})
        if response.status_code == 404:
            return None
        return Goal.model_validate(self._expect_ok(response, "/api/goals/checkin"))

    def reset(self) -> str:
        response = self._request("post", "/api/goals/reset")
        return self._expect_ok(response, "/api/goals/reset").get("message", "")

    def get_history(self) -> list[Goal]:
        response = self._request("get", "/api/goals/history")
        body = self._expect_ok(response, "/api/goals/history")
        return [Goal.model_validate(item) for item in body]
