"""Base dispatcher interface and the request it delivers."""

from abc import ABC, abstractmethod
from typing import Any, Dict
from pydantic import BaseModel, Field

BUDGET_ALERT = "budget_alert"
GOAL_ACHIEVED = "goal_achieved"
DAILY_REPORT = "daily_report"
MONTHLY_REPORT = "monthly_report"


class NotificationRequest(BaseModel):
    """A fully rendered message ready for an email transport."""

    kind: str
    user_id: int
    recipient: str
    subject: str
    body: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class NotificationDispatcher(ABC):
    """Abstract base class for notification delivery channels.

    Implementations hand requests off; retries and transport failures belong
    to the channel, not to the tracking core.
    """

    @abstractmethod
    def dispatch(self, request: NotificationRequest) -> None:
        """Hand off a single notification request."""
        pass
