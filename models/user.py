"""User model with email delivery preferences."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """Represents an application user.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Display name used in notifications.
        email: Delivery address; users without one never receive emails.
        daily_report: Opted in to the daily expense report.
        monthly_report: Opted in to the monthly overview.
        budget_alerts: Opted in to budget threshold alerts.
    """

    id: int
    name: str
    email: Optional[str]
    daily_report: bool = True
    monthly_report: bool = True
    budget_alerts: bool = True
