"""Tests for the outbox dispatcher."""

from datetime import date

from notifications.dispatchers.base import BUDGET_ALERT, NotificationRequest
from notifications.dispatchers.outbox import OutboxDispatcher
from tests.helpers import record, utc


class TestOutboxDispatcher:
    """Tests for OutboxDispatcher."""

    def test_dispatch_and_pending(self, services, user):
        outbox = OutboxDispatcher(services.db_manager)

        outbox.dispatch(
            NotificationRequest(
                kind="daily_report",
                user_id=user.id,
                recipient=user.email,
                subject="Daily",
                body="Body\n",
            )
        )

        pending = outbox.pending()
        assert len(pending) == 1
        assert pending[0].subject == "Daily"
        assert pending[0].payload == {}

    def test_decimal_payload_is_stored_as_text(self, services, user, food):
        budget = services.budgets.create(
            user.id, "Food", 100, "monthly", date(2024, 3, 1), category_id=food.id
        )
        record(services, user.id, food, "99.50", utc(2024, 3, 3))
        outbox = OutboxDispatcher(services.db_manager)

        services.tracking.notify_budget_breach(user.id, budget.id, outbox)

        [request] = outbox.pending()
        assert request.kind == BUDGET_ALERT
        assert request.recipient == "asha@example.com"
        assert request.payload["threshold"] == 80
        assert request.payload["total_spent"] == "99.5"
        assert request.payload["template_version"] == "1"
