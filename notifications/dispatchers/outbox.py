"""Dispatcher that queues requests in the notification_outbox table."""

import json
from typing import List
from notifications.dispatchers.base import NotificationDispatcher, NotificationRequest
from logger import get_logger

logger = get_logger()


class OutboxDispatcher(NotificationDispatcher):
    """Persists requests for an external mailer to pick up and deliver."""

    def __init__(self, db_manager):
        """Initialize the outbox dispatcher.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def dispatch(self, request: NotificationRequest) -> None:
        # mode="json" turns Decimal and date payload values into strings
        payload = request.model_dump(mode="json")["payload"]

        with self.db_manager.connect() as conn:
            conn.execute(
                """
                INSERT INTO notification_outbox (user_id, kind, recipient, subject, body, payload)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    request.user_id,
                    request.kind,
                    request.recipient,
                    request.subject,
                    request.body,
                    json.dumps(payload) if payload else None,
                ),
            )
            conn.commit()

        logger.info(f"Queued {request.kind} notification for {request.recipient}")

    def pending(self) -> List[NotificationRequest]:
        """Get queued requests not yet marked delivered, oldest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                SELECT user_id, kind, recipient, subject, body, payload
                FROM notification_outbox
                WHERE delivered_at IS NULL
                ORDER BY id
                """
            )
            rows = cursor.fetchall()

        return [
            NotificationRequest(
                user_id=row[0],
                kind=row[1],
                recipient=row[2],
                subject=row[3],
                body=row[4],
                payload=json.loads(row[5]) if row[5] else {},
            )
            for row in rows
        ]
