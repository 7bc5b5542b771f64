"""Dispatcher that writes requests to the application log."""

from notifications.dispatchers.base import NotificationDispatcher, NotificationRequest
from logger import get_logger

logger = get_logger()


class LogDispatcher(NotificationDispatcher):
    """Logs each request instead of delivering it. Useful for local runs."""

    def dispatch(self, request: NotificationRequest) -> None:
        logger.info(
            f"[{request.kind}] to {request.recipient}: {request.subject}"
        )
        logger.debug(request.body)
