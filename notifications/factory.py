"""Factory for creating notification dispatcher instances."""

from typing import Optional
from config import Config
from notifications.dispatchers.base import NotificationDispatcher
from notifications.dispatchers.log import LogDispatcher
from notifications.dispatchers.outbox import OutboxDispatcher
from logger import get_logger

logger = get_logger()


def get_dispatcher(config: Config, db_manager=None) -> Optional[NotificationDispatcher]:
    """Create a dispatcher instance based on configuration.

    Args:
        config: Application configuration.
        db_manager: Database manager, required by the outbox dispatcher.

    Returns:
        NotificationDispatcher instance, or None if notifications are disabled.

    Raises:
        ValueError: If the dispatcher is unknown or misconfigured.
    """
    name = getattr(config, "dispatcher", None)

    if name in (None, "none"):
        logger.info("Notifications are disabled")
        return None

    if name == "log":
        return LogDispatcher()

    if name == "outbox":
        if db_manager is None:
            raise ValueError("Outbox dispatcher selected but no database manager given")
        logger.info("Queueing notifications in the outbox table")
        return OutboxDispatcher(db_manager)

    raise ValueError(f"Unknown notification dispatcher: {name}")
