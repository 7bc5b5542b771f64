"""Notification requests handed to an external delivery channel."""

from notifications.factory import get_dispatcher

__all__ = ["get_dispatcher"]
