"""User notification sink.

Notifications are best-effort: the core calls ``notify`` and moves on.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """One-way sink for user-facing messages."""

    def notify(self, message: str) -> None:
        """Show ``message`` to the user."""
        ...


class LogNotifier:
    """Notifier for headless runs: messages go to the log."""

    def notify(self, message: str) -> None:
        logger.info(f"Notification: {message}")


def send_notification(notifier: Notifier | None, message: str) -> None:
    """Deliver a notification without letting sink failures escape.

    Args:
        notifier: Sink to use (None = drop the message).
        message: Text to show.
    """
    if notifier is None:
        return
    try:
        notifier.notify(message)
    except Exception:
        logger.exception("Notification failed")
