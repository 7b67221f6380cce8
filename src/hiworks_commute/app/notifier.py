"""Desktop notifications for attendance results."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

APP_NAME = "Hiworks Commute"


class Notifier:
    """Send desktop notifications."""

    def __init__(self, enabled: bool = True, backend: str = "auto"):
        """Initialize notifier.

        Args:
            enabled: Whether notifications are enabled
            backend: Notification backend ('auto', 'plyer')
        """
        self.enabled = enabled
        self.backend = backend
        self._notifier = self._init_notifier()

    def _init_notifier(self) -> Any:
        """Initialize platform-specific notifier.

        Returns:
            Notification handler or None if not available
        """
        if not self.enabled:
            return None

        try:
            from plyer import notification  # type: ignore[import-not-found]

            return notification  # type: ignore[no-any-return]
        except ImportError:
            logger.debug("plyer not available, notifications disabled")
            return None

    def notify(self, title: str, message: str, timeout: int = 5) -> None:
        """Send a desktop notification.

        Args:
            title: Notification title
            message: Notification message
            timeout: Display duration in seconds
        """
        if not self.enabled or not self._notifier:
            return

        try:
            self._notifier.notify(  # type: ignore[attr-defined]
                title=title,
                message=message,
                app_name=APP_NAME,
                timeout=timeout,
            )
        except Exception as e:
            # Notifications are non-critical
            logger.warning(f"Failed to send notification: {e}")

    def notify_result(self, title: str, message: str) -> None:
        """Notify a completed attendance action."""
        self.notify(title=title, message=message)

    def notify_error(self, error: Exception) -> None:
        """Notify a failed action."""
        self.notify(title="Hiworks", message=f"Error: {error}", timeout=10)
