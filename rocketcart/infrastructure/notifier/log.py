import logging

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Notification sink that writes user-facing messages to the log"""

    async def notify_error(self, message: str) -> None:
        logger.warning(f"Cart notification: {message}")
