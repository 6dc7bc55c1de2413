from datetime import datetime, timezone
import json
import logging

import redis
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)


class RedisPushNotifier:
    """
    Publishes cart error messages to a Redis pub/sub channel.

    Fire-and-forget: publishing is retried with exponential backoff and a
    final failure is only logged, never raised to the cart operation.
    """

    def __init__(
        self,
        client,
        channel: str = "notifications:cart",
        attempts: int = 3,
        wait: wait_base | None = None,
    ):
        self.client = client
        self.channel = channel
        self.attempts = attempts
        self.wait = wait or wait_exponential(multiplier=1, min=2, max=10)

    async def notify_error(self, message: str) -> None:
        payload = json.dumps({
            'level': 'error',
            'message': message,
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.attempts), wait=self.wait, reraise=True
            ):
                with attempt:
                    subscribers = await self.client.publish(self.channel, payload)
        except redis.RedisError as e:
            logger.error(f"Redis error while publishing cart notification: {str(e)}")
            return

        logger.info(f"Published cart notification to {self.channel}, received by {subscribers} subscribers")
        if subscribers == 0:
            logger.warning(f"No active subscribers on channel {self.channel}")
