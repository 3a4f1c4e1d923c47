"""
Cross-process change notifications for Braintrader

When several API processes serve the same database, each one only knows about
the records appended through itself. The notifier publishes a small message
on Redis after every append or sign-out; the listener in every other process
receives it and refreshes its own subscribers.

Channels are ``<prefix>:<owner_id>`` for record changes and
``<prefix>:signed-out`` for revoked tokens.
"""

import json
import logging
import uuid

import redis

logger = logging.getLogger(__name__)

# Identifies this process so it can skip its own messages
PROCESS_ID = uuid.uuid4().hex

SIGNED_OUT_CHANNEL = "signed-out"


class RedisChangeNotifier:
    """Publish record-change and sign-out events to Redis pub/sub"""

    def __init__(self, client: redis.Redis, channel_prefix: str = "braintrader:records",
                 origin: str = PROCESS_ID):
        self.client = client
        self.channel_prefix = channel_prefix
        self.origin = origin

    def channel_for(self, owner_id) -> str:
        return f"{self.channel_prefix}:{owner_id}"

    def _publish(self, channel: str, payload: dict) -> None:
        message = json.dumps({**payload, "origin": self.origin})
        try:
            self.client.publish(channel, message)
        except redis.RedisError as e:
            # Local subscribers were already served; other processes catch up on next read.
            logger.warning(f"Failed to publish to {channel}: {e}")

    def notify(self, owner_id: int, record_id: int) -> None:
        self._publish(self.channel_for(owner_id), {"owner_id": owner_id, "record_id": record_id})

    def notify_sign_out(self, token_id: str) -> None:
        self._publish(self.channel_for(SIGNED_OUT_CHANNEL), {"token_id": token_id})


class RedisChangeListener:
    """
    Apply change events published by other processes

    Args:
        client: Redis client
        feed: Record feed whose subscribers are refreshed on record changes
        identities: Identity registry whose connections end on sign-out
        channel_prefix: Same prefix the notifiers publish under
        origin: ID of this process; its own messages are ignored
    """

    def __init__(self, client: redis.Redis, feed, identities, channel_prefix: str = "braintrader:records",
                 origin: str = PROCESS_ID, poll_seconds: float = 1.0):
        self.client = client
        self.feed = feed
        self.identities = identities
        self.channel_prefix = channel_prefix
        self.origin = origin
        self.poll_seconds = poll_seconds
        self._pubsub = None
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self) -> bool:
        """
        Subscribe and start the background worker thread

        Returns:
            bool: False when Redis could not be reached
        """
        if self.running:
            return True
        pubsub = self.client.pubsub(ignore_subscribe_messages=True)
        try:
            pubsub.psubscribe(**{f"{self.channel_prefix}:*": self.handle_message})
            self._thread = pubsub.run_in_thread(sleep_time=self.poll_seconds, daemon=True)
        except redis.RedisError as e:
            logger.error(f"Failed to subscribe to change notifications: {e}")
            pubsub.close()
            return False
        self._pubsub = pubsub
        logger.info(f"Listening for change notifications on {self.channel_prefix}:*")
        return True

    def stop(self) -> None:
        if self._thread is not None:
            self._thread.stop()
            self._thread = None
        if self._pubsub is not None:
            self._pubsub.close()
            self._pubsub = None

    def handle_message(self, message: dict) -> None:
        """Route one pub/sub message to the feed or the identity registry"""
        try:
            event = json.loads(message["data"])
            if event.get("origin") == self.origin:
                return
            if "token_id" in event:
                self.identities.sign_out(str(event["token_id"]))
            else:
                self.feed.publish(int(event["owner_id"]))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring malformed change notification {message!r}: {e}")
