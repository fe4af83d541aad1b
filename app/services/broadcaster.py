"""In-process publish/subscribe registry for live updates.

Sessions join a named channel and receive a bounded queue of events.
Publishing is fire-and-forget: it never awaits, never retries, and drops an
event for any subscriber whose queue is full. A subscriber that is not
connected when an event fires never sees it.
"""

import asyncio
import itertools
import logging
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)

LEADS_CHANNEL = "leads"

LEAD_CREATED = "lead-created"
LEAD_UPDATED = "lead-updated"
LEAD_DELETED = "lead-deleted"

DEFAULT_QUEUE_SIZE = 100

_ids = itertools.count(1)


class Subscription:
    """One session's membership in a channel."""

    def __init__(self, channel: str, owner: Any = None, maxsize: int = DEFAULT_QUEUE_SIZE):
        self.id = next(_ids)
        self.channel = channel
        self.owner = owner
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)

    def deliver(self, message: Dict[str, Any]) -> bool:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(
                "Dropping %s for subscriber %d on '%s': queue full",
                message.get("event"), self.id, self.channel,
            )
            return False
        return True

    def __repr__(self) -> str:
        return f"<Subscription {self.id} channel={self.channel!r} owner={self.owner!r}>"


class Broadcaster:
    """Channel name → set of subscriptions."""

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self._channels: Dict[str, Set[Subscription]] = {}
        self._queue_size = queue_size

    def join(self, channel: str, owner: Any = None) -> Subscription:
        subscription = Subscription(channel, owner, maxsize=self._queue_size)
        self._channels.setdefault(channel, set()).add(subscription)
        logger.info("Subscriber %d joined '%s' (%d total)", subscription.id, channel, self.subscriber_count(channel))
        return subscription

    def leave(self, channel: str, subscription: Subscription) -> None:
        members = self._channels.get(channel)
        if not members:
            return
        members.discard(subscription)
        if not members:
            del self._channels[channel]
        logger.info("Subscriber %d left '%s' (%d remaining)", subscription.id, channel, self.subscriber_count(channel))

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    def publish(
        self,
        channel: str,
        event: str,
        data: Any,
        exclude: Optional[Subscription] = None,
    ) -> int:
        """Queue ``{"event": event, "data": data}`` for every subscriber of ``channel``.

        Returns the number of subscribers the event was queued for.
        """
        message = {"event": event, "data": data}
        delivered = 0
        for subscription in list(self._channels.get(channel, ())):
            if subscription is exclude:
                continue
            if subscription.deliver(message):
                delivered += 1
        logger.debug("Published %s on '%s' to %d subscribers", event, channel, delivered)
        return delivered


broadcaster = Broadcaster()
