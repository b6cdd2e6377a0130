"""Subscription handles and the per-client registry that tracks them."""
import asyncio
import threading
from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

from flamelink.services.store.base import EventType, ListenerRegistration
from flamelink.utils.logging import get_logger

logger = get_logger()

SubscriptionKey = Tuple[str, str, Optional[str], str]


def subscription_key(kind: str, key, entry_key, event) -> SubscriptionKey:
    """Registration key: (resource kind, resource key, entry key, event name)."""
    return (
        kind,
        "" if key is None else str(key),
        None if entry_key is None else str(entry_key),
        EventType(event).value,
    )


class Subscription:
    """Handle for one live listener; `close()` tears down exactly that listener."""

    def __init__(
        self,
        key: SubscriptionKey,
        registration: ListenerRegistration,
        registry: Optional["SubscriptionRegistry"] = None,
        tasks: Optional[Set[asyncio.Future]] = None,
    ):
        self.key = key
        # Pending coroutine callbacks; each removes itself when done
        self.tasks = set() if tasks is None else tasks
        self._registration = registration
        self._registry = registry
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def event(self) -> EventType:
        return EventType(self.key[3])

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._registration.close()
        if self._registry is not None:
            self._registry.discard(self)
        logger.info(
            "subscription_closed", kind=self.key[0], key=self.key[1], event_type=self.key[3]
        )

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Subscription {self.key!r} {state}>"


class SubscriptionRegistry:
    """Live subscriptions of one client, grouped by registration key."""

    def __init__(self):
        self._subscriptions: Dict[SubscriptionKey, List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def add(self, subscription: Subscription) -> Subscription:
        with self._lock:
            self._subscriptions[subscription.key].append(subscription)
        return subscription

    def discard(self, subscription: Subscription) -> None:
        with self._lock:
            group = self._subscriptions.get(subscription.key)
            if not group:
                return
            if subscription in group:
                group.remove(subscription)
            if not group:
                del self._subscriptions[subscription.key]

    def match(self, kind: str, key=None, entry_key=None, event=None) -> List[Subscription]:
        """Subscriptions on exactly (kind, key, entry_key), optionally one event."""
        event_name = None if event is None else EventType(event).value
        wanted = subscription_key(kind, key, entry_key, EventType.VALUE)[:3]
        with self._lock:
            return [
                subscription
                for sub_key, group in self._subscriptions.items()
                if sub_key[:3] == wanted and (event_name is None or sub_key[3] == event_name)
                for subscription in group
            ]

    def close(self, kind: str, key=None, entry_key=None, event=None) -> int:
        matched = self.match(kind, key, entry_key, event)
        for subscription in matched:
            subscription.close()
        return len(matched)

    def close_all(self) -> int:
        with self._lock:
            everything = [sub for group in self._subscriptions.values() for sub in group]
        for subscription in everything:
            subscription.close()
        return len(everything)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(group) for group in self._subscriptions.values())
