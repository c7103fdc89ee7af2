"""In-process notification hub standing in for the host's notification centre.

Observers subscribe to a notification name and get back a
:class:`Subscription` handle; passing the handle to
:meth:`EventHub.unsubscribe` detaches exactly that observer.
Events may be posted from any thread.  Callbacks run on the
posting thread, outside the hub's lock.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass

from cichlid.models.events import BuildEvent
from cichlid.utils import errors, logger

log = logger.create_logger("EventHub")

EventCallback = Callable[[BuildEvent], None]

_ids = itertools.count(1)


@dataclass(frozen=True)
class Subscription:
    """Handle for one observer of one notification name."""

    id: int
    name: str
    callback: EventCallback


class EventHub:
    """Thread-safe publish/subscribe channel keyed by notification name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: dict[int, Subscription] = {}

    def subscribe(self, name: str, callback: EventCallback) -> Subscription:
        subscription = Subscription(id=next(_ids), name=name, callback=callback)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Detach *subscription*.  Returns False if it was already gone."""
        with self._lock:
            return self._subscriptions.pop(subscription.id, None) is not None

    def is_subscribed(self, subscription: Subscription) -> bool:
        with self._lock:
            return subscription.id in self._subscriptions

    def subscriber_count(self, name: str) -> int:
        with self._lock:
            return sum(1 for s in self._subscriptions.values() if s.name == name)

    def post(self, event: BuildEvent) -> int:
        """Deliver *event* to every current observer of ``event.name``.

        An observer that raises is logged and skipped so the rest
        still receive the event.

        Returns:
            The number of observers the event was delivered to.
        """
        with self._lock:
            targets = [s for s in self._subscriptions.values() if s.name == event.name]

        delivered = 0
        for subscription in targets:
            # Skip observers removed by an earlier callback in this dispatch.
            if not self.is_subscribed(subscription):
                continue
            try:
                subscription.callback(event)
            except Exception as exc:
                log.error(
                    "Observer raised while handling notification",
                    {"event": event.name, "error": errors.get_error_message(exc)},
                )
            delivered += 1
        return delivered
