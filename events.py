import logging
from enum import Enum
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class Event(str, Enum):
    COMPONENTS_CHANGED = "components_changed"
    CATEGORIES_CHANGED = "categories_changed"
    ERROR_OCCURRED = "error_occurred"


class Subscription:
    """Handle returned by ChangeNotifier.subscribe; cancel() detaches the callback."""

    def __init__(self, notifier: "ChangeNotifier", event: Event, callback: Callable):
        self._notifier = notifier
        self.event = event
        self.callback = callback

    @property
    def active(self) -> bool:
        return self in self._notifier._subscribers[self.event]

    def cancel(self) -> None:
        subscribers = self._notifier._subscribers[self.event]
        if self in subscribers:
            subscribers.remove(self)


class ChangeNotifier:
    """
    Fan-out of change notifications to subscribed callbacks.

    COMPONENTS_CHANGED and CATEGORIES_CHANGED callbacks take no arguments,
    ERROR_OCCURRED callbacks receive the error message.
    """

    def __init__(self):
        self._subscribers: Dict[Event, List[Subscription]] = {event: [] for event in Event}

    def subscribe(self, event: Event, callback: Callable) -> Subscription:
        subscription = Subscription(self, Event(event), callback)
        self._subscribers[subscription.event].append(subscription)
        return subscription

    def publish(self, event: Event, *args) -> None:
        """Call every subscriber of the event in subscription order."""
        event = Event(event)
        for subscription in list(self._subscribers[event]):
            try:
                subscription.callback(*args)
            except Exception:
                logger.exception("Subscriber %r failed handling %s", subscription.callback, event.value)
