"""
Domain events and the observer registry that delivers them.

Session transitions and booking transitions are published as immutable
event objects. Subscribers are kept in an explicit registry keyed by
subscription id, iterated in insertion order. A callback may unsubscribe
itself (or another callback) while an event is being delivered.

Usage:
    registry = ObserverRegistry()
    subscription = registry.subscribe(print)
    registry.publish(event)
    subscription()  # deregisters only this callback
"""

import itertools
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar, Union

from gigdesk.schemas.booking_schema import Booking
from gigdesk.schemas.identity_schema import Identity

logger = logging.getLogger(__name__)

E = TypeVar("E")


class SessionEventType(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class SessionEvent:
    """A session store transition."""

    type: SessionEventType
    identity: Optional[Identity]
    occurred_at: datetime


@dataclass(frozen=True)
class BookingEvent:
    """Base for booking transitions; carries the names a notification needs."""

    booking: Booking
    service_title: str
    client_name: str
    freelancer_name: str
    occurred_at: datetime

    @property
    def name(self) -> str:
        return type(self).__name__


class BookingCreated(BookingEvent):
    """A client requested a booking; the freelancer must respond."""


class BookingConfirmed(BookingEvent):
    """The freelancer accepted a pending booking."""


class BookingRejected(BookingEvent):
    """The freelancer declined a pending booking."""


DomainEvent = Union[SessionEvent, BookingEvent]


class Subscription:
    """Handle returned by ``ObserverRegistry.subscribe``.

    Calling it, or calling ``unsubscribe()``, removes the callback.
    Repeated calls are harmless.
    """

    def __init__(self, registry: "ObserverRegistry", subscription_id: int) -> None:
        self._registry = registry
        self.subscription_id = subscription_id

    @property
    def active(self) -> bool:
        return self._registry.is_subscribed(self.subscription_id)

    def unsubscribe(self) -> None:
        self._registry.unsubscribe(self.subscription_id)

    def __call__(self) -> None:
        self.unsubscribe()


class ObserverRegistry(Generic[E]):
    """Mapping from subscription id to callback with FIFO delivery."""

    def __init__(self, name: str = "events") -> None:
        self._name = name
        self._callbacks: dict[int, Callable[[E], None]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, callback: Callable[[E], None]) -> Subscription:
        subscription_id = next(self._ids)
        self._callbacks[subscription_id] = callback
        logger.debug("%s: subscriber %d registered", self._name, subscription_id)
        return Subscription(self, subscription_id)

    def unsubscribe(self, subscription_id: int) -> None:
        if self._callbacks.pop(subscription_id, None) is not None:
            logger.debug("%s: subscriber %d removed", self._name, subscription_id)

    def is_subscribed(self, subscription_id: int) -> bool:
        return subscription_id in self._callbacks

    def publish(self, event: E) -> None:
        """
        Deliver an event to every subscriber in registration order.

        Iterates over a snapshot so callbacks can unsubscribe during
        delivery; a callback removed mid-delivery is not invoked. A failing
        callback is logged and does not stop delivery to the rest.
        """
        for subscription_id, callback in list(self._callbacks.items()):
            if subscription_id not in self._callbacks:
                continue
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "%s: subscriber %d failed handling %s",
                    self._name, subscription_id, type(event).__name__,
                )

    def __len__(self) -> int:
        return len(self._callbacks)
