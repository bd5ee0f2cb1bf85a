"""
Process-level wiring for the marketplace core.

Builds every component once, passes collaborators by reference, and
connects the event flow:

    SessionStore --SessionEvent--> NotificationDispatcher
    BookingEngine --BookingEvent--> NotificationDispatcher

The entry point owns the returned ``Marketplace``; nothing in the core is
a module-level global.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Union

from gigdesk.catalog.identities import IdentityRegistry
from gigdesk.catalog.services import ServiceCatalog
from gigdesk.chat import ChatService
from gigdesk.config import AppConfig, LatencyConfig, settings
from gigdesk.errors import NotFoundError
from gigdesk.events import Subscription
from gigdesk.notifications.dispatcher import NotificationDispatcher
from gigdesk.scheduling.engine import BookingDecision, BookingEngine
from gigdesk.scheduling.ledger import AvailabilityLedger
from gigdesk.schemas.booking_schema import Booking
from gigdesk.schemas.notification_schema import NotificationType
from gigdesk.seed import seed_demo_data
from gigdesk.session.store import SessionStore
from gigdesk.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class Marketplace:
    """Handle to the wired core components."""

    config: AppConfig
    identities: IdentityRegistry
    catalog: ServiceCatalog
    session: SessionStore
    ledger: AvailabilityLedger
    bookings: BookingEngine
    notifications: NotificationDispatcher
    chat: ChatService
    subscriptions: list[Subscription] = field(default_factory=list)

    def respond_to_request(
        self, notification_id: str, decision: Union[BookingDecision, str]
    ) -> Booking:
        """
        Answer a booking-request notification as the signed-in freelancer.

        The booking is transitioned first; the notification is marked read
        only when that succeeds, so a failed response leaves it unread.

        Raises:
            NotFoundError: If the notification is missing or not a booking request.
            plus everything ``BookingEngine.respond_to_booking`` raises.
        """
        notification = self.notifications.get_notification(notification_id)
        if notification.type != NotificationType.BOOKING_REQUEST:
            raise NotFoundError("booking request", notification_id)

        identity = self.session.require_identity()
        booking = self.bookings.respond_to_booking(
            notification.payload.booking_id, identity.id, decision
        )
        self.notifications.mark_read(notification_id, owner_id=identity.id)
        return booking

    def dismiss(self, notification_id: str) -> None:
        """Manually mark one of the signed-in identity's notifications as read."""
        identity = self.session.require_identity()
        self.notifications.mark_read(notification_id, owner_id=identity.id)

    def close(self) -> None:
        """Detach the dispatcher from the event sources."""
        for subscription in self.subscriptions:
            subscription.unsubscribe()
        self.subscriptions.clear()


def build_marketplace(
    config: Optional[AppConfig] = None,
    *,
    latency: Optional[LatencyConfig] = None,
    clock: Callable[[], datetime] = utc_now,
    seed: Optional[bool] = None,
) -> Marketplace:
    """
    Construct and wire all marketplace components.

    Args:
        config: Application configuration; defaults to the loaded settings.
        latency: Override simulated latencies (tests pass all zeros).
        clock: Reference clock shared by every component.
        seed: Load demo users and services; defaults to ``config.seed_demo_data``.
    """
    config = config or settings
    latency = latency or config.latency

    identities = IdentityRegistry()
    catalog = ServiceCatalog()
    if config.seed_demo_data if seed is None else seed:
        seed_demo_data(identities, catalog, config.marketplace.default_currency)

    session = SessionStore(identities, latency=latency, clock=clock)
    ledger = AvailabilityLedger(session)
    bookings = BookingEngine(
        session, ledger, catalog, identities, latency_ms=latency.booking_ms
    )
    notifications = NotificationDispatcher(clock=clock)
    chat = ChatService(session, bookings)

    marketplace = Marketplace(
        config=config,
        identities=identities,
        catalog=catalog,
        session=session,
        ledger=ledger,
        bookings=bookings,
        notifications=notifications,
        chat=chat,
    )
    marketplace.subscriptions.append(session.subscribe(notifications.on_event))
    marketplace.subscriptions.append(bookings.subscribe(notifications.on_event))
    logger.info("Marketplace '%s' ready", config.marketplace.name)
    return marketplace
