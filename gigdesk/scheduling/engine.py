"""
Booking engine: creates bookings against a service and a time window,
drives each booking through its status machine, and publishes booking
events for the notification dispatcher.

Slot policy: a booking must be covered by an open availability slot of the
freelancer. The engine claims that slot from the ledger when the booking is
created; rejecting the booking later does not release it.
"""

from datetime import timedelta
from enum import Enum
from typing import Callable, Optional, Union

from gigdesk.catalog.identities import IdentityRegistry
from gigdesk.catalog.services import ServiceCatalog
from gigdesk.config import settings
from gigdesk.errors import (
    ForbiddenError,
    InvalidDecisionError,
    InvalidTransitionError,
    InvalidWindowError,
    NotFoundError,
)
from gigdesk.events import (
    BookingConfirmed,
    BookingCreated,
    BookingEvent,
    BookingRejected,
    ObserverRegistry,
    Subscription,
)
from gigdesk.logging_context import get_actor_logger
from gigdesk.scheduling.ledger import AvailabilityLedger
from gigdesk.scheduling.state_machine import BookingStateMachine, BookingTrigger, StatusEntry
from gigdesk.schemas.booking_schema import Booking, BookingStatus, Service
from gigdesk.session.store import SessionStore
from gigdesk.utils import DateTimeLike, ensure_datetime, new_id, simulate_latency, to_iso

logger = get_actor_logger(__name__)


class BookingDecision(str, Enum):
    """A freelancer's answer to a pending booking."""

    CONFIRM = "confirm"
    REJECT = "reject"


_DECISION_TRIGGERS: dict[BookingDecision, BookingTrigger] = {
    BookingDecision.CONFIRM: BookingTrigger.CONFIRM,
    BookingDecision.REJECT: BookingTrigger.REJECT,
}

_DECISION_EVENTS: dict[BookingDecision, type[BookingEvent]] = {
    BookingDecision.CONFIRM: BookingConfirmed,
    BookingDecision.REJECT: BookingRejected,
}


class BookingEngine:
    """Owns all bookings and their status machines."""

    def __init__(
        self,
        session: SessionStore,
        ledger: AvailabilityLedger,
        catalog: ServiceCatalog,
        identities: IdentityRegistry,
        latency_ms: Optional[int] = None,
    ) -> None:
        self._session = session
        self._ledger = ledger
        self._catalog = catalog
        self._identities = identities
        self._latency_ms = settings.latency.booking_ms if latency_ms is None else latency_ms
        self._bookings: dict[str, Booking] = {}
        self._machines: dict[str, BookingStateMachine] = {}
        self._events: ObserverRegistry[BookingEvent] = ObserverRegistry("bookings")

    def subscribe(self, callback: Callable[[BookingEvent], None]) -> Subscription:
        """Register a callback for BookingCreated/Confirmed/Rejected events."""
        return self._events.subscribe(callback)

    # ------------------------------------------------------------------ #
    # Creation
    # ------------------------------------------------------------------ #

    async def create_booking(
        self,
        client_id: str,
        service_id: str,
        start_time: DateTimeLike,
        end_time: DateTimeLike,
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Request a booking for a service in a future window.

        Raises:
            UnauthenticatedError: If nobody is signed in.
            ForbiddenError: If client_id is not the signed-in identity, or the
                client is the service's own freelancer.
            InvalidWindowError: If start_time is not after now, or end_time is
                not start_time plus the service duration.
            ServiceNotFoundError: If the service is absent or inactive.
            NoAvailabilityError: If no open slot of the freelancer covers the window.
        """
        await simulate_latency(self._latency_ms)

        identity = self._session.require_identity()
        if identity.id != client_id:
            raise ForbiddenError("You can only book on your own behalf.", entity_id=client_id)

        start, end = ensure_datetime(start_time), ensure_datetime(end_time)
        if start <= self._session.now():
            logger.info("Booking rejected, start %s is not in the future", start.isoformat())
            raise InvalidWindowError(
                "Cannot book appointments in the past. Please select a future time.",
                field="start_time",
            )

        service = self._catalog.get_active(service_id)
        if service.freelancer_id == client_id:
            raise ForbiddenError("You cannot book your own service.", entity_id=service_id)

        expected_end = start + timedelta(minutes=service.duration_minutes)
        if end != expected_end:
            raise InvalidWindowError(
                f"'{service.title}' lasts {service.duration_minutes} minutes; "
                f"end time must be {to_iso(expected_end)}.",
                field="end_time",
            )

        slot = self._ledger.claim_slot(service.freelancer_id, start, end)

        booking = Booking(
            id=new_id("booking"),
            client_id=client_id,
            freelancer_id=service.freelancer_id,
            service_id=service.id,
            start_time=start,
            end_time=end,
            notes=notes or None,
            total_amount_cents=service.price_cents,
            currency=service.currency,
            slot_id=slot.id,
            created_at=self._session.now(),
        )
        self._bookings[booking.id] = booking
        self._machines[booking.id] = BookingStateMachine(clock=self._session.now)
        logger.info(
            "Booking created: %s for %s with %s (%s - %s)",
            booking.id, service.id, booking.freelancer_id,
            start.isoformat(), end.isoformat(),
        )

        self._publish(BookingCreated, booking, service)
        return booking.model_copy()

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def respond_to_booking(
        self,
        booking_id: str,
        responder_id: str,
        decision: Union[BookingDecision, str],
    ) -> Booking:
        """
        Confirm or reject a pending booking as its freelancer.

        Raises:
            NotFoundError: If the booking does not exist.
            UnauthenticatedError: If nobody is signed in.
            ForbiddenError: If the responder is not the booking's freelancer
                or not the signed-in identity.
            InvalidDecisionError: If the decision is neither confirm nor reject.
            InvalidTransitionError: If the booking is no longer pending.
        """
        booking = self._require_booking(booking_id)
        identity = self._session.require_identity()
        if responder_id != booking.freelancer_id or identity.id != responder_id:
            raise ForbiddenError(
                "Only the booked freelancer can respond to this request.",
                entity_id=booking_id,
            )

        try:
            decision = BookingDecision(decision)
        except ValueError:
            raise InvalidDecisionError(decision) from None
        self._transition(booking, _DECISION_TRIGGERS[decision])
        logger.info("Booking %s %s by %s", booking_id, booking.status.value, responder_id)

        service = self._catalog.get(booking.service_id)
        self._publish(_DECISION_EVENTS[decision], booking, service)
        return booking.model_copy()

    def complete_booking(self, booking_id: str) -> Booking:
        """
        Mark a confirmed booking as completed once its end time has passed.

        Raises:
            NotFoundError: If the booking does not exist.
            InvalidTransitionError: If the booking is not confirmed.
            InvalidWindowError: If the booking has not ended yet.
        """
        booking = self._require_booking(booking_id)
        if not self._machines[booking_id].can_transition(BookingTrigger.COMPLETE):
            raise InvalidTransitionError(
                f"Only confirmed bookings can be completed; this one is {booking.status.value}.",
                field="status",
                entity_id=booking_id,
            )
        if booking.end_time > self._session.now():
            raise InvalidWindowError(
                "A booking can only be completed after it ends.",
                field="end_time",
                entity_id=booking_id,
            )
        self._transition(booking, BookingTrigger.COMPLETE)
        logger.info("Booking completed: %s", booking_id)
        return booking.model_copy()

    def complete_elapsed(self) -> list[Booking]:
        """Complete every confirmed booking whose end time has passed."""
        now = self._session.now()
        due = [
            booking_id
            for booking_id, booking in self._bookings.items()
            if booking.status == BookingStatus.CONFIRMED and booking.end_time <= now
        ]
        return [self.complete_booking(booking_id) for booking_id in due]

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_booking(self, booking_id: str) -> Booking:
        return self._require_booking(booking_id).model_copy()

    def list_bookings(
        self, participant_id: str, status: Optional[BookingStatus] = None
    ) -> list[Booking]:
        """Bookings where the identity is client or freelancer, latest start first."""
        matches = [
            booking.model_copy()
            for booking in self._bookings.values()
            if booking.involves(participant_id) and (status is None or booking.status == status)
        ]
        return sorted(matches, key=lambda b: b.start_time, reverse=True)

    def status_history(self, booking_id: str) -> list[StatusEntry]:
        self._require_booking(booking_id)
        return self._machines[booking_id].get_history()

    def earnings(self, freelancer_id: str) -> dict[str, int]:
        """Completed booking totals per currency, in minor units."""
        totals: dict[str, int] = {}
        for booking in self._bookings.values():
            if booking.freelancer_id == freelancer_id and booking.status == BookingStatus.COMPLETED:
                totals[booking.currency] = totals.get(booking.currency, 0) + booking.total_amount_cents
        return totals

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _require_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("booking", booking_id)
        return booking

    def _transition(self, booking: Booking, trigger: BookingTrigger) -> None:
        try:
            booking.status = self._machines[booking.id].transition(trigger)
        except InvalidTransitionError as exc:
            exc.entity_id = booking.id
            logger.info("Booking %s: %s", booking.id, exc.message)
            raise

    def _display_name(self, identity_id: str, fallback: str) -> str:
        identity = self._identities.get(identity_id)
        return identity.display_name if identity else fallback

    def _publish(
        self, event_type: type[BookingEvent], booking: Booking, service: Optional[Service]
    ) -> None:
        self._events.publish(event_type(
            booking=booking.model_copy(),
            service_title=service.title if service else "your service",
            client_name=self._display_name(booking.client_id, "A client"),
            freelancer_name=self._display_name(booking.freelancer_id, "The freelancer"),
            occurred_at=self._session.now(),
        ))
