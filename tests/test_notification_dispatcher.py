"""Tests for the notification dispatcher."""

import pytest

from gigdesk.errors import ForbiddenError, NotFoundError
from gigdesk.events import (
    BookingConfirmed,
    BookingCreated,
    BookingEvent,
    BookingRejected,
    SessionEvent,
    SessionEventType,
)
from gigdesk.schemas.booking_schema import Booking
from gigdesk.schemas.notification_schema import (
    BookingRequestNotification,
    NotificationType,
)
from tests.conftest import REFERENCE_NOW, at


def make_event(event_type: type[BookingEvent] = BookingCreated, booking_id: str = "booking-1") -> BookingEvent:
    booking = Booking(
        id=booking_id,
        client_id="user-5",
        freelancer_id="user-1",
        service_id="service-1",
        start_time=at(10),
        end_time=at(12),
        created_at=REFERENCE_NOW,
    )
    return event_type(
        booking=booking,
        service_title="React Web Application Development",
        client_name="Demo User",
        freelancer_name="John Doe",
        occurred_at=REFERENCE_NOW,
    )


class TestRouting:
    def test_created_notifies_freelancer(self, dispatcher):
        notification = dispatcher.on_event(make_event(BookingCreated))
        assert notification.type == NotificationType.BOOKING_REQUEST
        assert notification.recipient_id == "user-1"
        assert notification.payload.counterpart_name == "Demo User"
        assert not notification.read

    def test_confirmed_notifies_client(self, dispatcher):
        notification = dispatcher.on_event(make_event(BookingConfirmed))
        assert notification.type == NotificationType.BOOKING_CONFIRMED
        assert notification.recipient_id == "user-5"
        assert notification.payload.counterpart_name == "John Doe"

    def test_rejected_notifies_client(self, dispatcher):
        notification = dispatcher.on_event(make_event(BookingRejected))
        assert notification.type == NotificationType.BOOKING_REJECTED
        assert notification.recipient_id == "user-5"

    def test_payload_is_typed(self, dispatcher):
        notification = dispatcher.on_event(make_event())
        assert isinstance(notification, BookingRequestNotification)
        assert notification.payload.booking_id == "booking-1"
        assert notification.payload.service_title == "React Web Application Development"
        assert (notification.payload.start_time, notification.payload.end_time) == (at(10), at(12))

    def test_session_events_are_ignored(self, dispatcher):
        event = SessionEvent(SessionEventType.SIGNED_OUT, None, REFERENCE_NOW)
        assert dispatcher.on_event(event) is None
        assert dispatcher.list_notifications("user-1") == []

    def test_unknown_event_type(self, dispatcher):
        with pytest.raises(TypeError):
            dispatcher.on_event(make_event(BookingEvent))


class TestFeeds:
    def test_newest_first(self, dispatcher, clock):
        first = dispatcher.on_event(make_event(booking_id="booking-1"))
        clock.advance(minutes=5)
        second = dispatcher.on_event(make_event(booking_id="booking-2"))
        assert [n.id for n in dispatcher.list_notifications("user-1")] == [second.id, first.id]

    def test_same_instant_keeps_arrival_order(self, dispatcher):
        first = dispatcher.on_event(make_event(booking_id="booking-1"))
        second = dispatcher.on_event(make_event(booking_id="booking-2"))
        assert [n.id for n in dispatcher.list_notifications("user-1")] == [second.id, first.id]

    def test_feeds_are_per_recipient(self, dispatcher):
        dispatcher.on_event(make_event(BookingCreated))
        dispatcher.on_event(make_event(BookingConfirmed))
        assert len(dispatcher.list_notifications("user-1")) == 1
        assert len(dispatcher.list_notifications("user-5")) == 1
        assert dispatcher.list_notifications("user-3") == []

    def test_unknown_notification(self, dispatcher):
        with pytest.raises(NotFoundError):
            dispatcher.get_notification("notif-404")


class TestReadState:
    def test_mark_read(self, dispatcher):
        notification = dispatcher.on_event(make_event())
        dispatcher.mark_read(notification.id)
        assert dispatcher.get_notification(notification.id).read
        assert dispatcher.unread_count("user-1") == 0

    def test_mark_read_is_idempotent(self, dispatcher):
        notification = dispatcher.on_event(make_event())
        dispatcher.mark_read(notification.id)
        dispatcher.mark_read(notification.id)
        assert dispatcher.get_notification(notification.id).read
        assert dispatcher.unread_count("user-1") == 0

    def test_unread_count_matches_feed(self, dispatcher):
        for i in range(3):
            dispatcher.on_event(make_event(booking_id=f"booking-{i}"))
        feed = dispatcher.list_notifications("user-1")
        dispatcher.mark_read(feed[1].id)
        feed = dispatcher.list_notifications("user-1")
        assert dispatcher.unread_count("user-1") == sum(1 for n in feed if not n.read) == 2

    def test_only_recipient_can_mark_read(self, dispatcher):
        notification = dispatcher.on_event(make_event())
        with pytest.raises(ForbiddenError):
            dispatcher.mark_read(notification.id, owner_id="user-5")
        assert not dispatcher.get_notification(notification.id).read

    def test_mark_unknown(self, dispatcher):
        with pytest.raises(NotFoundError):
            dispatcher.mark_read("notif-404")

    def test_returned_notification_is_a_copy(self, dispatcher):
        notification = dispatcher.on_event(make_event())
        notification.read = True
        assert dispatcher.unread_count("user-1") == 1
