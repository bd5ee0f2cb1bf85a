"""End-to-end booking flows through the wired marketplace."""

import pytest

from gigdesk.container import build_marketplace
from gigdesk.errors import ForbiddenError, InvalidTransitionError, NotFoundError
from gigdesk.scheduling.engine import BookingDecision
from gigdesk.schemas.booking_schema import BookingStatus
from gigdesk.schemas.notification_schema import NotificationType
from tests.conftest import (
    CLIENT,
    CLIENT_ID,
    FREELANCER,
    FREELANCER_ID,
    NO_LATENCY,
    OTHER_FREELANCER,
    make_booking,
    sign_in_as,
)


class TestRequestConfirmFlow:
    @pytest.mark.asyncio
    async def test_full_confirm_flow(self, market, clock):
        booking = await make_booking(market, hour=10)

        # Freelancer sees one unread request
        freelancer = await sign_in_as(market, FREELANCER)
        feed = market.notifications.list_notifications(freelancer.id)
        assert len(feed) == 1
        request = feed[0]
        assert request.type == NotificationType.BOOKING_REQUEST
        assert request.payload.booking_id == booking.id
        assert market.notifications.unread_count(freelancer.id) == 1

        # Confirming through the request marks it read
        confirmed = market.respond_to_request(request.id, BookingDecision.CONFIRM)
        assert confirmed.status == BookingStatus.CONFIRMED
        assert market.notifications.get_notification(request.id).read
        assert market.notifications.unread_count(freelancer.id) == 0

        # Client is told
        client = await sign_in_as(market, CLIENT)
        client_feed = market.notifications.list_notifications(client.id)
        assert [n.type for n in client_feed] == [NotificationType.BOOKING_CONFIRMED]
        assert client_feed[0].payload.counterpart_name == "John Doe"

        # Client dismisses it
        market.dismiss(client_feed[0].id)
        assert market.notifications.unread_count(client.id) == 0

        # Work happens, booking completes, freelancer earns
        clock.advance(days=1)
        market.bookings.complete_booking(booking.id)
        assert market.bookings.earnings(FREELANCER_ID) == {"bdt": 50000}
        trace = [entry.status.value for entry in market.bookings.status_history(booking.id)]
        assert trace == ["pending", "confirmed", "completed"]

    @pytest.mark.asyncio
    async def test_reject_flow(self, market):
        booking = await make_booking(market)
        freelancer = await sign_in_as(market, FREELANCER)
        request = market.notifications.list_notifications(freelancer.id)[0]

        rejected = market.respond_to_request(request.id, "reject")

        assert rejected.status == BookingStatus.CANCELLED
        client_feed = market.notifications.list_notifications(CLIENT_ID)
        assert [n.type for n in client_feed] == [NotificationType.BOOKING_REJECTED]
        assert market.bookings.get_booking(booking.id).status == BookingStatus.CANCELLED


class TestRespondToRequest:
    @pytest.mark.asyncio
    async def test_request_stays_unread_until_answered(self, market):
        await make_booking(market)
        freelancer = await sign_in_as(market, FREELANCER)
        await market.session.sign_out()
        await sign_in_as(market, FREELANCER)
        assert market.notifications.unread_count(freelancer.id) == 1

    @pytest.mark.asyncio
    async def test_second_answer_is_rejected(self, market):
        await make_booking(market)
        freelancer = await sign_in_as(market, FREELANCER)
        request = market.notifications.list_notifications(freelancer.id)[0]
        market.respond_to_request(request.id, BookingDecision.CONFIRM)

        with pytest.raises(InvalidTransitionError):
            market.respond_to_request(request.id, BookingDecision.REJECT)
        assert market.bookings.list_bookings(freelancer.id)[0].status == BookingStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_forbidden_response_does_not_mark_read(self, market):
        await make_booking(market)
        request = market.notifications.list_notifications(FREELANCER_ID)[0]
        await sign_in_as(market, OTHER_FREELANCER)
        with pytest.raises(ForbiddenError):
            market.respond_to_request(request.id, BookingDecision.CONFIRM)
        assert not market.notifications.get_notification(request.id).read

    @pytest.mark.asyncio
    async def test_only_requests_can_be_answered(self, market):
        booking = await make_booking(market)
        await sign_in_as(market, FREELANCER)
        market.bookings.respond_to_booking(booking.id, FREELANCER_ID, BookingDecision.CONFIRM)
        confirmation = market.notifications.list_notifications(CLIENT_ID)[0]
        with pytest.raises(NotFoundError):
            market.respond_to_request(confirmation.id, BookingDecision.CONFIRM)

    @pytest.mark.asyncio
    async def test_cannot_dismiss_someone_elses_notification(self, market):
        await make_booking(market)
        request = market.notifications.list_notifications(FREELANCER_ID)[0]
        with pytest.raises(ForbiddenError):
            market.dismiss(request.id)


class TestWiring:
    @pytest.mark.asyncio
    async def test_close_detaches_dispatcher(self, market):
        market.close()
        await make_booking(market)
        assert market.notifications.list_notifications(FREELANCER_ID) == []
        assert market.session.subscriber_count == 0

    def test_unseeded_marketplace_is_empty(self, clock):
        empty = build_marketplace(latency=NO_LATENCY, clock=clock, seed=False)
        assert len(empty.identities) == 0
        assert empty.catalog.get("service-1") is None

    def test_seeded_marketplace(self, market):
        assert len(market.identities) == 5
        assert len(market.identities.list_freelancers()) == 3
        assert len(market.catalog.list_for_freelancer(FREELANCER_ID)) == 2
