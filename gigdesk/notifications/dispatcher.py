"""
Notification dispatcher: turns booking events into per-user feeds.

BookingCreated notifies the freelancer with a ``booking_request``;
BookingConfirmed and BookingRejected notify the client. Session events are
accepted so the dispatcher can sit on the session store's subscription
list, but they produce no notification.

Notifications are never deleted. The read flag only changes through
``mark_read``; booking requests in particular stay unread until the
freelancer responds or dismisses them explicitly.
"""

import itertools
from datetime import datetime
from typing import Callable, Optional

from gigdesk.errors import ForbiddenError, NotFoundError
from gigdesk.events import (
    BookingConfirmed,
    BookingCreated,
    BookingEvent,
    BookingRejected,
    DomainEvent,
    SessionEvent,
)
from gigdesk.logging_context import get_actor_logger
from gigdesk.schemas.notification_schema import (
    BookingConfirmedNotification,
    BookingNotificationPayload,
    BookingRejectedNotification,
    BookingRequestNotification,
    Notification,
)
from gigdesk.utils import new_id, utc_now

logger = get_actor_logger(__name__)

# event type -> (notification model, recipient is the freelancer)
_ROUTES: dict[type, tuple[type, bool]] = {
    BookingCreated: (BookingRequestNotification, True),
    BookingConfirmed: (BookingConfirmedNotification, False),
    BookingRejected: (BookingRejectedNotification, False),
}


class NotificationDispatcher:
    """Per-user notification feeds with read/unread tracking."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._notifications: dict[str, Notification] = {}
        self._sequence: dict[str, int] = {}
        self._counter = itertools.count()

    def on_event(self, event: DomainEvent) -> Optional[Notification]:
        """Consume a session or booking event; returns the notification created, if any."""
        if isinstance(event, SessionEvent):
            logger.debug("Session event observed: %s", event.type.value)
            return None

        route = _ROUTES.get(type(event))
        if route is None:
            raise TypeError(f"Unsupported event: {type(event).__name__}")
        model, to_freelancer = route
        return self._append(model, event, to_freelancer)

    def list_notifications(self, user_id: str) -> list[Notification]:
        """Feed for a user, newest first."""
        feed = [n for n in self._notifications.values() if n.recipient_id == user_id]
        feed.sort(key=lambda n: (n.created_at, self._sequence[n.id]), reverse=True)
        return [n.model_copy() for n in feed]

    def get_notification(self, notification_id: str) -> Notification:
        return self._require(notification_id).model_copy()

    def mark_read(self, notification_id: str, owner_id: Optional[str] = None) -> None:
        """
        Mark a notification as read. Marking it again changes nothing.

        Raises:
            NotFoundError: If the notification does not exist.
            ForbiddenError: If owner_id is given and is not the recipient.
        """
        notification = self._require(notification_id)
        if owner_id is not None and owner_id != notification.recipient_id:
            raise ForbiddenError(
                "You can only update your own notifications.", entity_id=notification_id
            )
        if not notification.read:
            notification.read = True
            logger.debug("Notification read: %s", notification_id)

    def unread_count(self, user_id: str) -> int:
        return sum(
            1 for n in self._notifications.values()
            if n.recipient_id == user_id and not n.read
        )

    def _require(self, notification_id: str) -> Notification:
        notification = self._notifications.get(notification_id)
        if notification is None:
            raise NotFoundError("notification", notification_id)
        return notification

    def _append(self, model: type, event: BookingEvent, to_freelancer: bool) -> Notification:
        booking = event.booking
        recipient_id = booking.freelancer_id if to_freelancer else booking.client_id
        counterpart = event.client_name if to_freelancer else event.freelancer_name
        notification = model(
            id=new_id("notif"),
            recipient_id=recipient_id,
            payload=BookingNotificationPayload(
                booking_id=booking.id,
                service_title=event.service_title,
                counterpart_name=counterpart,
                start_time=booking.start_time,
                end_time=booking.end_time,
            ),
            created_at=self._clock(),
        )
        self._notifications[notification.id] = notification
        self._sequence[notification.id] = next(self._counter)
        logger.info(
            "Notification %s (%s) queued for %s",
            notification.id, notification.type.value, recipient_id,
        )
        return notification.model_copy()
