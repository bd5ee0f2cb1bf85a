"""Notification models: a tagged union keyed by ``type``.

Each variant carries its own typed payload instead of a free-form dict,
so presentation code can render it without guessing at keys.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    BOOKING_REQUEST = "booking_request"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_REJECTED = "booking_rejected"


class BookingNotificationPayload(BaseModel):
    """Booking details shown in a notification.

    ``counterpart_name`` is the other party: the client for a request,
    the freelancer for a confirmation or rejection.
    """

    booking_id: str
    service_title: str
    counterpart_name: str
    start_time: datetime
    end_time: datetime


class _NotificationBase(BaseModel):
    id: str
    recipient_id: str
    payload: BookingNotificationPayload
    read: bool = False
    created_at: datetime


class BookingRequestNotification(_NotificationBase):
    type: Literal[NotificationType.BOOKING_REQUEST] = NotificationType.BOOKING_REQUEST


class BookingConfirmedNotification(_NotificationBase):
    type: Literal[NotificationType.BOOKING_CONFIRMED] = NotificationType.BOOKING_CONFIRMED


class BookingRejectedNotification(_NotificationBase):
    type: Literal[NotificationType.BOOKING_REJECTED] = NotificationType.BOOKING_REJECTED


Notification = Annotated[
    Union[
        BookingRequestNotification,
        BookingConfirmedNotification,
        BookingRejectedNotification,
    ],
    Field(discriminator="type"),
]
