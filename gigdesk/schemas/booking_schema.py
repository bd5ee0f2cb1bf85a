"""Service, availability, and booking data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class Service(BaseModel):
    """A bookable offering published by a freelancer."""

    id: str
    title: str
    description: Optional[str] = None
    price_cents: int = Field(ge=0)
    currency: str = "bdt"
    duration_minutes: int = Field(gt=0)
    freelancer_id: str
    is_active: bool = True
    category_id: Optional[str] = None


class AvailabilitySlot(BaseModel):
    """A freelancer-declared bookable interval, half-open ``[start_time, end_time)``."""

    id: str
    freelancer_id: str
    start_time: datetime
    end_time: datetime
    is_booked: bool = False

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)


class Booking(BaseModel):
    """A client's request to occupy a freelancer's time against a service."""

    id: str
    client_id: str
    freelancer_id: str
    service_id: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    notes: Optional[str] = None
    total_amount_cents: int = 0
    currency: str = "bdt"
    slot_id: Optional[str] = None
    created_at: datetime

    def involves(self, identity_id: str) -> bool:
        """True when the identity is the client or the freelancer of this booking."""
        return identity_id in (self.client_id, self.freelancer_id)
