"""Booking conversation message model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Message(BaseModel):
    """A single append-only chat message inside a booking's thread."""

    model_config = ConfigDict(frozen=True)

    id: str
    booking_id: str
    sender_id: str
    content: str
    created_at: datetime
