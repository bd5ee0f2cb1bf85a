"""Shared utilities used across the marketplace core."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Union

DateTimeLike = Union[datetime, str]


def new_id(prefix: str) -> str:
    """Return a process-unique identifier such as ``booking-3f9a1c2b7e04``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def ensure_datetime(value: DateTimeLike) -> datetime:
    """Coerce an ISO-8601 string or datetime to an aware datetime.

    Naive values are taken as UTC. A trailing ``Z`` is accepted.

    Examples:
        >>> ensure_datetime("2025-01-15T10:00:00Z").isoformat()
        '2025-01-15T10:00:00+00:00'
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_iso(value: datetime) -> str:
    """Format an aware datetime as ISO-8601."""
    return ensure_datetime(value).isoformat()


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open interval intersection: ``[a) and [b)`` share at least one instant."""
    return start_a < end_b and start_b < end_a


async def simulate_latency(milliseconds: int) -> None:
    """Await an artificial network delay. Zero still yields to the event loop."""
    await asyncio.sleep(max(milliseconds, 0) / 1000)
