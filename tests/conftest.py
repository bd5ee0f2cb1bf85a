"""Shared test fixtures and helpers."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from gigdesk.catalog.identities import IdentityRegistry
from gigdesk.catalog.services import ServiceCatalog
from gigdesk.config import LatencyConfig
from gigdesk.container import Marketplace, build_marketplace
from gigdesk.notifications.dispatcher import NotificationDispatcher
from gigdesk.schemas.booking_schema import Booking
from gigdesk.schemas.identity_schema import Identity
from gigdesk.seed import seed_demo_data
from gigdesk.session.store import SessionStore

NO_LATENCY = LatencyConfig(sign_in_ms=0, sign_up_ms=0, sign_out_ms=0, booking_ms=0)

# 2025-01-14 12:00 UTC; bookings in tests land on the following day.
REFERENCE_NOW = datetime(2025, 1, 14, 12, 0, tzinfo=timezone.utc)

CLIENT = ("demo@example.com", "demo123")
CLIENT_ID = "user-5"
OTHER_CLIENT = ("client@example.com", "client123")
OTHER_CLIENT_ID = "user-4"
FREELANCER = ("john.doe@example.com", "freelancer123")
FREELANCER_ID = "user-1"
OTHER_FREELANCER = ("sarah.smith@example.com", "freelancer123")
OTHER_FREELANCER_ID = "user-2"

# service-1: "React Web Application Development" by user-1, 120 minutes, 50000
SERVICE_ID = "service-1"
SERVICE_MINUTES = 120


class FrozenClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime = REFERENCE_NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def market(clock) -> Marketplace:
    return build_marketplace(latency=NO_LATENCY, clock=clock, seed=True)


@pytest.fixture
def registry():
    identities = IdentityRegistry()
    seed_demo_data(identities, ServiceCatalog(), "bdt")
    return identities


@pytest.fixture
def store(registry, clock):
    return SessionStore(registry, latency=NO_LATENCY, clock=clock)


@pytest.fixture
def dispatcher(clock):
    return NotificationDispatcher(clock=clock)


def at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    """A UTC instant on January ``day``, 2025."""
    return datetime(2025, 1, day, hour, minute, tzinfo=timezone.utc)


async def sign_in_as(market: Marketplace, credentials: tuple[str, str]) -> Identity:
    """Replace whoever is signed in with the given account."""
    if market.session.is_authenticated:
        await market.session.sign_out()
    email, password = credentials
    return await market.session.sign_in(email, password)


async def open_day(
    market: Marketplace,
    start_hour: int = 9,
    end_hour: int = 17,
    day: int = 15,
    credentials: tuple[str, str] = FREELANCER,
) -> str:
    """Sign in as a freelancer and declare one availability slot; returns the slot id."""
    identity = await sign_in_as(market, credentials)
    slot = market.ledger.add_slot(identity.id, at(start_hour, day=day), at(end_hour, day=day))
    return slot.id


async def make_booking(
    market: Marketplace,
    hour: int = 10,
    minute: int = 0,
    notes: Optional[str] = None,
    credentials: tuple[str, str] = CLIENT,
) -> Booking:
    """Open the freelancer's day, then book service-1 at ``hour`` as the client.

    The client stays signed in afterwards.
    """
    await open_day(market)
    client = await sign_in_as(market, credentials)
    start = at(hour, minute)
    return await market.bookings.create_booking(
        client.id, SERVICE_ID, start, start + timedelta(minutes=SERVICE_MINUTES), notes=notes
    )
