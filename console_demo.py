"""
Offline console demo: walks a client and a freelancer through the booking core.

Uses the real session store, availability ledger, booking engine, and
notification dispatcher with the seeded demo accounts. No network, no
persistence; simulated latency is disabled unless ``--latency`` is given.

Usage:
    python console_demo.py
    python console_demo.py --scenario reject
    python console_demo.py --scenario availability
"""

import argparse
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from gigdesk.config import LatencyConfig, settings
from gigdesk.container import Marketplace, build_marketplace
from gigdesk.errors import DomainError
from gigdesk.events import SessionEvent
from gigdesk.scheduling.engine import BookingDecision
from gigdesk.scheduling.time_slots import candidate_start_times
from gigdesk.seed import DEMO_CREDENTIALS, FREELANCER_DEMO_PASSWORD

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

FREELANCER_EMAIL = "john.doe@example.com"
DEMO_SERVICE_ID = "service-1"

NO_LATENCY = LatencyConfig(sign_in_ms=0, sign_up_ms=0, sign_out_ms=0, booking_ms=0)


class ConsoleSession:
    """Plays scripted marketplace scenarios in the terminal."""

    SCENARIOS: tuple[str, ...] = ("booking", "reject", "availability")

    def __init__(self, latency: Optional[LatencyConfig] = None) -> None:
        self.market: Marketplace = build_marketplace(latency=latency or NO_LATENCY, seed=True)
        self.current_actor = "anonymous"
        self.market.session.subscribe(self._on_session_event)
        tomorrow = self.market.session.now().date() + timedelta(days=1)
        self.day = tomorrow

    def say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{self.current_actor}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def error(self, exc: DomainError) -> None:
        print(f"{RED}  !! {exc.code.value}: {exc.message}{RESET}")

    def _on_session_event(self, event: SessionEvent) -> None:
        self.current_actor = event.identity.display_name if event.identity else "anonymous"
        self.system_log(f"Session: {event.type.value}")

    def at(self, hour: int, minute: int = 0) -> datetime:
        return datetime(self.day.year, self.day.month, self.day.day, hour, minute, tzinfo=timezone.utc)

    # ------------------------------------------------------------------ #
    # Scenario runner
    # ------------------------------------------------------------------ #

    def run_scenario(self, scenario: str) -> None:
        handlers: dict[str, Callable[[], Awaitable[None]]] = {
            "booking": self._scenario_booking,
            "reject": self._scenario_reject,
            "availability": self._scenario_availability,
        }
        handler = handlers.get(scenario)
        if handler is None:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  GIGDESK BOOKING CORE - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Marketplace: {settings.marketplace.name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

        asyncio.run(handler())

        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    # ------------------------------------------------------------------ #
    # Shared steps
    # ------------------------------------------------------------------ #

    async def _freelancer_opens_day(self) -> str:
        identity = await self.market.session.sign_in(FREELANCER_EMAIL, FREELANCER_DEMO_PASSWORD)
        slot = self.market.ledger.add_slot(identity.id, self.at(9), self.at(17))
        self.say(f"I'm available {slot.start_time:%a %d %b} 09:00-17:00.")
        await self.market.session.sign_out()
        return identity.id

    async def _client_books(self, hour: int) -> Optional[str]:
        client = await self.market.session.sign_in(
            DEMO_CREDENTIALS["email"], DEMO_CREDENTIALS["password"]
        )
        service = self.market.catalog.get_active(DEMO_SERVICE_ID)
        picker = candidate_start_times(self.day, duration_minutes=service.duration_minutes)
        self.system_log(f"Time picker: {', '.join(picker.labels())}")

        start = self.at(hour)
        end = start + timedelta(minutes=service.duration_minutes)
        try:
            booking = await self.market.bookings.create_booking(
                client.id, service.id, start, end, notes="Need the app to be mobile-responsive"
            )
        except DomainError as exc:
            self.error(exc)
            return None
        else:
            self.say(
                f"Requested '{service.title}' at {start:%H:%M}. "
                f"Booking {booking.id} is {booking.status.value}."
            )
            return booking.id
        finally:
            await self.market.session.sign_out()

    async def _freelancer_responds(self, decision: BookingDecision) -> None:
        identity = await self.market.session.sign_in(FREELANCER_EMAIL, FREELANCER_DEMO_PASSWORD)
        feed = self.market.notifications.list_notifications(identity.id)
        self.system_log(f"Unread notifications: {self.market.notifications.unread_count(identity.id)}")
        request = feed[0]
        self.say(
            f"{request.payload.counterpart_name} wants '{request.payload.service_title}' "
            f"at {request.payload.start_time:%H:%M}. I'll {decision.value}."
        )
        booking = self.market.respond_to_request(request.id, decision)
        self.system_log(f"Booking {booking.id} is now {booking.status.value}")
        await self.market.session.sign_out()

    async def _client_reads_feed(self) -> None:
        client = await self.market.session.sign_in(
            DEMO_CREDENTIALS["email"], DEMO_CREDENTIALS["password"]
        )
        for notification in self.market.notifications.list_notifications(client.id):
            self.say(
                f"Notification [{notification.type.value}] from "
                f"{notification.payload.counterpart_name}"
            )
            self.market.dismiss(notification.id)
        await self.market.session.sign_out()

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    async def _scenario_booking(self) -> None:
        freelancer_id = await self._freelancer_opens_day()
        booking_id = await self._client_books(hour=10)
        if booking_id is None:
            return
        await self._freelancer_responds(BookingDecision.CONFIRM)
        await self._client_reads_feed()

        slots = self.market.ledger.list_slots(freelancer_id)
        for slot in slots:
            state = f"{YELLOW}booked{RESET}" if slot.is_booked else "open"
            self.system_log(f"Slot {slot.start_time:%H:%M}-{slot.end_time:%H:%M} {state}")
        trace = [entry.status.value for entry in self.market.bookings.status_history(booking_id)]
        self.system_log(f"Status trace: {' -> '.join(trace)}")

    async def _scenario_reject(self) -> None:
        await self._freelancer_opens_day()
        booking_id = await self._client_books(hour=13)
        if booking_id is None:
            return
        await self._freelancer_responds(BookingDecision.REJECT)
        await self._client_reads_feed()

    async def _scenario_availability(self) -> None:
        identity = await self.market.session.sign_in(FREELANCER_EMAIL, FREELANCER_DEMO_PASSWORD)
        self.market.ledger.add_slot(identity.id, self.at(10), self.at(11))
        self.say("Added 10:00-11:00.")
        for start, end in [(self.at(10, 30), self.at(11, 30)), (self.at(12), self.at(11))]:
            try:
                self.market.ledger.add_slot(identity.id, start, end)
            except DomainError as exc:
                self.error(exc)
        await self.market.session.sign_out()

        booking_id = await self._client_books(hour=15)
        if booking_id is None:
            self.system_log("Bookings need an open availability slot.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=list(ConsoleSession.SCENARIOS),
        default="booking",
        help="Scripted scenario to play",
    )
    parser.add_argument(
        "--latency",
        action="store_true",
        help="Use the configured simulated network latency",
    )
    args = parser.parse_args()

    session = ConsoleSession(latency=settings.latency if args.latency else None)
    session.run_scenario(args.scenario)


if __name__ == "__main__":
    main()
