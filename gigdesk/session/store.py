"""
Authentication session store.

Holds at most one current identity and gates every mutating operation in
the marketplace core. Sign-in, sign-up, and sign-out are async and await a
configurable simulated latency before touching state; they are serialised
by a lock so subscribers observe transitions in invocation order.

Usage:
    store = SessionStore(identities, latency=LatencyConfig(0, 0, 0, 0))
    unsubscribe = store.subscribe(lambda event: print(event.type))
    identity = await store.sign_in("demo@example.com", "demo123")
    unsubscribe()
"""

import asyncio
from datetime import datetime
from typing import Callable, Optional

from gigdesk.catalog.identities import IdentityRegistry
from gigdesk.config import LatencyConfig, settings
from gigdesk.errors import InvalidCredentialsError, UnauthenticatedError, UserExistsError
from gigdesk.events import ObserverRegistry, SessionEvent, SessionEventType, Subscription
from gigdesk.logging_context import clear_actor_id, get_actor_logger, set_actor_id
from gigdesk.schemas.identity_schema import Identity, UserRole
from gigdesk.utils import new_id, simulate_latency, utc_now

logger = get_actor_logger(__name__)

Clock = Callable[[], datetime]


class SessionStore:
    """Single-identity session with push notifications on every transition."""

    def __init__(
        self,
        identities: IdentityRegistry,
        latency: Optional[LatencyConfig] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._identities = identities
        self._latency = latency or settings.latency
        self._clock = clock
        self._current_id: Optional[str] = None
        self._observers: ObserverRegistry[SessionEvent] = ObserverRegistry("session")
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def current_identity(self) -> Optional[Identity]:
        """Return the signed-in identity, or None."""
        if self._current_id is None:
            return None
        return self._identities.get(self._current_id)

    def require_identity(self) -> Identity:
        """Return the signed-in identity or raise UnauthenticatedError."""
        identity = self.current_identity()
        if identity is None:
            raise UnauthenticatedError()
        return identity

    @property
    def is_authenticated(self) -> bool:
        return self.current_identity() is not None

    def now(self) -> datetime:
        """Reference clock used for all time-relative validation."""
        return self._clock()

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    async def sign_in(self, email: str, password: str) -> Identity:
        """
        Authenticate with an exact email and password match.

        Raises:
            InvalidCredentialsError: If no stored identity matches both fields.
                The current identity is left unchanged.
        """
        async with self._lock:
            await simulate_latency(self._latency.sign_in_ms)
            identity = self._identities.verify(email, password)
            if identity is None:
                logger.info("Sign-in rejected for %s", email)
                raise InvalidCredentialsError()
            self._set_current(identity)
            logger.info("Signed in: %s", identity.id)
            return identity

    async def sign_up(self, email: str, password: str, display_name: str) -> Identity:
        """
        Create a new client identity and sign it in.

        Raises:
            UserExistsError: If an identity with that email already exists.
        """
        async with self._lock:
            await simulate_latency(self._latency.sign_up_ms)
            if self._identities.find_by_email(email) is not None:
                logger.info("Sign-up rejected, email taken: %s", email)
                raise UserExistsError(email)
            identity = Identity(
                id=new_id("user"),
                email=email,
                display_name=display_name,
                role=UserRole.CLIENT,
                is_public=True,
            )
            self._identities.add(identity, password)
            self._set_current(identity)
            logger.info("Signed up: %s", identity.id)
            return identity

    async def sign_out(self) -> None:
        """Clear the current identity and notify subscribers."""
        async with self._lock:
            await simulate_latency(self._latency.sign_out_ms)
            previous = self._current_id
            self._current_id = None
            clear_actor_id()
            logger.info("Signed out: %s", previous or "nobody")
            self._observers.publish(
                SessionEvent(SessionEventType.SIGNED_OUT, None, self._clock())
            )

    # ------------------------------------------------------------------ #
    # Subscriptions
    # ------------------------------------------------------------------ #

    def subscribe(self, callback: Callable[[SessionEvent], None]) -> Subscription:
        """Register a callback for every session transition.

        Returns a Subscription; calling it deregisters only this callback.
        """
        return self._observers.subscribe(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._observers)

    def _set_current(self, identity: Identity) -> None:
        self._current_id = identity.id
        set_actor_id(identity.id)
        self._observers.publish(
            SessionEvent(SessionEventType.SIGNED_IN, identity, self._clock())
        )
