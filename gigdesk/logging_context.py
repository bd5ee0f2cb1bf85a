"""Actor ID logging context for tracing operations back to a signed-in user.

Provides an actor_id-aware logger that attaches the current identity's ID
to every log record, making it easy to follow one user's session through
the session store, the ledger, and the booking engine.

Usage:
    from gigdesk.logging_context import get_actor_logger, set_actor_id

    set_actor_id("user-5")
    logger = get_actor_logger(__name__)
    logger.info("Booking requested")  # record.actor_id == "user-5"
"""

import logging
from contextvars import ContextVar

ANONYMOUS = "anonymous"

_actor_id: ContextVar[str] = ContextVar("actor_id", default=ANONYMOUS)


def set_actor_id(actor_id: str) -> None:
    """Set the acting identity for the current async context."""
    _actor_id.set(actor_id)


def clear_actor_id() -> None:
    """Reset the acting identity after sign-out."""
    _actor_id.set(ANONYMOUS)


def get_actor_id() -> str:
    """Retrieve the current acting identity."""
    return _actor_id.get()


class ActorIdFilter(logging.Filter):
    """Injects actor_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.actor_id = _actor_id.get()  # type: ignore[attr-defined]
        return True


def get_actor_logger(name: str) -> logging.Logger:
    """Return a logger with the ActorIdFilter attached.

    The filter adds ``actor_id`` to each record so formatters can
    include ``%(actor_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, ActorIdFilter) for f in logger.filters):
        logger.addFilter(ActorIdFilter())
    return logger
