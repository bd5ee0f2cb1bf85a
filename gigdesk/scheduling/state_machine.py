"""
Finite state machine for the booking status lifecycle.

    pending --confirm--------> confirmed --complete--> completed
    pending --reject---------> cancelled
    pending --client_cancel--> cancelled

``pending`` is the only initial state; ``completed`` and ``cancelled`` are
terminal. Every transition must be listed in the table below; anything else
is rejected with the triggers that would have been valid.

Usage:
    sm = BookingStateMachine()
    sm.transition(BookingTrigger.CONFIRM)
    assert sm.current_status == BookingStatus.CONFIRMED
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from gigdesk.errors import InvalidTransitionError
from gigdesk.schemas.booking_schema import BookingStatus
from gigdesk.utils import utc_now

logger = logging.getLogger(__name__)


class BookingTrigger(str, Enum):
    """Events that cause status transitions."""
    CONFIRM = "confirm"
    REJECT = "reject"
    CLIENT_CANCEL = "client_cancel"
    COMPLETE = "complete"


@dataclass
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    trigger: BookingTrigger


@dataclass
class StatusEntry:
    """Recorded history entry for a status visit."""
    status: BookingStatus
    entered_at: datetime
    trigger: Optional[BookingTrigger] = None


TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


class BookingStateMachine:
    """Deterministic status machine for a single booking."""

    TRANSITIONS: list[Transition] = [
        # --- Freelancer response ---
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingTrigger.CONFIRM),
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, BookingTrigger.REJECT),

        # --- Client withdrawal ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED, BookingTrigger.CLIENT_CANCEL),

        # --- Elapsed ---
        Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, BookingTrigger.COMPLETE),
    ]

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._current_status = BookingStatus.PENDING
        self._history: list[StatusEntry] = [
            StatusEntry(status=BookingStatus.PENDING, entered_at=clock())
        ]

    @property
    def current_status(self) -> BookingStatus:
        return self._current_status

    def can_transition(self, trigger: BookingTrigger) -> bool:
        return trigger in self.get_valid_triggers()

    def transition(self, trigger: BookingTrigger) -> BookingStatus:
        """
        Execute a status transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new booking status.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_status == self._current_status and t.trigger == trigger:
                old_status = self._current_status
                self._current_status = t.to_status
                self._history.append(StatusEntry(
                    status=self._current_status,
                    entered_at=self._clock(),
                    trigger=trigger,
                ))

                logger.debug(
                    "Status transition: %s -> %s (trigger: %s)",
                    old_status.value, self._current_status.value, trigger.value,
                )
                return self._current_status

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"Cannot {trigger.value} a booking that is {self._current_status.value}. "
            f"Valid actions: {valid}",
            field="status",
        )

    def get_valid_triggers(self) -> list[BookingTrigger]:
        """Return all triggers valid from the current status."""
        return [t.trigger for t in self.TRANSITIONS if t.from_status == self._current_status]

    def get_history(self) -> list[StatusEntry]:
        """Return the full status transition history."""
        return list(self._history)

    def get_status_trace(self) -> list[str]:
        """Return ordered list of status names visited."""
        return [entry.status.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_status in TERMINAL_STATUSES
