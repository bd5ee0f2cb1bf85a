"""
Availability ledger: per-freelancer bookable time slots.

Slots are half-open intervals ``[start_time, end_time)``. Two slots of the
same freelancer never overlap, booked or not, and a booked slot is never
deleted or released. The booking engine claims slots through
``claim_slot``; freelancers manage their own slots through ``add_slot`` and
``remove_slot``, gated by the session store.
"""

from datetime import datetime
from typing import Optional

from gigdesk.errors import (
    ForbiddenError,
    InvalidRangeError,
    NoAvailabilityError,
    NotFoundError,
    OverlapError,
    SlotBookedError,
)
from gigdesk.logging_context import get_actor_logger
from gigdesk.schemas.booking_schema import AvailabilitySlot
from gigdesk.session.store import SessionStore
from gigdesk.utils import DateTimeLike, ensure_datetime, intervals_overlap, new_id

logger = get_actor_logger(__name__)


class AvailabilityLedger:
    """Owns every availability slot; all mutation goes through this API."""

    def __init__(self, session: SessionStore) -> None:
        self._session = session
        self._slots: dict[str, AvailabilitySlot] = {}

    # ------------------------------------------------------------------ #
    # Freelancer-facing operations
    # ------------------------------------------------------------------ #

    def add_slot(
        self, freelancer_id: str, start_time: DateTimeLike, end_time: DateTimeLike
    ) -> AvailabilitySlot:
        """
        Declare a new bookable interval.

        Raises:
            UnauthenticatedError: If nobody is signed in.
            ForbiddenError: If the caller is not this freelancer.
            InvalidRangeError: If end_time <= start_time.
            OverlapError: If the interval intersects an existing slot.
        """
        self._require_owner(freelancer_id)
        start, end = ensure_datetime(start_time), ensure_datetime(end_time)
        if end <= start:
            raise InvalidRangeError()

        conflict = self._find_overlap(freelancer_id, start, end)
        if conflict is not None:
            logger.info(
                "Slot %s-%s for %s overlaps %s", start, end, freelancer_id, conflict.id
            )
            raise OverlapError(conflict.id)

        slot = AvailabilitySlot(
            id=new_id("slot"), freelancer_id=freelancer_id, start_time=start, end_time=end
        )
        self._slots[slot.id] = slot
        logger.info("Slot added: %s for %s (%s - %s)", slot.id, freelancer_id, start, end)
        return slot.model_copy()

    def remove_slot(self, slot_id: str) -> None:
        """
        Delete an unbooked slot.

        Raises:
            NotFoundError: If the slot does not exist.
            ForbiddenError: If the caller does not own the slot.
            SlotBookedError: If the slot is booked.
        """
        slot = self._slots.get(slot_id)
        if slot is None:
            raise NotFoundError("slot", slot_id)
        self._require_owner(slot.freelancer_id)
        if slot.is_booked:
            raise SlotBookedError(slot_id)
        del self._slots[slot_id]
        logger.info("Slot removed: %s", slot_id)

    # ------------------------------------------------------------------ #
    # Booking-engine operations
    # ------------------------------------------------------------------ #

    def find_open_slot(
        self, freelancer_id: str, start_time: DateTimeLike, end_time: DateTimeLike
    ) -> Optional[AvailabilitySlot]:
        """Return the unbooked slot that fully contains the window, if any."""
        start, end = ensure_datetime(start_time), ensure_datetime(end_time)
        for slot in self._sorted(freelancer_id):
            if not slot.is_booked and slot.start_time <= start and end <= slot.end_time:
                return slot
        return None

    def claim_slot(
        self, freelancer_id: str, start_time: DateTimeLike, end_time: DateTimeLike
    ) -> AvailabilitySlot:
        """
        Mark the window as booked inside the unbooked slot that contains it.

        The containing slot shrinks to exactly the window and becomes booked,
        keeping its id. Any uncovered head or tail is split off into new
        unbooked slots, so the freelancer's remaining time stays bookable.

        Raises:
            NoAvailabilityError: If no unbooked slot contains the window.
        """
        start, end = ensure_datetime(start_time), ensure_datetime(end_time)
        slot = self.find_open_slot(freelancer_id, start, end)
        if slot is None:
            raise NoAvailabilityError(freelancer_id)

        if slot.start_time < start:
            self._split_off(freelancer_id, slot.start_time, start)
        if end < slot.end_time:
            self._split_off(freelancer_id, end, slot.end_time)

        slot.start_time, slot.end_time = start, end
        slot.is_booked = True
        logger.info("Slot claimed: %s (%s - %s)", slot.id, start, end)
        return slot.model_copy()

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_slot(self, slot_id: str) -> AvailabilitySlot:
        slot = self._slots.get(slot_id)
        if slot is None:
            raise NotFoundError("slot", slot_id)
        return slot.model_copy()

    def list_slots(
        self,
        freelancer_id: str,
        start: Optional[DateTimeLike] = None,
        end: Optional[DateTimeLike] = None,
        include_booked: bool = True,
    ) -> list[AvailabilitySlot]:
        """Slots of a freelancer ordered by start time.

        With ``start``/``end``, only slots intersecting that window are returned.
        """
        window_start = ensure_datetime(start) if start is not None else None
        window_end = ensure_datetime(end) if end is not None else None
        result = []
        for slot in self._sorted(freelancer_id):
            if not include_booked and slot.is_booked:
                continue
            if window_start is not None and slot.end_time <= window_start:
                continue
            if window_end is not None and slot.start_time >= window_end:
                continue
            result.append(slot.model_copy())
        return result

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _require_owner(self, freelancer_id: str) -> None:
        identity = self._session.require_identity()
        if identity.id != freelancer_id or not identity.is_freelancer:
            raise ForbiddenError(
                "Only the freelancer can manage their own availability.",
                entity_id=freelancer_id,
            )

    def _sorted(self, freelancer_id: str) -> list[AvailabilitySlot]:
        return sorted(
            (s for s in self._slots.values() if s.freelancer_id == freelancer_id),
            key=lambda s: s.start_time,
        )

    def _find_overlap(
        self, freelancer_id: str, start: datetime, end: datetime
    ) -> Optional[AvailabilitySlot]:
        for slot in self._sorted(freelancer_id):
            if intervals_overlap(start, end, slot.start_time, slot.end_time):
                return slot
        return None

    def _split_off(self, freelancer_id: str, start: datetime, end: datetime) -> None:
        remainder = AvailabilitySlot(
            id=new_id("slot"), freelancer_id=freelancer_id, start_time=start, end_time=end
        )
        self._slots[remainder.id] = remainder
        logger.debug("Slot remainder kept open: %s (%s - %s)", remainder.id, start, end)
