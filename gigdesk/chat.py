"""Append-only chat threads, one per booking, visible to its two participants."""

from gigdesk.errors import EmptyMessageError, ForbiddenError, MessageTooLongError
from gigdesk.logging_context import get_actor_logger
from gigdesk.scheduling.engine import BookingEngine
from gigdesk.schemas.booking_schema import Booking
from gigdesk.schemas.chat_schema import Message
from gigdesk.session.store import SessionStore
from gigdesk.utils import new_id

logger = get_actor_logger(__name__)

MAX_MESSAGE_LENGTH = 2000


class ChatService:
    """Booking conversations between a client and a freelancer."""

    def __init__(self, session: SessionStore, bookings: BookingEngine) -> None:
        self._session = session
        self._bookings = bookings
        self._threads: dict[str, list[Message]] = {}

    def post_message(self, booking_id: str, sender_id: str, content: str) -> Message:
        """
        Append a message to a booking's thread.

        Raises:
            NotFoundError: If the booking does not exist.
            UnauthenticatedError: If nobody is signed in.
            ForbiddenError: If the sender is not signed in or not a participant.
            EmptyMessageError: If the content is blank.
            MessageTooLongError: If the trimmed content exceeds MAX_MESSAGE_LENGTH.
        """
        booking = self._bookings.get_booking(booking_id)
        identity = self._session.require_identity()
        if identity.id != sender_id:
            raise ForbiddenError("You can only send messages as yourself.", entity_id=sender_id)
        self._require_participant(booking, sender_id)

        text = content.strip()
        if not text:
            raise EmptyMessageError()
        if len(text) > MAX_MESSAGE_LENGTH:
            raise MessageTooLongError(len(text), MAX_MESSAGE_LENGTH)

        message = Message(
            id=new_id("msg"),
            booking_id=booking_id,
            sender_id=sender_id,
            content=text,
            created_at=self._session.now(),
        )
        self._threads.setdefault(booking_id, []).append(message)
        logger.debug("Message %s posted to %s", message.id, booking_id)
        return message

    def list_messages(self, booking_id: str, reader_id: str) -> list[Message]:
        """Thread contents in posting order; participants only."""
        booking = self._bookings.get_booking(booking_id)
        self._require_participant(booking, reader_id)
        return list(self._threads.get(booking_id, []))

    @staticmethod
    def _require_participant(booking: Booking, identity_id: str) -> None:
        if not booking.involves(identity_id):
            raise ForbiddenError(
                "Only the client and the freelancer can use this chat.",
                entity_id=booking.id,
            )
