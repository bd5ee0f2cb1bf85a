"""Domain error taxonomy for the marketplace core.

Every failure a caller can recover from is a ``DomainError`` subclass
carrying an ``ErrorCode``, a user-facing message, and the field or entity
that caused it, so presentation code can render an actionable message.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable error codes exposed to callers."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID_WINDOW = "invalid_window"
    INVALID_RANGE = "invalid_range"
    OVERLAP = "overlap"
    SLOT_BOOKED = "slot_booked"
    NO_AVAILABILITY = "no_availability"
    INVALID_TRANSITION = "invalid_transition"
    USER_EXISTS = "user_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    SERVICE_NOT_FOUND = "service_not_found"
    EMPTY_MESSAGE = "empty_message"
    MESSAGE_TOO_LONG = "message_too_long"
    INVALID_DECISION = "invalid_decision"


class DomainError(Exception):
    """Base domain error with code, user-safe message, and context."""

    code: ErrorCode = ErrorCode.FORBIDDEN

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.entity_id = entity_id

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Optional[str]]:
        """Flat representation for presentation layers."""
        return {
            "code": self.code.value,
            "message": self.message,
            "field": self.field,
            "entity_id": self.entity_id,
        }


class UnauthenticatedError(DomainError):
    """Raised when an operation needs a signed-in identity and there is none."""

    code = ErrorCode.UNAUTHENTICATED

    def __init__(self, message: str = "You need to sign in first.") -> None:
        super().__init__(message)


class ForbiddenError(DomainError):
    """Raised when the acting identity may not touch the entity."""

    code = ErrorCode.FORBIDDEN


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind.capitalize()} '{entity_id}' not found.", entity_id=entity_id)
        self.kind = kind


class InvalidWindowError(DomainError):
    """Raised when a booking window is in the past or mismatches the service duration."""

    code = ErrorCode.INVALID_WINDOW


class InvalidRangeError(DomainError):
    """Raised when a slot ends at or before its start."""

    code = ErrorCode.INVALID_RANGE

    def __init__(self, message: str = "End time must be after start time.") -> None:
        super().__init__(message, field="end_time")


class OverlapError(DomainError):
    """Raised when a new slot intersects an existing one of the same freelancer."""

    code = ErrorCode.OVERLAP

    def __init__(self, conflicting_slot_id: str) -> None:
        super().__init__(
            f"This slot overlaps existing slot '{conflicting_slot_id}'.",
            field="start_time",
            entity_id=conflicting_slot_id,
        )


class SlotBookedError(DomainError):
    """Raised when deleting or re-booking a slot that is already booked."""

    code = ErrorCode.SLOT_BOOKED

    def __init__(self, slot_id: str) -> None:
        super().__init__(f"Slot '{slot_id}' is already booked.", entity_id=slot_id)


class NoAvailabilityError(DomainError):
    """Raised when no open slot covers a requested booking window."""

    code = ErrorCode.NO_AVAILABILITY

    def __init__(self, freelancer_id: str) -> None:
        super().__init__(
            "The freelancer has no open availability for that time.",
            field="start_time",
            entity_id=freelancer_id,
        )


class InvalidTransitionError(DomainError):
    """Raised when a booking status transition is not valid from the current state."""

    code = ErrorCode.INVALID_TRANSITION


class UserExistsError(DomainError):
    """Raised on sign-up with an email that is already registered."""

    code = ErrorCode.USER_EXISTS

    def __init__(self, email: str) -> None:
        super().__init__("User already exists.", field="email", entity_id=email)


class InvalidCredentialsError(DomainError):
    """Raised when no stored identity matches the given email and password."""

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self) -> None:
        super().__init__("Invalid email or password.", field="password")


class ServiceNotFoundError(DomainError):
    """Raised when a service is missing or has been deactivated."""

    code = ErrorCode.SERVICE_NOT_FOUND

    def __init__(self, service_id: str, reason: str = "not found") -> None:
        super().__init__(
            f"Service '{service_id}' {reason}.", field="service_id", entity_id=service_id
        )


class EmptyMessageError(DomainError):
    """Raised when a chat message has no content."""

    code = ErrorCode.EMPTY_MESSAGE

    def __init__(self) -> None:
        super().__init__("Message cannot be empty.", field="content")


class MessageTooLongError(DomainError):
    """Raised when a chat message exceeds the length limit."""

    code = ErrorCode.MESSAGE_TOO_LONG

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            f"Message is {length} characters; the limit is {limit}.", field="content"
        )
        self.length = length
        self.limit = limit


class InvalidDecisionError(DomainError):
    """Raised when a booking response is neither confirm nor reject."""

    code = ErrorCode.INVALID_DECISION

    def __init__(self, decision: object) -> None:
        super().__init__(
            f"Unknown decision {decision!r}; expected 'confirm' or 'reject'.",
            field="decision",
        )
