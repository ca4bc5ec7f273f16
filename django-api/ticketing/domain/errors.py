"""Domain error codes for the ticketing module."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    CERTIFICATE_NOT_FOUND = "CERTIFICATE_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    FORBIDDEN = "FORBIDDEN"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    SEATS_EXHAUSTED = "SEATS_EXHAUSTED"
    ALREADY_USED = "ALREADY_USED"
    TICKET_CANCELLED = "TICKET_CANCELLED"
    WRONG_EVENT = "WRONG_EVENT"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_STATE = "INVALID_STATE"
    STORAGE_CONFLICT = "STORAGE_CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code, user-safe message and optional context."""

    code: ErrorCode
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class TicketNotFoundError(DomainError):
    """Raised when a ticket code does not resolve to a ticket."""

    def __init__(self, ticket_code: str) -> None:
        super().__init__(code=ErrorCode.TICKET_NOT_FOUND, message="Invalid ticket")
        self.ticket_code = ticket_code


class CertificateNotFoundError(DomainError):
    def __init__(self, certificate_code: str) -> None:
        super().__init__(
            code=ErrorCode.CERTIFICATE_NOT_FOUND, message="Certificate not found"
        )
        self.certificate_code = certificate_code


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, what: str = "event") -> None:
        super().__init__(code=ErrorCode.INVALID_ID, message=f"Invalid {what} ID format")


class ForbiddenError(DomainError):
    """Raised when the caller lacks the role or ownership an operation needs."""

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class RegistrationClosedError(DomainError):
    def __init__(self, message: str = "Registration is not open for this event") -> None:
        super().__init__(code=ErrorCode.REGISTRATION_CLOSED, message=message)


class DuplicateRegistrationError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REGISTRATION,
            message="You are already registered for this event",
        )


class SeatsExhaustedError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.SEATS_EXHAUSTED, message="No seats available")


class AlreadyUsedError(DomainError):
    """Raised when a ticket was already admitted; carries the original entry time."""

    def __init__(self, used_at: datetime | None) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_USED,
            message="Ticket already used",
            context={"used_at": used_at},
        )
        self.used_at = used_at


class TicketCancelledError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.TICKET_CANCELLED, message="Ticket is cancelled")


class WrongEventError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.WRONG_EVENT, message="Ticket is not for this event")


class InvalidTransitionError(DomainError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot change status from {current} to {target}",
            context={"current": current, "target": target},
        )


class InvalidStateError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_STATE, message=message)


class StorageConflictError(DomainError):
    """Raised by stores when a uniqueness or conditional check fails at commit time."""

    def __init__(self, message: str = "Conflicting write") -> None:
        super().__init__(code=ErrorCode.STORAGE_CONFLICT, message=message)


class TicketCodeCollisionError(StorageConflictError):
    """Raised by ticket stores when a freshly generated code is already taken."""

    def __init__(self) -> None:
        super().__init__(message="Ticket code already in use")


class CertificateCodeCollisionError(StorageConflictError):
    """Raised by certificate ledgers when a freshly generated code is already taken."""

    def __init__(self) -> None:
        super().__init__(message="Certificate code already in use")


class ValidationError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)
