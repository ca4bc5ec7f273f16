"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from ticketing.domain.states import EventStatus, EventType, Role, TicketStatus
from ticketing.domain.value_objects import CertificateCode, EventId, TicketCode, UserId


@dataclass(frozen=True)
class Caller:
    """Verified identity handed to every workflow by the auth gateway."""

    user_id: UserId
    role: Role
    department: str

    @property
    def is_organizer(self) -> bool:
        return self.role is Role.ORGANIZER

    @property
    def is_student(self) -> bool:
        return self.role is Role.STUDENT


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    description: str
    organizer_id: UserId
    event_type: EventType
    department: str
    seat_limit: int
    registered_count: int
    starts_at: datetime
    venue: str
    status: EventStatus
    certificates_enabled: bool
    created_at: datetime
    updated_at: datetime

    @property
    def seats_available(self) -> int:
        return max(self.seat_limit - self.registered_count, 0)

    def is_registration_open(self, now: datetime) -> bool:
        return (
            self.status is EventStatus.PUBLISHED
            and self.registered_count < self.seat_limit
            and self.starts_at > now
        )

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.organizer_id == user_id


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: UUID
    code: TicketCode
    event_id: EventId
    user_id: UserId
    status: TicketStatus
    used_at: datetime | None
    created_at: datetime

    @property
    def qr_payload(self) -> str:
        """Exact string a QR renderer may encode. Never carries personal data."""
        return self.code.value


@dataclass(frozen=True)
class AttendanceRecord:
    """One verified entry of a user into an event."""

    id: UUID
    event_id: EventId
    user_id: UserId
    ticket_id: UUID
    verified_by: UserId
    entry_time: datetime


@dataclass(frozen=True)
class Certificate:
    """Domain representation of an issued Certificate."""

    id: UUID
    code: CertificateCode
    event_id: EventId
    user_id: UserId
    issued_by: UserId
    issued_at: datetime
    artifact_url: str | None = None


class InsertOutcome(Enum):
    """Result of a uniqueness-protected ledger insert."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class AttendanceStats:
    total_registered: int
    total_attended: int
    seats_available: int

    @property
    def attendance_rate(self) -> str:
        if self.total_registered <= 0:
            return "0%"
        return f"{self.total_attended / self.total_registered * 100:.2f}%"


@dataclass(frozen=True)
class IssuanceError:
    user_id: UserId
    error: str


@dataclass(frozen=True)
class IssuanceReport:
    """Outcome of one certificate issuance batch."""

    generated: int = 0
    skipped: int = 0
    total_attendees: int = 0
    errors: tuple[IssuanceError, ...] = field(default_factory=tuple)
    message: str = "Certificate generation complete"


@dataclass(frozen=True)
class Admission:
    """Successful entry: the ticket as it is now, plus its attendance record."""

    ticket: Ticket
    attendance: AttendanceRecord


@dataclass(frozen=True)
class StatusChange:
    event: Event
    issuance: IssuanceReport | None = None
