"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.

Every method that changes state is a single conditional write: it either
applies in full or reports that its condition did not hold. Callers never
read-then-write through these interfaces.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from ticketing.domain import (
    AttendanceRecord,
    Certificate,
    CertificateCode,
    Event,
    EventId,
    EventStatus,
    EventType,
    InsertOutcome,
    Ticket,
    TicketCode,
    UserId,
)


class EventStore(ABC):
    """Interface for event persistence and seat capacity operations."""

    @abstractmethod
    def add_event(self, event: Event) -> Event:
        """Persist a new event and return it."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def list_events(
        self,
        organizer_id: UserId | None = None,
        status: EventStatus | None = None,
        department: str | None = None,
        event_type: EventType | None = None,
        starts_after: datetime | None = None,
    ) -> list[Event]:
        """Return events ordered by starts_at ascending, optionally filtered."""
        ...

    @abstractmethod
    def reserve_seat(self, event_id: EventId) -> bool:
        """Increment registered_count by one where registered_count < seat_limit.

        Returns False when the condition did not hold (no seat left).
        """
        ...

    @abstractmethod
    def release_seat(self, event_id: EventId) -> bool:
        """Decrement registered_count by one where registered_count > 0."""
        ...

    @abstractmethod
    def change_status(
        self, event_id: EventId, expected: EventStatus, target: EventStatus
    ) -> bool:
        """Set status to target where status is still expected."""
        ...

    @abstractmethod
    def update_details(self, event_id: EventId, changes: dict[str, object]) -> bool:
        """Apply edited fields to an event and stamp updated_at.

        A seat_limit change applies only where registered_count <= the new
        limit. Returns False when that condition did not hold or the event
        does not exist.
        """
        ...


class TicketStore(ABC):
    """Interface for ticket persistence and state transitions."""

    @abstractmethod
    def add_ticket(self, ticket: Ticket) -> Ticket:
        """Persist a new ticket.

        Raises:
            TicketCodeCollisionError: The ticket code is already taken.
            StorageConflictError: A ticket already exists for (event, user).
        """
        ...

    @abstractmethod
    def get_ticket(self, code: TicketCode) -> Ticket | None:
        """Return a ticket by its code, or None if not found."""
        ...

    @abstractmethod
    def find_ticket(self, event_id: EventId, user_id: UserId) -> Ticket | None:
        """Return the ticket a user holds for an event, if any."""
        ...

    @abstractmethod
    def list_tickets_for_user(self, user_id: UserId) -> list[Ticket]:
        """Return a user's tickets, newest first."""
        ...

    @abstractmethod
    def list_tickets_for_event(self, event_id: EventId) -> list[Ticket]:
        """Return an event's tickets, newest first."""
        ...

    @abstractmethod
    def mark_used(self, code: TicketCode, used_at: datetime) -> bool:
        """Set status=used, used_at where status is unused."""
        ...

    @abstractmethod
    def cancel(self, code: TicketCode) -> bool:
        """Set status=cancelled where status is unused."""
        ...


class AttendanceLedger(ABC):
    """Interface for the append-only attendance ledger."""

    @abstractmethod
    def record_once(self, record: AttendanceRecord) -> InsertOutcome:
        """Insert the record unless one exists for (event, user)."""
        ...

    @abstractmethod
    def get_record(self, event_id: EventId, user_id: UserId) -> AttendanceRecord | None:
        ...

    @abstractmethod
    def list_for_event(self, event_id: EventId) -> list[AttendanceRecord]:
        """Return an event's attendance ordered by entry_time ascending."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: UserId) -> list[AttendanceRecord]:
        """Return a user's attendance ordered by entry_time descending."""
        ...

    @abstractmethod
    def count_for_event(self, event_id: EventId) -> int:
        ...


class CertificateLedger(ABC):
    """Interface for issued certificates."""

    @abstractmethod
    def issue_if_absent(self, certificate: Certificate) -> InsertOutcome:
        """Insert the certificate unless one exists for (event, user).

        Raises:
            CertificateCodeCollisionError: The certificate code is already taken.
        """
        ...

    @abstractmethod
    def exists(self, event_id: EventId, user_id: UserId) -> bool:
        ...

    @abstractmethod
    def get_certificate(self, code: CertificateCode) -> Certificate | None:
        ...

    @abstractmethod
    def list_for_event(self, event_id: EventId) -> list[Certificate]:
        ...

    @abstractmethod
    def list_for_user(self, user_id: UserId) -> list[Certificate]:
        ...
