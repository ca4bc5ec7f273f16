"""In-memory implementation of the ticketing stores.

Each method holds the store's lock for exactly one read-modify-write, which
plays the part of the database's atomic conditional update. Services never
hold it across calls, so racing workflows interleave between store operations
exactly as they would against PostgreSQL.
"""

import threading
from dataclasses import replace
from datetime import datetime

from django.utils import timezone

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
    TicketStatus,
    UserId,
)
from ticketing.domain.errors import (
    CertificateCodeCollisionError,
    StorageConflictError,
    TicketCodeCollisionError,
)
from ticketing.stores.interfaces import (
    AttendanceLedger,
    CertificateLedger,
    EventStore,
    TicketStore,
)


class InMemoryEventStore(EventStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: dict[EventId, Event] = {}

    def add_event(self, event: Event) -> Event:
        with self._lock:
            self._events[event.id] = event
        return event

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def list_events(
        self,
        organizer_id: UserId | None = None,
        status: EventStatus | None = None,
        department: str | None = None,
        event_type: EventType | None = None,
        starts_after: datetime | None = None,
    ) -> list[Event]:
        with self._lock:
            events = list(self._events.values())
        if organizer_id is not None:
            events = [e for e in events if e.organizer_id == organizer_id]
        if status is not None:
            events = [e for e in events if e.status is status]
        if department is not None:
            events = [e for e in events if e.department == department]
        if event_type is not None:
            events = [e for e in events if e.event_type is event_type]
        if starts_after is not None:
            events = [e for e in events if e.starts_at >= starts_after]
        return sorted(events, key=lambda e: e.starts_at)

    def reserve_seat(self, event_id: EventId) -> bool:
        with self._lock:
            event = self._events.get(event_id)
            if event is None or event.registered_count >= event.seat_limit:
                return False
            self._events[event_id] = replace(
                event, registered_count=event.registered_count + 1
            )
            return True

    def release_seat(self, event_id: EventId) -> bool:
        with self._lock:
            event = self._events.get(event_id)
            if event is None or event.registered_count <= 0:
                return False
            self._events[event_id] = replace(
                event, registered_count=event.registered_count - 1
            )
            return True

    def change_status(
        self, event_id: EventId, expected: EventStatus, target: EventStatus
    ) -> bool:
        with self._lock:
            event = self._events.get(event_id)
            if event is None or event.status is not expected:
                return False
            self._events[event_id] = replace(
                event, status=target, updated_at=timezone.now()
            )
            return True

    def update_details(self, event_id: EventId, changes: dict[str, object]) -> bool:
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                return False
            seat_limit = changes.get("seat_limit", event.seat_limit)
            if event.registered_count > seat_limit:
                return False
            self._events[event_id] = replace(
                event, **changes, updated_at=timezone.now()
            )
            return True


class InMemoryTicketStore(TicketStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tickets: dict[TicketCode, Ticket] = {}

    def add_ticket(self, ticket: Ticket) -> Ticket:
        with self._lock:
            if any(
                t.event_id == ticket.event_id and t.user_id == ticket.user_id
                for t in self._tickets.values()
            ):
                raise StorageConflictError(
                    "A ticket already exists for this event and user"
                )
            if ticket.code in self._tickets:
                raise TicketCodeCollisionError()
            self._tickets[ticket.code] = ticket
        return ticket

    def get_ticket(self, code: TicketCode) -> Ticket | None:
        with self._lock:
            return self._tickets.get(code)

    def find_ticket(self, event_id: EventId, user_id: UserId) -> Ticket | None:
        with self._lock:
            for ticket in self._tickets.values():
                if ticket.event_id == event_id and ticket.user_id == user_id:
                    return ticket
        return None

    def list_tickets_for_user(self, user_id: UserId) -> list[Ticket]:
        with self._lock:
            tickets = [t for t in self._tickets.values() if t.user_id == user_id]
        return sorted(tickets, key=lambda t: t.created_at, reverse=True)

    def list_tickets_for_event(self, event_id: EventId) -> list[Ticket]:
        with self._lock:
            tickets = [t for t in self._tickets.values() if t.event_id == event_id]
        return sorted(tickets, key=lambda t: t.created_at, reverse=True)

    def mark_used(self, code: TicketCode, used_at: datetime) -> bool:
        return self._transition(code, TicketStatus.USED, used_at=used_at)

    def cancel(self, code: TicketCode) -> bool:
        return self._transition(code, TicketStatus.CANCELLED)

    def _transition(self, code: TicketCode, target: TicketStatus, **changes) -> bool:
        with self._lock:
            ticket = self._tickets.get(code)
            if ticket is None or ticket.status is not TicketStatus.UNUSED:
                return False
            self._tickets[code] = replace(ticket, status=target, **changes)
            return True


class InMemoryAttendanceLedger(AttendanceLedger):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[tuple[EventId, UserId], AttendanceRecord] = {}

    def record_once(self, record: AttendanceRecord) -> InsertOutcome:
        key = (record.event_id, record.user_id)
        with self._lock:
            if key in self._records:
                return InsertOutcome.ALREADY_EXISTS
            self._records[key] = record
        return InsertOutcome.CREATED

    def get_record(self, event_id: EventId, user_id: UserId) -> AttendanceRecord | None:
        with self._lock:
            return self._records.get((event_id, user_id))

    def list_for_event(self, event_id: EventId) -> list[AttendanceRecord]:
        with self._lock:
            records = [r for r in self._records.values() if r.event_id == event_id]
        return sorted(records, key=lambda r: r.entry_time)

    def list_for_user(self, user_id: UserId) -> list[AttendanceRecord]:
        with self._lock:
            records = [r for r in self._records.values() if r.user_id == user_id]
        return sorted(records, key=lambda r: r.entry_time, reverse=True)

    def count_for_event(self, event_id: EventId) -> int:
        return len(self.list_for_event(event_id))


class InMemoryCertificateLedger(CertificateLedger):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._certificates: dict[tuple[EventId, UserId], Certificate] = {}

    def issue_if_absent(self, certificate: Certificate) -> InsertOutcome:
        key = (certificate.event_id, certificate.user_id)
        with self._lock:
            if key in self._certificates:
                return InsertOutcome.ALREADY_EXISTS
            if any(c.code == certificate.code for c in self._certificates.values()):
                raise CertificateCodeCollisionError()
            self._certificates[key] = certificate
        return InsertOutcome.CREATED

    def exists(self, event_id: EventId, user_id: UserId) -> bool:
        with self._lock:
            return (event_id, user_id) in self._certificates

    def get_certificate(self, code: CertificateCode) -> Certificate | None:
        with self._lock:
            for certificate in self._certificates.values():
                if certificate.code == code:
                    return certificate
        return None

    def list_for_event(self, event_id: EventId) -> list[Certificate]:
        with self._lock:
            certs = [c for c in self._certificates.values() if c.event_id == event_id]
        return sorted(certs, key=lambda c: c.issued_at)

    def list_for_user(self, user_id: UserId) -> list[Certificate]:
        with self._lock:
            certs = [c for c in self._certificates.values() if c.user_id == user_id]
        return sorted(certs, key=lambda c: c.issued_at, reverse=True)
