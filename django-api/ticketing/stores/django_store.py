"""Django ORM implementation of the ticketing stores.

Conditional writes are single ``UPDATE ... WHERE`` statements built with
``QuerySet.update()`` and ``F()`` expressions; the affected row count tells
whether the condition held. Ledger inserts run in a savepoint so that an
``IntegrityError`` from a unique constraint can be turned into
``InsertOutcome.ALREADY_EXISTS`` without poisoning the outer transaction.
"""

from datetime import datetime

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ticketing import models
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


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        description=row.description,
        organizer_id=UserId(row.organizer_id),
        event_type=EventType(row.event_type),
        department=row.department,
        seat_limit=row.seat_limit,
        registered_count=row.registered_count,
        starts_at=row.starts_at,
        venue=row.venue,
        status=EventStatus(row.status),
        certificates_enabled=row.certificates_enabled,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _ticket_to_domain(row: models.Ticket) -> Ticket:
    return Ticket(
        id=row.id,
        code=TicketCode(row.code),
        event_id=EventId(row.event_id),
        user_id=UserId(row.user_id),
        status=TicketStatus(row.status),
        used_at=row.used_at,
        created_at=row.created_at,
    )


def _attendance_to_domain(row: models.Attendance) -> AttendanceRecord:
    return AttendanceRecord(
        id=row.id,
        event_id=EventId(row.event_id),
        user_id=UserId(row.user_id),
        ticket_id=row.ticket_id,
        verified_by=UserId(row.verified_by),
        entry_time=row.entry_time,
    )


def _certificate_to_domain(row: models.Certificate) -> Certificate:
    return Certificate(
        id=row.id,
        code=CertificateCode(row.code),
        event_id=EventId(row.event_id),
        user_id=UserId(row.user_id),
        issued_by=UserId(row.issued_by),
        issued_at=row.issued_at,
        artifact_url=row.artifact_url,
    )


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def add_event(self, event: Event) -> Event:
        row = models.Event.objects.create(
            id=event.id.value,
            title=event.title,
            description=event.description,
            organizer_id=event.organizer_id.value,
            event_type=event.event_type.value,
            department=event.department,
            seat_limit=event.seat_limit,
            registered_count=event.registered_count,
            starts_at=event.starts_at,
            venue=event.venue,
            status=event.status.value,
            certificates_enabled=event.certificates_enabled,
        )
        return _event_to_domain(row)

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return _event_to_domain(row) if row else None

    def list_events(
        self,
        organizer_id: UserId | None = None,
        status: EventStatus | None = None,
        department: str | None = None,
        event_type: EventType | None = None,
        starts_after: datetime | None = None,
    ) -> list[Event]:
        qs = models.Event.objects.order_by("starts_at")
        if organizer_id is not None:
            qs = qs.filter(organizer_id=organizer_id.value)
        if status is not None:
            qs = qs.filter(status=status.value)
        if department is not None:
            qs = qs.filter(department=department)
        if event_type is not None:
            qs = qs.filter(event_type=event_type.value)
        if starts_after is not None:
            qs = qs.filter(starts_at__gte=starts_after)
        return [_event_to_domain(row) for row in qs]

    def reserve_seat(self, event_id: EventId) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, registered_count__lt=F("seat_limit")
        ).update(registered_count=F("registered_count") + 1)
        return updated == 1

    def release_seat(self, event_id: EventId) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, registered_count__gt=0
        ).update(registered_count=F("registered_count") - 1)
        return updated == 1

    def change_status(
        self, event_id: EventId, expected: EventStatus, target: EventStatus
    ) -> bool:
        updated = models.Event.objects.filter(
            pk=event_id.value, status=expected.value
        ).update(status=target.value, updated_at=timezone.now())
        return updated == 1

    def update_details(self, event_id: EventId, changes: dict[str, object]) -> bool:
        values = dict(changes)
        if "event_type" in values:
            values["event_type"] = values["event_type"].value
        qs = models.Event.objects.filter(pk=event_id.value)
        if "seat_limit" in values:
            qs = qs.filter(registered_count__lte=values["seat_limit"])
        return qs.update(**values, updated_at=timezone.now()) == 1


class DjangoTicketStore(TicketStore):
    """PostgreSQL-backed ticket store using Django ORM."""

    def add_ticket(self, ticket: Ticket) -> Ticket:
        try:
            with transaction.atomic():
                row = models.Ticket.objects.create(
                    id=ticket.id,
                    code=ticket.code.value,
                    event_id=ticket.event_id.value,
                    user_id=ticket.user_id.value,
                    status=ticket.status.value,
                    used_at=ticket.used_at,
                )
        except IntegrityError as exc:
            if models.Ticket.objects.filter(
                event_id=ticket.event_id.value, user_id=ticket.user_id.value
            ).exists():
                raise StorageConflictError(
                    "A ticket already exists for this event and user"
                ) from exc
            if models.Ticket.objects.filter(code=ticket.code.value).exists():
                raise TicketCodeCollisionError() from exc
            raise
        return _ticket_to_domain(row)

    def get_ticket(self, code: TicketCode) -> Ticket | None:
        row = models.Ticket.objects.filter(code=code.value).first()
        return _ticket_to_domain(row) if row else None

    def find_ticket(self, event_id: EventId, user_id: UserId) -> Ticket | None:
        row = models.Ticket.objects.filter(
            event_id=event_id.value, user_id=user_id.value
        ).first()
        return _ticket_to_domain(row) if row else None

    def list_tickets_for_user(self, user_id: UserId) -> list[Ticket]:
        qs = models.Ticket.objects.filter(user_id=user_id.value).order_by("-created_at")
        return [_ticket_to_domain(row) for row in qs]

    def list_tickets_for_event(self, event_id: EventId) -> list[Ticket]:
        qs = models.Ticket.objects.filter(event_id=event_id.value).order_by("-created_at")
        return [_ticket_to_domain(row) for row in qs]

    def mark_used(self, code: TicketCode, used_at: datetime) -> bool:
        updated = models.Ticket.objects.filter(
            code=code.value, status=TicketStatus.UNUSED.value
        ).update(
            status=TicketStatus.USED.value, used_at=used_at, updated_at=timezone.now()
        )
        return updated == 1

    def cancel(self, code: TicketCode) -> bool:
        updated = models.Ticket.objects.filter(
            code=code.value, status=TicketStatus.UNUSED.value
        ).update(status=TicketStatus.CANCELLED.value, updated_at=timezone.now())
        return updated == 1


class DjangoAttendanceLedger(AttendanceLedger):
    """Attendance ledger backed by a unique (event, user) constraint."""

    def record_once(self, record: AttendanceRecord) -> InsertOutcome:
        try:
            with transaction.atomic():
                models.Attendance.objects.create(
                    id=record.id,
                    event_id=record.event_id.value,
                    user_id=record.user_id.value,
                    ticket_id=record.ticket_id,
                    verified_by=record.verified_by.value,
                    entry_time=record.entry_time,
                )
        except IntegrityError:
            if self.get_record(record.event_id, record.user_id) is None:
                raise
            return InsertOutcome.ALREADY_EXISTS
        return InsertOutcome.CREATED

    def get_record(self, event_id: EventId, user_id: UserId) -> AttendanceRecord | None:
        row = models.Attendance.objects.filter(
            event_id=event_id.value, user_id=user_id.value
        ).first()
        return _attendance_to_domain(row) if row else None

    def list_for_event(self, event_id: EventId) -> list[AttendanceRecord]:
        qs = models.Attendance.objects.filter(event_id=event_id.value).order_by("entry_time")
        return [_attendance_to_domain(row) for row in qs]

    def list_for_user(self, user_id: UserId) -> list[AttendanceRecord]:
        qs = models.Attendance.objects.filter(user_id=user_id.value).order_by("-entry_time")
        return [_attendance_to_domain(row) for row in qs]

    def count_for_event(self, event_id: EventId) -> int:
        return models.Attendance.objects.filter(event_id=event_id.value).count()


class DjangoCertificateLedger(CertificateLedger):
    """Certificate ledger backed by a unique (event, user) constraint."""

    def issue_if_absent(self, certificate: Certificate) -> InsertOutcome:
        try:
            with transaction.atomic():
                models.Certificate.objects.create(
                    id=certificate.id,
                    code=certificate.code.value,
                    event_id=certificate.event_id.value,
                    user_id=certificate.user_id.value,
                    issued_by=certificate.issued_by.value,
                    issued_at=certificate.issued_at,
                    artifact_url=certificate.artifact_url,
                )
        except IntegrityError as exc:
            if self.exists(certificate.event_id, certificate.user_id):
                return InsertOutcome.ALREADY_EXISTS
            if models.Certificate.objects.filter(code=certificate.code.value).exists():
                raise CertificateCodeCollisionError() from exc
            raise
        return InsertOutcome.CREATED

    def exists(self, event_id: EventId, user_id: UserId) -> bool:
        return models.Certificate.objects.filter(
            event_id=event_id.value, user_id=user_id.value
        ).exists()

    def get_certificate(self, code: CertificateCode) -> Certificate | None:
        row = models.Certificate.objects.filter(code=code.value).first()
        return _certificate_to_domain(row) if row else None

    def list_for_event(self, event_id: EventId) -> list[Certificate]:
        qs = models.Certificate.objects.filter(event_id=event_id.value).order_by("issued_at")
        return [_certificate_to_domain(row) for row in qs]

    def list_for_user(self, user_id: UserId) -> list[Certificate]:
        qs = models.Certificate.objects.filter(user_id=user_id.value).order_by("-issued_at")
        return [_certificate_to_domain(row) for row in qs]
