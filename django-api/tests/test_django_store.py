"""Tests for the Django ORM stores and the database constraints behind them."""

import uuid

import pytest
from django.db import IntegrityError, transaction

from ticketing import models
from ticketing.domain import (
    AttendanceRecord,
    Certificate,
    CertificateCode,
    EventStatus,
    InsertOutcome,
    Ticket,
    TicketCode,
    TicketStatus,
)
from ticketing.domain.errors import (
    CertificateCodeCollisionError,
    StorageConflictError,
    TicketCodeCollisionError,
)
from ticketing.stores.django_store import (
    DjangoAttendanceLedger,
    DjangoCertificateLedger,
    DjangoEventStore,
    DjangoTicketStore,
)

from conftest import NOW, make_caller, make_event

pytestmark = pytest.mark.django_db


@pytest.fixture
def event_store():
    return DjangoEventStore()


@pytest.fixture
def ticket_store():
    return DjangoTicketStore()


@pytest.fixture
def stored_event(event_store, organizer):
    return event_store.add_event(make_event(organizer, seat_limit=2))


def _ticket(event, user_id, code=None):
    return Ticket(
        id=uuid.uuid4(),
        code=code or TicketCode.generate(),
        event_id=event.id,
        user_id=user_id,
        status=TicketStatus.UNUSED,
        used_at=None,
        created_at=NOW,
    )


class TestDjangoEventStore:
    def test_round_trip(self, event_store, stored_event):
        loaded = event_store.get_event(stored_event.id)
        assert loaded.id == stored_event.id
        assert loaded.seat_limit == 2
        assert loaded.status is EventStatus.PUBLISHED

    def test_reserve_stops_at_the_limit(self, event_store, stored_event):
        assert event_store.reserve_seat(stored_event.id)
        assert event_store.reserve_seat(stored_event.id)
        assert not event_store.reserve_seat(stored_event.id)
        assert event_store.get_event(stored_event.id).registered_count == 2

    def test_release_never_goes_negative(self, event_store, stored_event):
        assert not event_store.release_seat(stored_event.id)
        event_store.reserve_seat(stored_event.id)
        assert event_store.release_seat(stored_event.id)
        assert event_store.get_event(stored_event.id).registered_count == 0

    def test_change_status_is_conditional(self, event_store, stored_event):
        assert not event_store.change_status(
            stored_event.id, EventStatus.DRAFT, EventStatus.PUBLISHED
        )
        assert event_store.change_status(
            stored_event.id, EventStatus.PUBLISHED, EventStatus.ONGOING
        )
        assert event_store.get_event(stored_event.id).status is EventStatus.ONGOING

    def test_database_rejects_overbooking(self, stored_event):
        with pytest.raises(IntegrityError), transaction.atomic():
            models.Event.objects.filter(pk=stored_event.id.value).update(registered_count=3)


class TestDjangoTicketStore:
    def test_second_ticket_for_same_user_conflicts(self, ticket_store, stored_event, student):
        ticket_store.add_ticket(_ticket(stored_event, student.user_id))

        with pytest.raises(StorageConflictError) as exc_info:
            ticket_store.add_ticket(_ticket(stored_event, student.user_id))
        assert not isinstance(exc_info.value, TicketCodeCollisionError)

    def test_code_collision(self, ticket_store, stored_event):
        code = TicketCode("TKT-ABCDEF01")
        ticket_store.add_ticket(_ticket(stored_event, make_caller().user_id, code))

        with pytest.raises(TicketCodeCollisionError):
            ticket_store.add_ticket(_ticket(stored_event, make_caller().user_id, code))

    def test_mark_used_once(self, ticket_store, stored_event, student):
        ticket = ticket_store.add_ticket(_ticket(stored_event, student.user_id))

        assert ticket_store.mark_used(ticket.code, NOW)
        assert not ticket_store.mark_used(ticket.code, NOW)
        assert not ticket_store.cancel(ticket.code)

        stored = ticket_store.get_ticket(ticket.code)
        assert stored.status is TicketStatus.USED
        assert stored.used_at == NOW

    @pytest.mark.parametrize("transition", ["mark_used", "cancel"])
    def test_transitions_stamp_updated_at(self, ticket_store, stored_event, student, transition):
        ticket = ticket_store.add_ticket(_ticket(stored_event, student.user_id))
        before = models.Ticket.objects.get(pk=ticket.id).updated_at

        if transition == "mark_used":
            assert ticket_store.mark_used(ticket.code, NOW)
        else:
            assert ticket_store.cancel(ticket.code)

        assert models.Ticket.objects.get(pk=ticket.id).updated_at > before


class TestDjangoLedgers:
    def test_attendance_recorded_once(self, ticket_store, stored_event, organizer, student):
        ticket = ticket_store.add_ticket(_ticket(stored_event, student.user_id))
        ledger = DjangoAttendanceLedger()

        def record():
            return AttendanceRecord(
                id=uuid.uuid4(),
                event_id=stored_event.id,
                user_id=student.user_id,
                ticket_id=ticket.id,
                verified_by=organizer.user_id,
                entry_time=NOW,
            )

        assert ledger.record_once(record()) is InsertOutcome.CREATED
        assert ledger.record_once(record()) is InsertOutcome.ALREADY_EXISTS
        # The savepoint kept the surrounding transaction usable.
        assert ledger.count_for_event(stored_event.id) == 1

    def test_certificate_issued_once(self, stored_event, organizer, student):
        ledger = DjangoCertificateLedger()

        def certificate():
            return Certificate(
                id=uuid.uuid4(),
                code=CertificateCode.generate(),
                event_id=stored_event.id,
                user_id=student.user_id,
                issued_by=organizer.user_id,
                issued_at=NOW,
            )

        assert ledger.issue_if_absent(certificate()) is InsertOutcome.CREATED
        assert ledger.issue_if_absent(certificate()) is InsertOutcome.ALREADY_EXISTS
        assert ledger.exists(stored_event.id, student.user_id)
        assert len(ledger.list_for_user(student.user_id)) == 1

    def test_certificate_code_collision(self, stored_event, organizer, student):
        ledger = DjangoCertificateLedger()
        code = CertificateCode("CERT-ABCDEF012345")

        def certificate(user_id):
            return Certificate(
                id=uuid.uuid4(),
                code=code,
                event_id=stored_event.id,
                user_id=user_id,
                issued_by=organizer.user_id,
                issued_at=NOW,
            )

        assert ledger.issue_if_absent(certificate(student.user_id)) is InsertOutcome.CREATED
        with pytest.raises(CertificateCodeCollisionError):
            ledger.issue_if_absent(certificate(make_caller().user_id))
        # The same pair is still reported as issued, whatever the code.
        assert ledger.issue_if_absent(certificate(student.user_id)) is InsertOutcome.ALREADY_EXISTS
