"""Pytest configuration and shared fixtures."""

import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta

import pytest
from rest_framework.test import APIClient

from ticketing.domain import (
    Caller,
    Event,
    EventId,
    EventStatus,
    EventType,
    Role,
    TicketStatus,
    UserId,
)
from ticketing.services import (
    AttendanceService,
    CertificateService,
    EventService,
    RegistrationService,
    TicketService,
    VerificationService,
)
from ticketing.stores.interfaces import (
    AttendanceLedger,
    CertificateLedger,
    EventStore,
    TicketStore,
)
from ticketing.stores.memory_store import (
    InMemoryAttendanceLedger,
    InMemoryCertificateLedger,
    InMemoryEventStore,
    InMemoryTicketStore,
)

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
DEPARTMENT = "Computer Science"


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class Backend:
    events: EventStore
    tickets: TicketStore
    attendance: AttendanceLedger
    certificates: CertificateLedger


@dataclass
class Services:
    events: EventService
    registration: RegistrationService
    tickets: TicketService
    verification: VerificationService
    certificates: CertificateService
    attendance: AttendanceService


def make_caller(role: Role = Role.STUDENT, department: str = DEPARTMENT) -> Caller:
    return Caller(user_id=UserId(uuid.uuid4()), role=role, department=department)


def make_event(
    organizer: Caller,
    *,
    seat_limit: int = 50,
    registered_count: int = 0,
    status: EventStatus = EventStatus.PUBLISHED,
    event_type: EventType = EventType.PUBLIC,
    department: str = DEPARTMENT,
    starts_at: datetime | None = None,
    certificates_enabled: bool = False,
) -> Event:
    return Event(
        id=EventId(uuid.uuid4()),
        title="Intro to Django Workshop",
        description="Hands-on session",
        organizer_id=organizer.user_id,
        event_type=event_type,
        department=department,
        seat_limit=seat_limit,
        registered_count=registered_count,
        starts_at=starts_at or NOW + timedelta(days=7),
        venue="Main Hall",
        status=status,
        certificates_enabled=certificates_enabled,
        created_at=NOW,
        updated_at=NOW,
    )


def build_services(backend: Backend, clock, renderer=None) -> Services:
    certificates = CertificateService(
        backend.events, backend.attendance, backend.certificates, renderer, clock=clock
    )
    return Services(
        events=EventService(backend.events, backend.tickets, certificates, clock=clock),
        registration=RegistrationService(backend.events, backend.tickets, clock=clock),
        tickets=TicketService(backend.events, backend.tickets),
        verification=VerificationService(
            backend.events, backend.tickets, backend.attendance, clock=clock
        ),
        certificates=certificates,
        attendance=AttendanceService(backend.events, backend.attendance),
    )


def memory_backend() -> Backend:
    return Backend(
        events=InMemoryEventStore(),
        tickets=InMemoryTicketStore(),
        attendance=InMemoryAttendanceLedger(),
        certificates=InMemoryCertificateLedger(),
    )


def django_backend() -> Backend:
    from ticketing.stores.django_store import (
        DjangoAttendanceLedger,
        DjangoCertificateLedger,
        DjangoEventStore,
        DjangoTicketStore,
    )

    return Backend(
        events=DjangoEventStore(),
        tickets=DjangoTicketStore(),
        attendance=DjangoAttendanceLedger(),
        certificates=DjangoCertificateLedger(),
    )


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture(params=["memory", "django"])
def backend(request) -> Backend:
    """Runs a test once against the in-memory stores and once against the ORM."""
    if request.param == "django":
        request.getfixturevalue("db")
        return django_backend()
    return memory_backend()


@pytest.fixture
def services(backend: Backend, clock: FrozenClock) -> Services:
    return build_services(backend, clock)


@pytest.fixture
def organizer() -> Caller:
    return make_caller(Role.ORGANIZER)


@pytest.fixture
def student() -> Caller:
    return make_caller(Role.STUDENT)


@pytest.fixture
def published_event(backend: Backend, organizer: Caller) -> Event:
    return backend.events.add_event(make_event(organizer))


@pytest.fixture
def add_event(backend: Backend, organizer: Caller):
    """Persist an event owned by ``organizer``; keyword overrides as make_event."""

    def _add(**overrides) -> Event:
        return backend.events.add_event(make_event(organizer, **overrides))

    return _add


@pytest.fixture
def new_caller():
    return make_caller


@pytest.fixture
def services_for():
    return build_services


class StaleTicketReads:
    """Ticket store whose first read returns the ticket as it was when unused.

    Stands in for a request that read the ticket just before a concurrent
    request changed it.
    """

    def __init__(self, inner):
        self._inner = inner
        self._served_stale = False

    def get_ticket(self, code):
        ticket = self._inner.get_ticket(code)
        if ticket is not None and not self._served_stale:
            self._served_stale = True
            return replace(ticket, status=TicketStatus.UNUSED, used_at=None)
        return ticket

    def __getattr__(self, name):
        return getattr(self._inner, name)
