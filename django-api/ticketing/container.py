"""Builds services over the Django ORM stores for the HTTP handlers."""

from ticketing.services import (
    AttendanceService,
    CertificateService,
    EventService,
    RegistrationService,
    TicketService,
    VerificationService,
)
from ticketing.stores.django_store import (
    DjangoAttendanceLedger,
    DjangoCertificateLedger,
    DjangoEventStore,
    DjangoTicketStore,
)


def certificate_service() -> CertificateService:
    return CertificateService(
        DjangoEventStore(), DjangoAttendanceLedger(), DjangoCertificateLedger()
    )


def event_service() -> EventService:
    return EventService(DjangoEventStore(), DjangoTicketStore(), certificate_service())


def registration_service() -> RegistrationService:
    return RegistrationService(DjangoEventStore(), DjangoTicketStore())


def ticket_service() -> TicketService:
    return TicketService(DjangoEventStore(), DjangoTicketStore())


def verification_service() -> VerificationService:
    return VerificationService(DjangoEventStore(), DjangoTicketStore(), DjangoAttendanceLedger())


def attendance_service() -> AttendanceService:
    return AttendanceService(DjangoEventStore(), DjangoAttendanceLedger())
