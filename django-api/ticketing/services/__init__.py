from ticketing.services.attendance_service import AttendanceService
from ticketing.services.certificate_service import CertificateService
from ticketing.services.event_service import EventService
from ticketing.services.registration_service import RegistrationService
from ticketing.services.rendering import CertificateRenderer, DeferredCertificateRenderer
from ticketing.services.ticket_service import TicketService
from ticketing.services.verification_service import VerificationService

__all__ = [
    "AttendanceService",
    "CertificateRenderer",
    "CertificateService",
    "DeferredCertificateRenderer",
    "EventService",
    "RegistrationService",
    "TicketService",
    "VerificationService",
]
