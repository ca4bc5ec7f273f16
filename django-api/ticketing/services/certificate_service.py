"""Certificate issuance for completed events, plus certificate reads.

Issuance is safe to re-run: each attendee gets at most one certificate, the
ledger's (event, user) uniqueness decides, and anything already issued is
counted as skipped. One attendee's failure is reported, never fatal.
"""

import logging
import uuid
from dataclasses import replace

from django.utils import timezone

from ticketing.domain import (
    Caller,
    Certificate,
    CertificateCode,
    Event,
    EventStatus,
    InsertOutcome,
    IssuanceError,
    IssuanceReport,
    UserId,
)
from ticketing.domain.errors import (
    CertificateCodeCollisionError,
    CertificateNotFoundError,
    ForbiddenError,
    InvalidStateError,
)
from ticketing.services.lookups import Clock, load_owned_event, parse_certificate_code
from ticketing.services.rendering import CertificateRenderer, DeferredCertificateRenderer
from ticketing.stores.interfaces import AttendanceLedger, CertificateLedger, EventStore

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 3


class CertificateService:
    """Issues certificates to the attendees of completed events."""

    def __init__(
        self,
        events: EventStore,
        attendance: AttendanceLedger,
        certificates: CertificateLedger,
        renderer: CertificateRenderer | None = None,
        clock: Clock = timezone.now,
    ) -> None:
        self._events = events
        self._attendance = attendance
        self._certificates = certificates
        self._renderer = renderer or DeferredCertificateRenderer()
        self._clock = clock

    def issue_for_event(self, event_id: str, caller: Caller) -> IssuanceReport:
        """Issue certificates for every attendee of an event the caller organizes.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ForbiddenError: If the caller does not organize the event.
            InvalidStateError: If the event is not completed.
        """
        event = load_owned_event(
            self._events,
            event_id,
            caller,
            "Not authorized to generate certificates for this event",
        )
        return self.issue(event, caller.user_id)

    def issue(self, event: Event, issuer: UserId) -> IssuanceReport:
        if not event.certificates_enabled:
            logger.info("Certificates not enabled for event %s", event.id)
            return IssuanceReport(message="Certificates not enabled for this event")
        if event.status is not EventStatus.COMPLETED:
            raise InvalidStateError(
                "Certificates can only be generated after event completion"
            )

        attendees = self._attendance.list_for_event(event.id)
        if not attendees:
            logger.info("No attendees found for event %s", event.id)
            return IssuanceReport(message="No attendees found")

        generated = skipped = 0
        errors: list[IssuanceError] = []
        for record in attendees:
            try:
                created = self._issue_one(event, record.user_id, issuer)
            except Exception as exc:
                logger.exception(
                    "Error generating certificate for user %s at event %s",
                    record.user_id,
                    event.id,
                )
                errors.append(IssuanceError(user_id=record.user_id, error=str(exc)))
                continue
            if created:
                generated += 1
            else:
                skipped += 1

        logger.info(
            "Event %s: generated %d certificates, skipped %d, failed %d",
            event.id,
            generated,
            skipped,
            len(errors),
        )
        return IssuanceReport(
            generated=generated,
            skipped=skipped,
            total_attendees=len(attendees),
            errors=tuple(errors),
        )

    def _issue_one(self, event: Event, user_id: UserId, issuer: UserId) -> bool:
        # Shortcut only; issue_if_absent below is what prevents duplicates.
        if self._certificates.exists(event.id, user_id):
            return False
        for _ in range(MAX_CODE_ATTEMPTS - 1):
            certificate = self._new_certificate(event, user_id, issuer)
            try:
                return self._certificates.issue_if_absent(certificate) is InsertOutcome.CREATED
            except CertificateCodeCollisionError:
                logger.warning(
                    "Certificate code %s already taken, regenerating", certificate.code
                )
        certificate = self._new_certificate(event, user_id, issuer)
        return self._certificates.issue_if_absent(certificate) is InsertOutcome.CREATED

    def _new_certificate(self, event: Event, user_id: UserId, issuer: UserId) -> Certificate:
        certificate = Certificate(
            id=uuid.uuid4(),
            code=CertificateCode.generate(),
            event_id=event.id,
            user_id=user_id,
            issued_by=issuer,
            issued_at=self._clock(),
        )
        # The artifact is named after the code, so it is rendered per attempt.
        artifact_url = self._renderer.render(certificate, event)
        if artifact_url:
            certificate = replace(certificate, artifact_url=artifact_url)
        return certificate

    def list_my_certificates(self, caller: Caller) -> list[Certificate]:
        return self._certificates.list_for_user(caller.user_id)

    def list_event_certificates(self, event_id: str, caller: Caller) -> list[Certificate]:
        event = load_owned_event(self._events, event_id, caller)
        return self._certificates.list_for_event(event.id)

    def get_certificate(self, code: str, caller: Caller) -> Certificate:
        """Return a certificate to its holder or to the organizer of its event.

        Raises:
            CertificateNotFoundError: If the code does not resolve.
            ForbiddenError: If the caller may not see the certificate.
        """
        parsed = parse_certificate_code(code)
        certificate = self._certificates.get_certificate(parsed) if parsed else None
        if certificate is None:
            raise CertificateNotFoundError(code)
        if certificate.user_id != caller.user_id:
            event = self._events.get_event(certificate.event_id)
            if event is None or not event.is_owned_by(caller.user_id):
                raise ForbiddenError("Not authorized to view this certificate")
        return certificate
