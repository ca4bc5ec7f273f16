"""Seam to the certificate rendering collaborator (PDF generation and storage)."""

from abc import ABC, abstractmethod

from ticketing.domain import Certificate, Event


class CertificateRenderer(ABC):
    @abstractmethod
    def render(self, certificate: Certificate, event: Event) -> str | None:
        """Produce the certificate artifact and return where it is stored.

        Return None when nothing is stored up front and the artifact is
        rendered on download instead. Raising marks only this attendee as
        failed; the issuance batch carries on.
        """
        ...


class DeferredCertificateRenderer(CertificateRenderer):
    """Stores nothing at issue time; certificates are rendered on download."""

    def render(self, certificate: Certificate, event: Event) -> str | None:
        return None
