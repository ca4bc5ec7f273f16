"""Domain primitives that enforce validity at creation time."""

import re
import uuid
from dataclasses import dataclass
from typing import Self
from uuid import UUID

TICKET_CODE_PREFIX = "TKT-"
CERTIFICATE_CODE_PREFIX = "CERT-"

_TICKET_CODE_RE = re.compile(r"^TKT-[0-9A-F]{8}$")
_CERTIFICATE_CODE_RE = re.compile(r"^CERT-[0-9A-F]{12}$")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId:
    """Identifier of a user as issued by the authentication gateway."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TicketCode:
    """Human-readable ticket identifier, e.g. ``TKT-1A2B3C4D``.

    This is the only thing ever encoded into a ticket's QR code.
    """

    value: str

    def __post_init__(self) -> None:
        if not _TICKET_CODE_RE.match(self.value):
            raise ValueError("Invalid ticket code format")

    @classmethod
    def generate(cls) -> Self:
        return cls(value=TICKET_CODE_PREFIX + uuid.uuid4().hex[:8].upper())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value.strip().upper())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CertificateCode:
    """Human-readable certificate identifier, e.g. ``CERT-0123456789AB``."""

    value: str

    def __post_init__(self) -> None:
        if not _CERTIFICATE_CODE_RE.match(self.value):
            raise ValueError("Invalid certificate code format")

    @classmethod
    def generate(cls) -> Self:
        return cls(value=CERTIFICATE_CODE_PREFIX + uuid.uuid4().hex[:12].upper())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=value.strip().upper())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SeatLimit:
    """Positive integer capacity of an event."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Seat limit must be at least 1")
