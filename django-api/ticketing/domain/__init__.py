from ticketing.domain.models import (
    Admission,
    AttendanceRecord,
    AttendanceStats,
    Caller,
    Certificate,
    Event,
    InsertOutcome,
    IssuanceError,
    IssuanceReport,
    StatusChange,
    Ticket,
)
from ticketing.domain.states import EventStatus, EventType, Role, TicketStatus
from ticketing.domain.value_objects import (
    CertificateCode,
    EventId,
    SeatLimit,
    TicketCode,
    UserId,
)

__all__ = [
    "Admission",
    "AttendanceRecord",
    "AttendanceStats",
    "Caller",
    "Certificate",
    "Event",
    "InsertOutcome",
    "IssuanceError",
    "IssuanceReport",
    "StatusChange",
    "Ticket",
    "EventStatus",
    "EventType",
    "Role",
    "TicketStatus",
    "CertificateCode",
    "EventId",
    "SeatLimit",
    "TicketCode",
    "UserId",
]
