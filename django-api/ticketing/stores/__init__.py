from ticketing.stores.interfaces import (
    AttendanceLedger,
    CertificateLedger,
    EventStore,
    TicketStore,
)

__all__ = ["AttendanceLedger", "CertificateLedger", "EventStore", "TicketStore"]
