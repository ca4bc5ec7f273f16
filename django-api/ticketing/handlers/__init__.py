from ticketing.handlers.views import (
    CertificateDetailView,
    EventAttendanceView,
    EventCertificatesView,
    EventDetailView,
    EventListView,
    EventRegistrationsView,
    EventStatsView,
    EventStatusView,
    MyAttendanceView,
    MyCertificatesView,
    MyTicketsView,
    RegisterView,
    TicketCancelView,
    TicketDetailView,
    TicketVerifyView,
)

__all__ = [
    "CertificateDetailView",
    "EventAttendanceView",
    "EventCertificatesView",
    "EventDetailView",
    "EventListView",
    "EventRegistrationsView",
    "EventStatsView",
    "EventStatusView",
    "MyAttendanceView",
    "MyCertificatesView",
    "MyTicketsView",
    "RegisterView",
    "TicketCancelView",
    "TicketDetailView",
    "TicketVerifyView",
]
