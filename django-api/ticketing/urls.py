from django.urls import path

from ticketing.handlers import (
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

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/status", EventStatusView.as_view(), name="event-status"),
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationsView.as_view(),
        name="event-registrations",
    ),
    path("events/<str:event_id>/register", RegisterView.as_view(), name="event-register"),
    path(
        "events/<str:event_id>/attendance",
        EventAttendanceView.as_view(),
        name="event-attendance",
    ),
    path("events/<str:event_id>/stats", EventStatsView.as_view(), name="event-stats"),
    path(
        "events/<str:event_id>/certificates",
        EventCertificatesView.as_view(),
        name="event-certificates",
    ),
    path("tickets/mine", MyTicketsView.as_view(), name="my-tickets"),
    path("tickets/verify", TicketVerifyView.as_view(), name="ticket-verify"),
    path("tickets/<str:ticket_id>", TicketDetailView.as_view(), name="ticket-detail"),
    path("tickets/<str:ticket_id>/cancel", TicketCancelView.as_view(), name="ticket-cancel"),
    path("certificates/mine", MyCertificatesView.as_view(), name="my-certificates"),
    path(
        "certificates/<str:certificate_id>",
        CertificateDetailView.as_view(),
        name="certificate-detail",
    ),
    path("attendance/mine", MyAttendanceView.as_view(), name="my-attendance"),
]
