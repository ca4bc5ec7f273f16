"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
The (event, user) uniqueness on tickets, attendance and certificates is
enforced here by the database, not only by the services.
"""

import uuid

from django.db import models
from django.db.models import F, Q

from ticketing.domain.states import EventStatus, EventType, TicketStatus


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.name.title()) for member in enum_cls]


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    organizer_id = models.UUIDField()
    event_type = models.CharField(max_length=20, choices=_choices(EventType))
    department = models.CharField(max_length=100)
    seat_limit = models.PositiveIntegerField()
    registered_count = models.PositiveIntegerField(default=0)
    starts_at = models.DateTimeField()
    venue = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20, choices=_choices(EventStatus), default=EventStatus.DRAFT.value
    )
    certificates_enabled = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["starts_at", "status"], name="event_starts_status_idx"),
            models.Index(fields=["organizer_id"], name="event_organizer_idx"),
            models.Index(fields=["department", "event_type"], name="event_dept_type_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(seat_limit__gte=1), name="event_seat_limit_positive"
            ),
            models.CheckConstraint(
                condition=Q(registered_count__lte=F("seat_limit")),
                name="event_registered_within_limit",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class Ticket(models.Model):
    """Persistence model for tickets."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=20, unique=True)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="tickets")
    user_id = models.UUIDField()
    status = models.CharField(
        max_length=20, choices=_choices(TicketStatus), default=TicketStatus.UNUSED.value
    )
    used_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_id", "-created_at"], name="ticket_user_created_idx"),
            models.Index(fields=["status"], name="ticket_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user_id"], name="unique_ticket_per_event_user"
            ),
        ]

    def __str__(self) -> str:
        return self.code


class Attendance(models.Model):
    """Persistence model for verified entries."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="attendance")
    user_id = models.UUIDField()
    ticket = models.ForeignKey(Ticket, on_delete=models.PROTECT, related_name="attendance")
    verified_by = models.UUIDField()
    entry_time = models.DateTimeField()

    class Meta:
        ordering = ["entry_time"]
        indexes = [
            models.Index(fields=["event", "entry_time"], name="attendance_event_entry_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user_id"], name="unique_attendance_per_event_user"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.event_id}"


class Certificate(models.Model):
    """Persistence model for issued certificates."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=20, unique=True)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="certificates")
    user_id = models.UUIDField()
    issued_by = models.UUIDField()
    issued_at = models.DateTimeField()
    artifact_url = models.URLField(max_length=500, blank=True, null=True)

    class Meta:
        ordering = ["-issued_at"]
        indexes = [
            models.Index(fields=["user_id"], name="certificate_user_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user_id"], name="unique_certificate_per_event_user"
            ),
        ]

    def __str__(self) -> str:
        return self.code
