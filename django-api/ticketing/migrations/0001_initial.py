import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(max_length=2000)),
                ("organizer_id", models.UUIDField()),
                (
                    "event_type",
                    models.CharField(
                        choices=[("public", "Public"), ("departmental", "Departmental")],
                        max_length=20,
                    ),
                ),
                ("department", models.CharField(max_length=100)),
                ("seat_limit", models.PositiveIntegerField()),
                ("registered_count", models.PositiveIntegerField(default=0)),
                ("starts_at", models.DateTimeField()),
                ("venue", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("published", "Published"),
                            ("ongoing", "Ongoing"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("certificates_enabled", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["starts_at"],
                "indexes": [
                    models.Index(
                        fields=["starts_at", "status"], name="event_starts_status_idx"
                    ),
                    models.Index(fields=["organizer_id"], name="event_organizer_idx"),
                    models.Index(
                        fields=["department", "event_type"],
                        name="event_dept_type_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("seat_limit__gte", 1)),
                        name="event_seat_limit_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("registered_count__lte", models.F("seat_limit"))),
                        name="event_registered_within_limit",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("code", models.CharField(max_length=20, unique=True)),
                ("user_id", models.UUIDField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("unused", "Unused"),
                            ("used", "Used"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="unused",
                        max_length=20,
                    ),
                ),
                ("used_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tickets",
                        to="ticketing.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["user_id", "-created_at"], name="ticket_user_created_idx"
                    ),
                    models.Index(fields=["status"], name="ticket_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "user_id"), name="unique_ticket_per_event_user"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Attendance",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("user_id", models.UUIDField()),
                ("verified_by", models.UUIDField()),
                ("entry_time", models.DateTimeField()),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attendance",
                        to="ticketing.event",
                    ),
                ),
                (
                    "ticket",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attendance",
                        to="ticketing.ticket",
                    ),
                ),
            ],
            options={
                "ordering": ["entry_time"],
                "indexes": [
                    models.Index(
                        fields=["event", "entry_time"], name="attendance_event_entry_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "user_id"), name="unique_attendance_per_event_user"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Certificate",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("code", models.CharField(max_length=20, unique=True)),
                ("user_id", models.UUIDField()),
                ("issued_by", models.UUIDField()),
                ("issued_at", models.DateTimeField()),
                ("artifact_url", models.URLField(blank=True, max_length=500, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="certificates",
                        to="ticketing.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-issued_at"],
                "indexes": [
                    models.Index(fields=["user_id"], name="certificate_user_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "user_id"), name="unique_certificate_per_event_user"
                    ),
                ],
            },
        ),
    ]
