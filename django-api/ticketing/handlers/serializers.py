"""Serializers for request payloads and domain model responses."""

from rest_framework import serializers

from ticketing.domain import EventStatus, EventType


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=2000)
    event_type = serializers.ChoiceField(choices=[t.value for t in EventType])
    department = serializers.CharField(max_length=100)
    seat_limit = serializers.IntegerField(min_value=1)
    starts_at = serializers.DateTimeField()
    venue = serializers.CharField(max_length=255)
    certificates_enabled = serializers.BooleanField(default=False)


class EventUpdateSerializer(serializers.Serializer):
    """Partial event edit; only the fields sent are changed."""

    title = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(max_length=2000, required=False)
    event_type = serializers.ChoiceField(choices=[t.value for t in EventType], required=False)
    department = serializers.CharField(max_length=100, required=False)
    seat_limit = serializers.IntegerField(min_value=1, required=False)
    starts_at = serializers.DateTimeField(required=False)
    venue = serializers.CharField(max_length=255, required=False)
    certificates_enabled = serializers.BooleanField(required=False)


class StatusChangeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in EventStatus])


class VerifyTicketSerializer(serializers.Serializer):
    ticket_id = serializers.CharField(max_length=64)
    event_id = serializers.CharField(max_length=64)


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    organizer_id = serializers.UUIDField(source="organizer_id.value")
    event_type = serializers.CharField(source="event_type.value")
    department = serializers.CharField()
    seat_limit = serializers.IntegerField()
    registered_count = serializers.IntegerField()
    seats_available = serializers.IntegerField()
    starts_at = serializers.DateTimeField()
    venue = serializers.CharField()
    status = serializers.CharField(source="status.value")
    certificates_enabled = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model.

    ``qr_payload`` is the ticket code alone; clients render it into the QR image.
    """

    ticket_id = serializers.CharField(source="code.value")
    event_id = serializers.UUIDField(source="event_id.value")
    user_id = serializers.UUIDField(source="user_id.value")
    status = serializers.CharField(source="status.value")
    used_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    qr_payload = serializers.CharField()


class AttendanceSerializer(serializers.Serializer):
    event_id = serializers.UUIDField(source="event_id.value")
    user_id = serializers.UUIDField(source="user_id.value")
    ticket_id = serializers.UUIDField()
    verified_by = serializers.UUIDField(source="verified_by.value")
    entry_time = serializers.DateTimeField()


class AdmissionSerializer(serializers.Serializer):
    valid = serializers.SerializerMethodField()
    ticket = TicketSerializer()
    attendance = AttendanceSerializer()
    entry_time = serializers.DateTimeField(source="attendance.entry_time")

    def get_valid(self, obj) -> bool:
        return True


class CertificateSerializer(serializers.Serializer):
    certificate_id = serializers.CharField(source="code.value")
    event_id = serializers.UUIDField(source="event_id.value")
    user_id = serializers.UUIDField(source="user_id.value")
    issued_by = serializers.UUIDField(source="issued_by.value")
    issued_at = serializers.DateTimeField()
    artifact_url = serializers.CharField(allow_null=True)


class IssuanceErrorSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(source="user_id.value")
    error = serializers.CharField()


class IssuanceReportSerializer(serializers.Serializer):
    message = serializers.CharField()
    total_attendees = serializers.IntegerField()
    generated = serializers.IntegerField()
    skipped = serializers.IntegerField()
    errors = IssuanceErrorSerializer(many=True)


class AttendanceStatsSerializer(serializers.Serializer):
    total_registered = serializers.IntegerField()
    total_attended = serializers.IntegerField()
    attendance_rate = serializers.CharField()
    seats_available = serializers.IntegerField()
