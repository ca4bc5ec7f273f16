"""HTTP tests through the gateway headers, the views and the ORM stores."""

from datetime import timedelta

import pytest
from django.utils import timezone

from ticketing.domain import Role

from conftest import make_caller

pytestmark = pytest.mark.django_db


def as_caller(caller):
    return {
        "HTTP_X_USER_ID": str(caller.user_id),
        "HTTP_X_USER_ROLE": caller.role.value,
        "HTTP_X_USER_DEPARTMENT": caller.department,
    }


def event_payload(**overrides):
    payload = {
        "title": "Cloud Computing Bootcamp",
        "description": "Two hours of hands-on labs",
        "event_type": "public",
        "department": "Computer Science",
        "seat_limit": 2,
        "starts_at": (timezone.now() + timedelta(days=3)).isoformat(),
        "venue": "Lab 4",
        "certificates_enabled": True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def organizer_headers(organizer):
    return as_caller(organizer)


@pytest.fixture
def student_headers(student):
    return as_caller(student)


@pytest.fixture
def event_id(api_client, organizer_headers):
    """A published, certificate-enabled event created through the API."""
    response = api_client.post(
        "/api/events", event_payload(), format="json", **organizer_headers
    )
    assert response.status_code == 201
    event_id = response.data["event"]["id"]
    published = api_client.post(
        f"/api/events/{event_id}/status",
        {"status": "published"},
        format="json",
        **organizer_headers,
    )
    assert published.status_code == 200
    return event_id


def register(api_client, event_id, headers):
    return api_client.post(f"/api/events/{event_id}/register", **headers)


def verify(api_client, event_id, ticket_id, headers):
    return api_client.post(
        "/api/tickets/verify",
        {"ticket_id": ticket_id, "event_id": event_id},
        format="json",
        **headers,
    )


class TestAuthentication:
    def test_missing_identity_is_unauthorized(self, api_client):
        assert api_client.get("/api/events").status_code == 401

    def test_malformed_identity_is_rejected(self, api_client):
        response = api_client.get(
            "/api/events", HTTP_X_USER_ID="alice", HTTP_X_USER_ROLE="student"
        )
        assert response.status_code == 401

    def test_students_cannot_create_events(self, api_client, student_headers):
        response = api_client.post(
            "/api/events", event_payload(), format="json", **student_headers
        )
        assert response.status_code == 403


class TestEventEndpoints:
    def test_create_validates_payload(self, api_client, organizer_headers):
        response = api_client.post(
            "/api/events", {"title": "No seats"}, format="json", **organizer_headers
        )
        assert response.status_code == 400

    def test_detail_and_listing(self, api_client, event_id, student_headers):
        detail = api_client.get(f"/api/events/{event_id}", **student_headers)
        assert detail.status_code == 200
        assert detail.data["event"]["status"] == "published"
        assert detail.data["event"]["seats_available"] == 2

        listing = api_client.get("/api/events", **student_headers)
        assert listing.data["count"] == 1

    def test_unknown_and_malformed_ids(self, api_client, student_headers):
        missing = api_client.get(
            "/api/events/00000000-0000-4000-8000-000000000000", **student_headers
        )
        assert missing.status_code == 404
        assert missing.data["error"]["code"] == "EVENT_NOT_FOUND"

        malformed = api_client.get("/api/events/abc", **student_headers)
        assert malformed.status_code == 400
        assert malformed.data["error"]["code"] == "INVALID_ID"

    def test_listing_filters(self, api_client, event_id, student_headers):
        def count(query):
            return api_client.get(f"/api/events?{query}", **student_headers).data["count"]

        assert count("department=Computer%20Science") == 1
        assert count("department=Engineering") == 0
        assert count("event_type=departmental") == 0
        assert count("upcoming=true") == 1

    def test_update_event(self, api_client, event_id, organizer_headers, student_headers):
        url = f"/api/events/{event_id}"
        changes = {"title": "Cloud Bootcamp II", "seat_limit": 5}
        response = api_client.put(url, changes, format="json", **organizer_headers)
        assert response.status_code == 200
        assert response.data["event"]["title"] == "Cloud Bootcamp II"
        assert response.data["event"]["seats_available"] == 5

        forbidden = api_client.put(url, {"title": "Mine"}, format="json", **student_headers)
        assert forbidden.status_code == 403

        invalid = api_client.put(url, {"seat_limit": 0}, format="json", **organizer_headers)
        assert invalid.status_code == 400

    def test_seat_limit_below_registrations(
        self, api_client, event_id, organizer_headers, student_headers
    ):
        register(api_client, event_id, student_headers)
        register(api_client, event_id, as_caller(make_caller()))

        response = api_client.put(
            f"/api/events/{event_id}", {"seat_limit": 1}, format="json", **organizer_headers
        )
        assert response.status_code == 400
        assert response.data["error"]["code"] == "VALIDATION_ERROR"

    def test_illegal_transition_is_conflict(self, api_client, event_id, organizer_headers):
        response = api_client.post(
            f"/api/events/{event_id}/status",
            {"status": "draft"},
            format="json",
            **organizer_headers,
        )
        assert response.status_code == 409
        assert response.data["error"]["code"] == "INVALID_TRANSITION"


class TestTicketFlow:
    def test_register_verify_and_rescan(
        self, api_client, event_id, organizer_headers, student_headers
    ):
        registered = register(api_client, event_id, student_headers)
        assert registered.status_code == 201
        ticket = registered.data["ticket"]
        assert ticket["status"] == "unused"
        assert ticket["qr_payload"] == ticket["ticket_id"]

        admitted = verify(api_client, event_id, ticket["ticket_id"], organizer_headers)
        assert admitted.status_code == 200
        verification = admitted.data["verification"]
        assert verification["valid"] is True
        assert verification["ticket"]["status"] == "used"

        rescanned = verify(api_client, event_id, ticket["ticket_id"], organizer_headers)
        assert rescanned.status_code == 409
        error = rescanned.data["error"]
        assert error["code"] == "ALREADY_USED"
        assert error["used_at"] == verification["entry_time"]

        mine = api_client.get("/api/attendance/mine", **student_headers)
        assert mine.data["count"] == 1

    def test_duplicate_and_sold_out(self, api_client, event_id, student_headers):
        assert register(api_client, event_id, student_headers).status_code == 201

        duplicate = register(api_client, event_id, student_headers)
        assert duplicate.status_code == 409
        assert duplicate.data["error"]["code"] == "DUPLICATE_REGISTRATION"

        assert register(api_client, event_id, as_caller(make_caller())).status_code == 201
        sold_out = register(api_client, event_id, as_caller(make_caller()))
        assert sold_out.status_code == 409
        assert sold_out.data["error"]["code"] == "SEATS_EXHAUSTED"

    def test_organizers_cannot_register(self, api_client, event_id, organizer_headers):
        assert register(api_client, event_id, organizer_headers).status_code == 403

    def test_cancel_then_scan(self, api_client, event_id, organizer_headers, student_headers):
        ticket_id = register(api_client, event_id, student_headers).data["ticket"]["ticket_id"]

        cancelled = api_client.post(f"/api/tickets/{ticket_id}/cancel", **organizer_headers)
        assert cancelled.status_code == 200
        assert cancelled.data["ticket"]["status"] == "cancelled"

        stats = api_client.get(f"/api/events/{event_id}/stats", **organizer_headers)
        assert stats.data["stats"]["seats_available"] == 2

        scanned = verify(api_client, event_id, ticket_id, organizer_headers)
        assert scanned.status_code == 409
        assert scanned.data["error"]["code"] == "TICKET_CANCELLED"

    def test_ticket_reads(self, api_client, event_id, student_headers):
        ticket_id = register(api_client, event_id, student_headers).data["ticket"]["ticket_id"]

        assert api_client.get(f"/api/tickets/{ticket_id}", **student_headers).status_code == 200
        other = api_client.get(f"/api/tickets/{ticket_id}", **as_caller(make_caller()))
        assert other.status_code == 403
        missing = api_client.get("/api/tickets/TKT-00000000", **student_headers)
        assert missing.status_code == 404

        mine = api_client.get("/api/tickets/mine", **student_headers)
        assert [t["ticket_id"] for t in mine.data["tickets"]] == [ticket_id]

    def test_scan_at_the_wrong_event(
        self, api_client, event_id, organizer_headers, student_headers
    ):
        ticket_id = register(api_client, event_id, student_headers).data["ticket"]["ticket_id"]

        other = api_client.post(
            "/api/events",
            event_payload(title="Another event", venue="Lab 2"),
            format="json",
            **organizer_headers,
        ).data["event"]["id"]

        response = verify(api_client, other, ticket_id, organizer_headers)
        assert response.status_code == 400
        assert response.data["error"]["code"] == "WRONG_EVENT"


class TestCertificateFlow:
    def test_completion_issues_certificates(
        self, api_client, event_id, organizer_headers, student_headers
    ):
        ticket_id = register(api_client, event_id, student_headers).data["ticket"]["ticket_id"]
        register(api_client, event_id, as_caller(make_caller()))
        verify(api_client, event_id, ticket_id, organizer_headers)

        early = api_client.post(f"/api/events/{event_id}/certificates", **organizer_headers)
        assert early.status_code == 409
        assert early.data["error"]["code"] == "INVALID_STATE"

        completed = api_client.post(
            f"/api/events/{event_id}/status",
            {"status": "completed"},
            format="json",
            **organizer_headers,
        )
        assert completed.status_code == 200
        assert completed.data["certificates"]["generated"] == 1

        rerun = api_client.post(f"/api/events/{event_id}/certificates", **organizer_headers)
        assert rerun.status_code == 201
        assert rerun.data["certificates"]["skipped"] == 1

        mine = api_client.get("/api/certificates/mine", **student_headers)
        assert mine.data["count"] == 1
        code = mine.data["certificates"][0]["certificate_id"]
        detail = api_client.get(f"/api/certificates/{code}", **student_headers)
        assert detail.status_code == 200

        listed = api_client.get(f"/api/events/{event_id}/certificates", **organizer_headers)
        assert listed.data["count"] == 1

    def test_organizer_reports(self, api_client, event_id, organizer_headers, student_headers):
        ticket_id = register(api_client, event_id, student_headers).data["ticket"]["ticket_id"]
        verify(api_client, event_id, ticket_id, organizer_headers)

        registrations = api_client.get(
            f"/api/events/{event_id}/registrations", **organizer_headers
        )
        assert registrations.data["count"] == 1

        attendance = api_client.get(f"/api/events/{event_id}/attendance", **organizer_headers)
        assert attendance.data["count"] == 1

        stats = api_client.get(f"/api/events/{event_id}/stats", **organizer_headers)
        assert stats.data["stats"]["attendance_rate"] == "100.00%"

        stranger = as_caller(make_caller(Role.ORGANIZER))
        forbidden = api_client.get(f"/api/events/{event_id}/stats", **stranger)
        assert forbidden.status_code == 403
        assert forbidden.data["error"]["code"] == "FORBIDDEN"
