"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to handlers.errors.exception_handler
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing import container
from ticketing.domain import Caller
from ticketing.handlers.authentication import IsOrganizer, IsStudent
from ticketing.handlers.serializers import (
    AdmissionSerializer,
    AttendanceSerializer,
    AttendanceStatsSerializer,
    CertificateSerializer,
    EventCreateSerializer,
    EventSerializer,
    EventUpdateSerializer,
    IssuanceReportSerializer,
    StatusChangeSerializer,
    TicketSerializer,
    VerifyTicketSerializer,
)


def _caller(request: Request) -> Caller:
    return request.user.caller


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        params = request.query_params
        events = container.event_service().list_events(
            _caller(request),
            status=params.get("status"),
            department=params.get("department"),
            event_type=params.get("event_type"),
            upcoming=params.get("upcoming") == "true",
        )
        return Response({"count": len(events), "events": EventSerializer(events, many=True).data})

    def post(self, request: Request) -> Response:
        payload = EventCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        event = container.event_service().create_event(_caller(request), **payload.validated_data)
        return Response({"event": EventSerializer(event).data}, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET/PUT /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = container.event_service().get_event(event_id)
        return Response({"event": EventSerializer(event).data})

    def put(self, request: Request, event_id: str) -> Response:
        payload = EventUpdateSerializer(data=request.data, partial=True)
        payload.is_valid(raise_exception=True)
        event = container.event_service().update_event(
            event_id, _caller(request), **payload.validated_data
        )
        return Response({"event": EventSerializer(event).data})


class EventStatusView(APIView):
    """Handler for POST /api/events/{event_id}/status"""

    permission_classes = [IsOrganizer]

    def post(self, request: Request, event_id: str) -> Response:
        payload = StatusChangeSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        change = container.event_service().change_status(
            event_id, _caller(request), payload.validated_data["status"]
        )
        body = {"event": EventSerializer(change.event).data}
        if change.issuance is not None:
            body["certificates"] = IssuanceReportSerializer(change.issuance).data
        return Response(body)


class EventRegistrationsView(APIView):
    """Handler for GET /api/events/{event_id}/registrations"""

    permission_classes = [IsOrganizer]

    def get(self, request: Request, event_id: str) -> Response:
        tickets = container.event_service().list_registrations(event_id, _caller(request))
        return Response(
            {"count": len(tickets), "registrations": TicketSerializer(tickets, many=True).data}
        )


class RegisterView(APIView):
    """Handler for POST /api/events/{event_id}/register"""

    permission_classes = [IsStudent]

    def post(self, request: Request, event_id: str) -> Response:
        ticket = container.registration_service().register(event_id, _caller(request))
        return Response(
            {"message": "Registration successful", "ticket": TicketSerializer(ticket).data},
            status=status.HTTP_201_CREATED,
        )


class EventAttendanceView(APIView):
    """Handler for GET /api/events/{event_id}/attendance"""

    permission_classes = [IsOrganizer]

    def get(self, request: Request, event_id: str) -> Response:
        records = container.attendance_service().list_for_event(event_id, _caller(request))
        return Response(
            {"count": len(records), "attendance": AttendanceSerializer(records, many=True).data}
        )


class EventStatsView(APIView):
    """Handler for GET /api/events/{event_id}/stats"""

    permission_classes = [IsOrganizer]

    def get(self, request: Request, event_id: str) -> Response:
        stats = container.attendance_service().stats(event_id, _caller(request))
        return Response({"stats": AttendanceStatsSerializer(stats).data})


class EventCertificatesView(APIView):
    """Handler for GET/POST /api/events/{event_id}/certificates"""

    permission_classes = [IsOrganizer]

    def get(self, request: Request, event_id: str) -> Response:
        certificates = container.certificate_service().list_event_certificates(
            event_id, _caller(request)
        )
        return Response(
            {
                "count": len(certificates),
                "certificates": CertificateSerializer(certificates, many=True).data,
            }
        )

    def post(self, request: Request, event_id: str) -> Response:
        report = container.certificate_service().issue_for_event(event_id, _caller(request))
        return Response(
            {"certificates": IssuanceReportSerializer(report).data},
            status=status.HTTP_201_CREATED,
        )


class MyTicketsView(APIView):
    """Handler for GET /api/tickets/mine"""

    def get(self, request: Request) -> Response:
        tickets = container.ticket_service().list_my_tickets(_caller(request))
        return Response({"count": len(tickets), "tickets": TicketSerializer(tickets, many=True).data})


class TicketDetailView(APIView):
    """Handler for GET /api/tickets/{ticket_id}"""

    def get(self, request: Request, ticket_id: str) -> Response:
        ticket = container.ticket_service().get_ticket(ticket_id, _caller(request))
        return Response({"ticket": TicketSerializer(ticket).data})


class TicketCancelView(APIView):
    """Handler for POST /api/tickets/{ticket_id}/cancel"""

    permission_classes = [IsOrganizer]

    def post(self, request: Request, ticket_id: str) -> Response:
        ticket = container.ticket_service().cancel_ticket(ticket_id, _caller(request))
        return Response({"message": "Ticket cancelled", "ticket": TicketSerializer(ticket).data})


class TicketVerifyView(APIView):
    """Handler for POST /api/tickets/verify"""

    permission_classes = [IsOrganizer]

    def post(self, request: Request) -> Response:
        payload = VerifyTicketSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        admission = container.verification_service().verify(
            payload.validated_data["ticket_id"],
            payload.validated_data["event_id"],
            _caller(request),
        )
        return Response(
            {
                "message": "Entry verified successfully",
                "verification": AdmissionSerializer(admission).data,
            }
        )


class MyCertificatesView(APIView):
    """Handler for GET /api/certificates/mine"""

    def get(self, request: Request) -> Response:
        certificates = container.certificate_service().list_my_certificates(_caller(request))
        return Response(
            {
                "count": len(certificates),
                "certificates": CertificateSerializer(certificates, many=True).data,
            }
        )


class CertificateDetailView(APIView):
    """Handler for GET /api/certificates/{certificate_id}"""

    def get(self, request: Request, certificate_id: str) -> Response:
        certificate = container.certificate_service().get_certificate(
            certificate_id, _caller(request)
        )
        return Response({"certificate": CertificateSerializer(certificate).data})


class MyAttendanceView(APIView):
    """Handler for GET /api/attendance/mine"""

    def get(self, request: Request) -> Response:
        records = container.attendance_service().list_mine(_caller(request))
        return Response(
            {"count": len(records), "attendance": AttendanceSerializer(records, many=True).data}
        )
