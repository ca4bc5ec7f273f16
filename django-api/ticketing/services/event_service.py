"""Event service - event lifecycle and organizer views.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
import uuid
from datetime import datetime

from django.utils import timezone

from ticketing.domain import (
    Caller,
    Event,
    EventId,
    EventStatus,
    EventType,
    SeatLimit,
    StatusChange,
    Ticket,
)
from ticketing.domain.errors import (
    EventNotFoundError,
    ForbiddenError,
    InvalidTransitionError,
    ValidationError,
)
from ticketing.domain.states import can_transition_event
from ticketing.services.certificate_service import CertificateService
from ticketing.services.lookups import Clock, load_event, load_owned_event
from ticketing.stores.interfaces import EventStore, TicketStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "event_type",
        "department",
        "seat_limit",
        "starts_at",
        "venue",
        "certificates_enabled",
    }
)


class EventService:
    """Service for event creation, status changes and organizer listings."""

    def __init__(
        self,
        store: EventStore,
        tickets: TicketStore,
        certificates: CertificateService,
        clock: Clock = timezone.now,
    ) -> None:
        self._store = store
        self._tickets = tickets
        self._certificates = certificates
        self._clock = clock

    def create_event(
        self,
        caller: Caller,
        *,
        title: str,
        description: str,
        event_type: str,
        department: str,
        seat_limit: int,
        starts_at: datetime,
        venue: str,
        certificates_enabled: bool = False,
    ) -> Event:
        """Create a draft event owned by the caller.

        Raises:
            ForbiddenError: If the caller is not an organizer.
            ValidationError: If the seat limit or event type is invalid.
        """
        if not caller.is_organizer:
            raise ForbiddenError("Only organizers can create events")
        try:
            limit = SeatLimit(seat_limit)
            kind = EventType(event_type)
        except ValueError as exc:
            raise ValidationError(str(exc)) from None

        now = self._clock()
        event = self._store.add_event(
            Event(
                id=EventId(uuid.uuid4()),
                title=title,
                description=description,
                organizer_id=caller.user_id,
                event_type=kind,
                department=department,
                seat_limit=limit.value,
                registered_count=0,
                starts_at=starts_at,
                venue=venue,
                status=EventStatus.DRAFT,
                certificates_enabled=certificates_enabled,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Event %s created by %s", event.id, caller.user_id)
        return event

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        return load_event(self._store, event_id)

    def update_event(self, event_id: str, caller: Caller, **fields) -> Event:
        """Edit the details of an event the caller organizes.

        Only the given fields change. Status moves go through change_status.
        A new seat limit may not drop below the seats already taken; the check
        is part of the store's conditional write, so a registration racing the
        edit cannot slip past it.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ForbiddenError: If the caller does not organize the event.
            ValidationError: If a field cannot be edited or holds an invalid
                value, or the seat limit is below the registered count.
        """
        event = load_owned_event(
            self._store, event_id, caller, "Not authorized to update this event"
        )
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        changes = dict(fields)
        try:
            if "seat_limit" in changes:
                changes["seat_limit"] = SeatLimit(changes["seat_limit"]).value
            if "event_type" in changes:
                changes["event_type"] = EventType(changes["event_type"])
        except ValueError as exc:
            raise ValidationError(str(exc)) from None
        if not changes:
            return event

        if not self._store.update_details(event.id, changes):
            current = self._store.get_event(event.id)
            if current is None:
                raise EventNotFoundError(event_id)
            raise ValidationError(
                f"Seat limit cannot be lower than the {current.registered_count} "
                "seats already registered"
            )

        logger.info(
            "Event %s updated by %s: %s", event.id, caller.user_id, ", ".join(sorted(changes))
        )
        return load_event(self._store, event_id)

    def list_events(
        self,
        caller: Caller,
        status: str | None = None,
        *,
        department: str | None = None,
        event_type: str | None = None,
        upcoming: bool = False,
    ) -> list[Event]:
        """Organizers see their own events; everyone else sees published ones.

        department and event_type narrow either listing, and upcoming drops
        events that started before now.
        """
        try:
            kind = EventType(event_type) if event_type else None
        except ValueError:
            raise ValidationError(f"Unknown event type: {event_type}") from None
        filters = {
            "department": department or None,
            "event_type": kind,
            "starts_after": self._clock() if upcoming else None,
        }
        if not caller.is_organizer:
            return self._store.list_events(status=EventStatus.PUBLISHED, **filters)
        try:
            wanted = EventStatus(status) if status else None
        except ValueError:
            raise ValidationError(f"Unknown event status: {status}") from None
        return self._store.list_events(organizer_id=caller.user_id, status=wanted, **filters)

    def change_status(self, event_id: str, caller: Caller, status: str) -> StatusChange:
        """Move an event along its lifecycle.

        Completing a certificate-enabled event issues its certificates; the
        issuance report is returned alongside the updated event.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ForbiddenError: If the caller does not organize the event.
            ValidationError: If the status is unknown.
            InvalidTransitionError: If the lifecycle does not allow the change,
                including when another request changed the status first.
        """
        event = load_owned_event(
            self._store, event_id, caller, "Not authorized to update this event"
        )
        try:
            target = EventStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown event status: {status}") from None

        if not can_transition_event(event.status, target):
            raise InvalidTransitionError(event.status.value, target.value)
        if not self._store.change_status(event.id, event.status, target):
            current = self._store.get_event(event.id)
            current_status = current.status.value if current else event.status.value
            raise InvalidTransitionError(current_status, target.value)

        updated = load_event(self._store, event_id)
        logger.info(
            "Event %s moved from %s to %s by %s",
            event.id,
            event.status.value,
            target.value,
            caller.user_id,
        )

        issuance = None
        if target is EventStatus.COMPLETED:
            issuance = self._certificates.issue(updated, caller.user_id)
        return StatusChange(event=updated, issuance=issuance)

    def list_registrations(self, event_id: str, caller: Caller) -> list[Ticket]:
        event = load_owned_event(
            self._store, event_id, caller, "Not authorized to view registrations"
        )
        return self._tickets.list_tickets_for_event(event.id)
