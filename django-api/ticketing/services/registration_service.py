"""Registration workflow: open-event checks, seat reservation, ticket issue.

The seat is reserved with one conditional update at the store. Anything that
fails after the reservation but before the ticket is stored gives the seat
back, so a failed registration never leaks capacity.
"""

import logging
import uuid

from django.utils import timezone

from ticketing.domain import (
    Caller,
    EventId,
    EventStatus,
    EventType,
    Ticket,
    TicketCode,
    TicketStatus,
    UserId,
)
from ticketing.domain.errors import (
    DuplicateRegistrationError,
    EventNotFoundError,
    ForbiddenError,
    RegistrationClosedError,
    SeatsExhaustedError,
    StorageConflictError,
    TicketCodeCollisionError,
)
from ticketing.services.lookups import Clock, parse_event_id
from ticketing.stores.interfaces import EventStore, TicketStore

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 3


class RegistrationService:
    """Registers students for events and issues their tickets."""

    def __init__(
        self, events: EventStore, tickets: TicketStore, clock: Clock = timezone.now
    ) -> None:
        self._events = events
        self._tickets = tickets
        self._clock = clock

    def register(self, event_id: str, caller: Caller) -> Ticket:
        """Register the caller for an event and return the new ticket.

        Raises:
            ForbiddenError: Caller is not a student, or the event is
                departmental and the caller belongs to another department.
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            RegistrationClosedError: Event is not published or already started.
            DuplicateRegistrationError: Caller already holds a ticket.
            SeatsExhaustedError: No seat left, including a lost race for the
                last one.
        """
        if not caller.is_student:
            raise ForbiddenError("Only students can register for events")

        eid = parse_event_id(event_id)
        event = self._events.get_event(eid)
        if event is None:
            raise EventNotFoundError(event_id)
        if event.status is not EventStatus.PUBLISHED:
            raise RegistrationClosedError()
        if event.starts_at <= self._clock():
            raise RegistrationClosedError("Registration closed for past events")
        if (
            event.event_type is EventType.DEPARTMENTAL
            and event.department != caller.department
        ):
            raise ForbiddenError(f"This event is only for students of {event.department}")
        if self._tickets.find_ticket(eid, caller.user_id) is not None:
            raise DuplicateRegistrationError()
        if event.registered_count >= event.seat_limit:
            raise SeatsExhaustedError()

        if not self._events.reserve_seat(eid):
            logger.info("Seat reservation for event %s lost to a concurrent registration", eid)
            raise SeatsExhaustedError()

        try:
            ticket = self._create_ticket(eid, caller.user_id)
        except Exception as exc:
            self._give_back_seat(eid)
            if isinstance(exc, StorageConflictError) and not isinstance(
                exc, TicketCodeCollisionError
            ):
                raise DuplicateRegistrationError() from exc
            raise

        logger.info(
            "Registered user %s for event %s with ticket %s",
            caller.user_id,
            eid,
            ticket.code,
        )
        return ticket

    def _create_ticket(self, event_id: EventId, user_id: UserId) -> Ticket:
        for _ in range(MAX_CODE_ATTEMPTS - 1):
            ticket = self._new_ticket(event_id, user_id)
            try:
                return self._tickets.add_ticket(ticket)
            except TicketCodeCollisionError:
                logger.warning("Ticket code %s already taken, regenerating", ticket.code)
        return self._tickets.add_ticket(self._new_ticket(event_id, user_id))

    def _new_ticket(self, event_id: EventId, user_id: UserId) -> Ticket:
        return Ticket(
            id=uuid.uuid4(),
            code=TicketCode.generate(),
            event_id=event_id,
            user_id=user_id,
            status=TicketStatus.UNUSED,
            used_at=None,
            created_at=self._clock(),
        )

    def _give_back_seat(self, event_id: EventId) -> None:
        try:
            released = self._events.release_seat(event_id)
        except Exception:
            logger.exception("Failed to release reserved seat for event %s", event_id)
            return
        if not released:
            logger.error("Reserved seat for event %s could not be released", event_id)
