"""Entry verification: at-most-once admission per ticket.

The unused -> used transition is a conditional update, so of any number of
concurrent scans exactly one wins. Losers re-read the ticket and report
``AlreadyUsed`` with the winner's timestamp. The attendance ledger's
(event, user) uniqueness is the backstop should two transitions ever both
appear to win.
"""

import logging
import uuid
from dataclasses import replace

from django.utils import timezone

from ticketing.domain import (
    Admission,
    AttendanceRecord,
    Caller,
    EventId,
    InsertOutcome,
    TicketStatus,
)
from ticketing.domain.errors import (
    AlreadyUsedError,
    ForbiddenError,
    TicketCancelledError,
    TicketNotFoundError,
    WrongEventError,
)
from ticketing.services.lookups import Clock, parse_ticket_code
from ticketing.stores.interfaces import AttendanceLedger, EventStore, TicketStore

logger = logging.getLogger(__name__)


class VerificationService:
    """Admits ticket holders at the door and records their attendance."""

    def __init__(
        self,
        events: EventStore,
        tickets: TicketStore,
        attendance: AttendanceLedger,
        clock: Clock = timezone.now,
    ) -> None:
        self._events = events
        self._tickets = tickets
        self._attendance = attendance
        self._clock = clock

    def verify(self, ticket_code: str, event_id: str, caller: Caller) -> Admission:
        """Verify a scanned ticket for an event and admit its holder.

        Raises:
            TicketNotFoundError: If the scanned code is not a known ticket.
            WrongEventError: If the ticket belongs to another event, including
                when the event_id is not an event identifier at all.
            ForbiddenError: If the caller does not organize the event.
            AlreadyUsedError: If the ticket was already admitted; carries the
                original entry time.
            TicketCancelledError: If the ticket was cancelled.
        """
        code = parse_ticket_code(ticket_code)
        ticket = self._tickets.get_ticket(code) if code else None
        if ticket is None:
            raise TicketNotFoundError(ticket_code)
        if not _is_same_event(ticket.event_id, event_id):
            raise WrongEventError()

        event = self._events.get_event(ticket.event_id)
        if event is None or not event.is_owned_by(caller.user_id):
            raise ForbiddenError("Not authorized to verify tickets for this event")

        if ticket.status is TicketStatus.USED:
            raise AlreadyUsedError(ticket.used_at)
        if ticket.status is TicketStatus.CANCELLED:
            raise TicketCancelledError()

        now = self._clock()
        if not self._tickets.mark_used(ticket.code, now):
            current = self._tickets.get_ticket(ticket.code)
            if current is not None and current.status is TicketStatus.CANCELLED:
                raise TicketCancelledError()
            logger.info("Concurrent scan of ticket %s already admitted it", ticket.code)
            raise AlreadyUsedError(current.used_at if current else None)

        record = AttendanceRecord(
            id=uuid.uuid4(),
            event_id=ticket.event_id,
            user_id=ticket.user_id,
            ticket_id=ticket.id,
            verified_by=caller.user_id,
            entry_time=now,
        )
        if self._attendance.record_once(record) is InsertOutcome.ALREADY_EXISTS:
            existing = self._attendance.get_record(ticket.event_id, ticket.user_id)
            logger.warning(
                "Attendance for user %s at event %s was already recorded",
                ticket.user_id,
                ticket.event_id,
            )
            # The ticket row now carries this scan's time. The ledger row is the
            # admission of record, so its entry time is the one reported.
            raise AlreadyUsedError(existing.entry_time if existing else now)

        logger.info(
            "Ticket %s admitted to event %s by %s", ticket.code, ticket.event_id, caller.user_id
        )
        return Admission(
            ticket=replace(ticket, status=TicketStatus.USED, used_at=now),
            attendance=record,
        )


def _is_same_event(ticket_event: EventId, event_id: str) -> bool:
    try:
        return EventId.from_string(event_id) == ticket_event
    except ValueError:
        return False
