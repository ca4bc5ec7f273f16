"""Ticket reads and organizer cancellation."""

import logging
from dataclasses import replace

from ticketing.domain import Caller, EventId, Ticket, TicketStatus
from ticketing.domain.errors import (
    ForbiddenError,
    InvalidTransitionError,
    TicketNotFoundError,
)
from ticketing.domain.states import can_transition_ticket
from ticketing.services.lookups import parse_ticket_code
from ticketing.stores.interfaces import EventStore, TicketStore

logger = logging.getLogger(__name__)


class TicketService:
    """Service for ticket lookups and the unused -> cancelled transition."""

    def __init__(self, events: EventStore, tickets: TicketStore) -> None:
        self._events = events
        self._tickets = tickets

    def list_my_tickets(self, caller: Caller) -> list[Ticket]:
        return self._tickets.list_tickets_for_user(caller.user_id)

    def get_ticket(self, code: str, caller: Caller) -> Ticket:
        """Return a ticket visible to its holder or to its event's organizer.

        Raises:
            TicketNotFoundError: If the code does not resolve to a ticket.
            ForbiddenError: If the caller may not see the ticket.
        """
        ticket = self._load(code)
        if ticket.user_id != caller.user_id and not self._organizes(ticket, caller):
            raise ForbiddenError("Not authorized to view this ticket")
        return ticket

    def cancel_ticket(self, code: str, caller: Caller) -> Ticket:
        """Cancel an unused ticket on behalf of the event's organizer.

        Cancelling an already cancelled ticket succeeds and changes nothing.

        Raises:
            TicketNotFoundError: If the code does not resolve to a ticket.
            ForbiddenError: If the caller does not organize the ticket's event.
            InvalidTransitionError: If the ticket has already been used.
        """
        ticket = self._load(code)
        if not self._organizes(ticket, caller):
            raise ForbiddenError("Not authorized to cancel tickets for this event")

        if ticket.status is TicketStatus.CANCELLED:
            return ticket
        if not can_transition_ticket(ticket.status, TicketStatus.CANCELLED):
            raise InvalidTransitionError(ticket.status.value, TicketStatus.CANCELLED.value)

        if not self._tickets.cancel(ticket.code):
            # Lost a race with a scan or another cancel; judge the fresh state.
            current = self._tickets.get_ticket(ticket.code)
            if current is None:
                raise TicketNotFoundError(code)
            if current.status is TicketStatus.CANCELLED:
                return current
            raise InvalidTransitionError(current.status.value, TicketStatus.CANCELLED.value)

        self._release_seat(ticket.event_id)
        logger.info("Ticket %s cancelled by %s", ticket.code, caller.user_id)
        return replace(ticket, status=TicketStatus.CANCELLED)

    def _load(self, code: str) -> Ticket:
        parsed = parse_ticket_code(code)
        ticket = self._tickets.get_ticket(parsed) if parsed else None
        if ticket is None:
            raise TicketNotFoundError(code)
        return ticket

    def _organizes(self, ticket: Ticket, caller: Caller) -> bool:
        event = self._events.get_event(ticket.event_id)
        return event is not None and event.is_owned_by(caller.user_id)

    def _release_seat(self, event_id: EventId) -> None:
        # Best effort: a missed decrement only under-reports availability.
        try:
            if not self._events.release_seat(event_id):
                logger.warning("Registered count for event %s already at zero", event_id)
        except Exception:
            logger.exception("Error decrementing registered count for event %s", event_id)
