"""Identifier parsing and ownership checks shared by the services."""

from collections.abc import Callable
from datetime import datetime

from ticketing.domain import Caller, CertificateCode, Event, EventId, TicketCode
from ticketing.domain.errors import EventNotFoundError, ForbiddenError, InvalidIdError
from ticketing.stores.interfaces import EventStore

Clock = Callable[[], datetime]


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except ValueError:
        raise InvalidIdError("event") from None


def parse_ticket_code(code: str) -> TicketCode | None:
    """Return the code, or None when the scanned text cannot be a ticket."""
    try:
        return TicketCode.from_string(code)
    except (ValueError, AttributeError):
        return None


def parse_certificate_code(code: str) -> CertificateCode | None:
    try:
        return CertificateCode.from_string(code)
    except (ValueError, AttributeError):
        return None


def load_event(store: EventStore, event_id: str) -> Event:
    """Return an event by ID.

    Raises:
        InvalidIdError: If the event_id is not a valid UUID.
        EventNotFoundError: If the event does not exist.
    """
    event = store.get_event(parse_event_id(event_id))
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def load_owned_event(
    store: EventStore, event_id: str, caller: Caller, message: str = "Not authorized"
) -> Event:
    """Return an event the caller organizes, else raise ForbiddenError."""
    event = load_event(store, event_id)
    if not event.is_owned_by(caller.user_id):
        raise ForbiddenError(message)
    return event
