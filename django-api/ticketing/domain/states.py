"""Lifecycle states and their transition tables.

Every legal status change for tickets and events is listed here; services ask
these tables instead of comparing status fields ad hoc.
"""

from enum import Enum


class TicketStatus(str, Enum):
    UNUSED = "unused"
    USED = "used"
    CANCELLED = "cancelled"


class EventStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventType(str, Enum):
    PUBLIC = "public"
    DEPARTMENTAL = "departmental"


class Role(str, Enum):
    STUDENT = "student"
    ORGANIZER = "organizer"


TICKET_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.UNUSED: frozenset({TicketStatus.USED, TicketStatus.CANCELLED}),
    TicketStatus.USED: frozenset(),
    TicketStatus.CANCELLED: frozenset(),
}

EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.DRAFT: frozenset({EventStatus.PUBLISHED, EventStatus.CANCELLED}),
    EventStatus.PUBLISHED: frozenset(
        {EventStatus.ONGOING, EventStatus.COMPLETED, EventStatus.CANCELLED}
    ),
    EventStatus.ONGOING: frozenset({EventStatus.COMPLETED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}


def can_transition_ticket(current: TicketStatus, target: TicketStatus) -> bool:
    return target in TICKET_TRANSITIONS[current]


def can_transition_event(current: EventStatus, target: EventStatus) -> bool:
    return target in EVENT_TRANSITIONS[current]
