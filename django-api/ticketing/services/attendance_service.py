"""Attendance reports for organizers and attendees."""

from ticketing.domain import AttendanceRecord, AttendanceStats, Caller
from ticketing.services.lookups import load_owned_event
from ticketing.stores.interfaces import AttendanceLedger, EventStore


class AttendanceService:
    def __init__(self, events: EventStore, attendance: AttendanceLedger) -> None:
        self._events = events
        self._attendance = attendance

    def list_for_event(self, event_id: str, caller: Caller) -> list[AttendanceRecord]:
        event = load_owned_event(
            self._events, event_id, caller, "Not authorized to view attendance for this event"
        )
        return self._attendance.list_for_event(event.id)

    def stats(self, event_id: str, caller: Caller) -> AttendanceStats:
        event = load_owned_event(self._events, event_id, caller)
        return AttendanceStats(
            total_registered=event.registered_count,
            total_attended=self._attendance.count_for_event(event.id),
            seats_available=event.seats_available,
        )

    def list_mine(self, caller: Caller) -> list[AttendanceRecord]:
        return self._attendance.list_for_user(caller.user_id)
