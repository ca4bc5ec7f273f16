from django.contrib import admin

from ticketing.models import Attendance, Certificate, Event, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    fields = ["code", "user_id", "status", "used_at"]
    readonly_fields = fields
    can_delete = False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "venue", "starts_at", "status", "registered_count", "seat_limit"]
    list_filter = ["status", "event_type", "department"]
    search_fields = ["title", "venue"]
    readonly_fields = ["registered_count"]
    inlines = [TicketInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["code", "event", "user_id", "status", "used_at"]
    list_filter = ["status", "event"]
    search_fields = ["code"]
    readonly_fields = ["code", "event", "user_id", "status", "used_at"]


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ["event", "user_id", "ticket", "verified_by", "entry_time"]
    list_filter = ["event"]

    def has_change_permission(self, request, obj=None) -> bool:
        return False


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ["code", "event", "user_id", "issued_at"]
    list_filter = ["event"]
    search_fields = ["code"]

    def has_change_permission(self, request, obj=None) -> bool:
        return False
