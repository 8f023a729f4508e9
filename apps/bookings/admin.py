"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "client",
        "worker",
        "status",
        "date_time",
        "location",
        "status_changed_at",
        "created_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("client__email", "worker__email", "location", "job_details")
    readonly_fields = ("status_changed_at", "created_at", "updated_at")
