"""Admin registration for worker profiles."""

from __future__ import annotations

from django.contrib import admin

from .models import WorkerProfile


@admin.register(WorkerProfile)
class WorkerProfileAdmin(admin.ModelAdmin):
    list_display = ("display_name", "owner", "category", "service_area", "hourly_rate", "is_active", "created_at")
    list_filter = ("category", "is_active")
    search_fields = ("display_name", "owner__email", "service_area")
    readonly_fields = ("created_at", "updated_at")
