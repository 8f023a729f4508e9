"""Admin registration for subscription payments."""

from __future__ import annotations

from django.contrib import admin

from .models import SubscriptionPayment


@admin.register(SubscriptionPayment)
class SubscriptionPaymentAdmin(admin.ModelAdmin):
    list_display = ("user", "status", "amount_cents", "currency", "session_id", "created_at", "completed_at")
    list_filter = ("status", "currency")
    search_fields = ("user__email", "session_id")
    readonly_fields = ("session_id", "created_at", "completed_at", "updated_at")
