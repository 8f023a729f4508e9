"""Admin registration for application settings."""

from __future__ import annotations

from django.contrib import admin

from .models import AdminCredentials, AdminSession, AppSettings


@admin.register(AppSettings)
class AppSettingsAdmin(admin.ModelAdmin):
    list_display = ("app_name", "maintenance_mode", "subscription_fee_cents", "updated_at")
    exclude = ("stripe_secret_key",)

    def has_add_permission(self, request):  # type: ignore
        return not AppSettings.objects.exists()


@admin.register(AdminCredentials)
class AdminCredentialsAdmin(admin.ModelAdmin):
    list_display = ("username", "recovery_phone", "updated_at")
    readonly_fields = ("password", "updated_at")


@admin.register(AdminSession)
class AdminSessionAdmin(admin.ModelAdmin):
    list_display = ("user", "created_at")
    search_fields = ("user__email",)
