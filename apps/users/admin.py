"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import AdminRoleChange, CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Profile"), {"fields": ("name", "account_type", "phone")}),
        (_("Platform role"), {"fields": ("role",)}),
        (_("Security"), {"fields": ("failed_login_attempts", "locked_until")}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "name", "account_type", "role"),
            },
        ),
    )
    list_display = ("email", "name", "account_type", "role", "is_active", "is_locked", "date_joined")
    list_filter = ("account_type", "role", "is_active", "is_staff")
    search_fields = ("email", "name", "phone")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined")


@admin.register(AdminRoleChange)
class AdminRoleChangeAdmin(admin.ModelAdmin):
    list_display = ("user", "is_admin", "admin_count", "changed_by", "created_at")
    list_filter = ("is_admin",)
    search_fields = ("user__email",)
    readonly_fields = ("user", "changed_by", "is_admin", "admin_count", "created_at")
