"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import AdminRoleChange

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Main user representation."""

    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "phone",
            "account_type",
            "role",
            "is_admin",
            "is_active",
            "date_joined",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_admin(self, obj) -> bool:
        return obj.is_platform_admin()


class UserProfileSerializer(serializers.ModelSerializer):
    """Onboarding profile: display name and account type."""

    name = serializers.CharField(max_length=150, trim_whitespace=True)
    account_type = serializers.ChoiceField(choices=User.AccountType.choices)

    class Meta:
        model = User
        fields = ["name", "account_type"]

    def validate_name(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("Name is required.")
        return value.strip()

    def validate_account_type(self, value: str) -> str:
        user = self.instance
        if user is not None and user.account_type and user.account_type != value:
            raise serializers.ValidationError("The account type cannot be changed once chosen.")
        return value


class UserProfileEntrySerializer(serializers.ModelSerializer):
    """`(user id, profile)` pair used by the admin user listing."""

    profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "profile", "role", "date_joined"]

    def get_profile(self, obj):
        if not obj.has_profile:
            return None
        return {"name": obj.name, "account_type": obj.account_type or None}


class RoleAssignmentSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.Role.choices)


class BootstrapAdminSerializer(serializers.Serializer):
    token = serializers.CharField(trim_whitespace=True)


class AdminRoleChangeSerializer(serializers.ModelSerializer):
    user_email = serializers.ReadOnlyField(source="user.email")
    changed_by_id = serializers.ReadOnlyField(source="changed_by.id")

    class Meta:
        model = AdminRoleChange
        fields = ["id", "user", "user_email", "changed_by_id", "is_admin", "admin_count", "created_at"]
        read_only_fields = fields
