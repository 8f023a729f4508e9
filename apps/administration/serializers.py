"""Serializers for application settings and admin sign-in."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.models import PHONE_VALIDATOR, normalize_phone

from .models import AppSettings
from .services import MIN_ADMIN_PASSWORD_LENGTH


class AppSettingsSerializer(serializers.ModelSerializer):
    """Full settings as seen by admins. The Stripe key is never returned."""

    stripe_configured = serializers.BooleanField(source="is_stripe_configured", read_only=True)

    class Meta:
        model = AppSettings
        fields = [
            "app_name",
            "maintenance_mode",
            "subscription_fee_cents",
            "subscription_currency",
            "admin_sign_in_title",
            "admin_sign_in_subtitle",
            "admin_sign_in_helper_text",
            "stripe_configured",
            "stripe_allowed_countries",
            "updated_at",
        ]
        read_only_fields = ["stripe_configured", "stripe_allowed_countries", "updated_at"]

    def validate_app_name(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("The application name cannot be empty.")
        return value.strip()

    def validate_subscription_currency(self, value: str) -> str:
        if len(value) != 3 or not value.isalpha():
            raise serializers.ValidationError("Use a three-letter ISO currency code.")
        return value.lower()


class PublicSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = AppSettings
        fields = ["app_name", "maintenance_mode", "subscription_fee_cents", "subscription_currency"]
        read_only_fields = fields


class SubscriptionFeeSerializer(serializers.Serializer):
    subscription_fee_cents = serializers.IntegerField(min_value=0)


class AdminSignInPageSerializer(serializers.ModelSerializer):
    class Meta:
        model = AppSettings
        fields = ["admin_sign_in_title", "admin_sign_in_subtitle", "admin_sign_in_helper_text"]

    def validate_admin_sign_in_title(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("The title cannot be empty.")
        return value.strip()


class AdminCredentialsSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150, trim_whitespace=True)
    password = serializers.CharField(
        write_only=True,
        min_length=MIN_ADMIN_PASSWORD_LENGTH,
        trim_whitespace=False,
        style={"input_type": "password"},
    )


class AdminSignInSerializer(serializers.Serializer):
    username = serializers.CharField(trim_whitespace=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class RecoveryPhoneSerializer(serializers.Serializer):
    recovery_phone = serializers.CharField(max_length=20)

    def validate_recovery_phone(self, value: str) -> str:
        phone = normalize_phone(value)
        PHONE_VALIDATOR(phone)
        return phone


class CredentialsResetSerializer(serializers.Serializer):
    phone = serializers.CharField(max_length=32)
    username = serializers.CharField(max_length=150, trim_whitespace=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
