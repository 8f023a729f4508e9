"""Serializers for authentication flows (register, login)."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR, normalize_phone


User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    phone = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(min_length=8, write_only=True)
    password_confirm = serializers.CharField(min_length=8, write_only=True)
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)

    def validate_phone(self, value: str) -> str:
        if not value:
            return value
        value = normalize_phone(value)
        PHONE_VALIDATOR(value)
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("password") != attrs.get("password_confirm"):
            raise serializers.ValidationError({"password_confirm": "Passwords do not match."})
        email = attrs.get("email")
        phone = attrs.get("phone")
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError({"email": "A user with this e-mail already exists."})
        if phone and User.objects.filter(phone=phone).exists():
            raise serializers.ValidationError({"phone": "A user with this phone already exists."})
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        password = validated_data.pop("password")
        validated_data.pop("password_confirm", None)
        if not validated_data.get("phone"):
            validated_data.pop("phone", None)
        return User.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    login = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        login = attrs.get("login", "")
        password = attrs.get("password", "")

        # Find user by email or phone
        try:
            if "@" in login:
                user = User.objects.get(email__iexact=login)
            else:
                user = User.objects.get(phone=normalize_phone(login))
        except User.DoesNotExist:
            raise serializers.ValidationError({"login": "Invalid login or password."})

        if user.is_locked:
            raise serializers.ValidationError(
                {"non_field_errors": ["Account temporarily locked. Try again later."]}
            )

        if not user.check_password(password):
            user.register_failed_attempt(threshold=5)
            raise serializers.ValidationError({"login": "Invalid login or password."})

        if not user.is_active:
            raise serializers.ValidationError({"login": "This account is disabled."})

        if user.failed_login_attempts or user.locked_until:
            user.unlock()

        attrs["user"] = user
        return attrs
