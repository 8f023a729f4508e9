"""Serializers for the booking domain."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import Booking
from .services import allowed_next_statuses

User = get_user_model()


class BookingSerializer(serializers.ModelSerializer):
    client_name = serializers.SerializerMethodField()
    worker_name = serializers.SerializerMethodField()
    allowed_statuses = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "client",
            "client_name",
            "worker",
            "worker_name",
            "job_details",
            "date_time",
            "location",
            "status",
            "status_changed_at",
            "allowed_statuses",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_client_name(self, obj: Booking) -> str:
        return obj.client.name or obj.client.email

    def get_worker_name(self, obj: Booking) -> str:
        profile = getattr(obj.worker, "worker_profile", None)
        if profile is not None:
            return profile.display_name
        return obj.worker.name or obj.worker.email

    def get_allowed_statuses(self, obj: Booking) -> list[str]:
        request = self.context.get("request")
        if request is None:
            return []
        return allowed_next_statuses(obj, request.user)


class BookingCreateSerializer(serializers.Serializer):
    """Booking request made by a client."""

    worker = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))
    job_details = serializers.CharField()
    date_time = serializers.CharField(max_length=100)
    location = serializers.CharField(max_length=255)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        for field in ("job_details", "date_time", "location"):
            if not attrs[field].strip():
                raise serializers.ValidationError({field: "This field may not be blank."})
        return attrs


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices)
