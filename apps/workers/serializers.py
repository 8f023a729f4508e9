"""Serializers for worker profiles."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from apps.users.models import PHONE_VALIDATOR, normalize_phone

from .models import DEFAULT_OTHER_CATEGORY, WorkerProfile


def build_image_url(profile: WorkerProfile, request) -> str | None:
    if not profile.profile_image:
        return None
    url = profile.profile_image.url
    return request.build_absolute_uri(url) if request is not None else url


class WorkerProfileSerializer(serializers.ModelSerializer):
    """Read representation; `worker` is the owner's user id."""

    worker = serializers.ReadOnlyField(source="owner_id")
    category_label = serializers.ReadOnlyField()
    profile_image_url = serializers.SerializerMethodField()

    class Meta:
        model = WorkerProfile
        fields = [
            "worker",
            "display_name",
            "category",
            "other_category",
            "category_label",
            "description",
            "service_area",
            "hourly_rate",
            "phone_number",
            "is_active",
            "profile_image_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_profile_image_url(self, obj: WorkerProfile) -> str | None:
        return build_image_url(obj, self.context.get("request"))


class WorkerProfileWriteSerializer(serializers.ModelSerializer):
    hourly_rate = serializers.IntegerField(min_value=0)

    class Meta:
        model = WorkerProfile
        fields = [
            "display_name",
            "category",
            "other_category",
            "description",
            "service_area",
            "hourly_rate",
            "phone_number",
            "is_active",
        ]

    def validate_phone_number(self, value: str) -> str:
        value = normalize_phone(value)
        PHONE_VALIDATOR(value)
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        for field in ("display_name", "description", "service_area"):
            if field in attrs:
                attrs[field] = attrs[field].strip()
                if not attrs[field]:
                    raise serializers.ValidationError({field: "This field may not be blank."})

        category = attrs.get("category", getattr(self.instance, "category", None))
        if category == WorkerProfile.Category.OTHER:
            other = attrs.get("other_category", getattr(self.instance, "other_category", "")).strip()
            attrs["other_category"] = other or DEFAULT_OTHER_CATEGORY
        elif "category" in attrs:
            attrs["other_category"] = ""
        return attrs


class ProfileImageSerializer(serializers.Serializer):
    image = serializers.FileField()
