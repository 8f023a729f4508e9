"""Serializers for subscription payments."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import SubscriptionPayment


class ShoppingItemSerializer(serializers.Serializer):
    product_name = serializers.CharField(max_length=200)
    product_description = serializers.CharField(max_length=500, allow_blank=True, default="")
    currency = serializers.CharField(min_length=3, max_length=3)
    price_in_cents = serializers.IntegerField(min_value=0)
    quantity = serializers.IntegerField(min_value=1)

    def validate_currency(self, value: str) -> str:
        return value.lower()


class CheckoutSessionSerializer(serializers.Serializer):
    items = ShoppingItemSerializer(many=True, allow_empty=False, required=False)
    success_url = serializers.URLField()
    cancel_url = serializers.URLField()


class ConfirmPaymentSerializer(serializers.Serializer):
    session_id = serializers.CharField(max_length=255)


class StripeConfigurationSerializer(serializers.Serializer):
    secret_key = serializers.CharField(max_length=255, trim_whitespace=True)
    allowed_countries = serializers.ListField(
        child=serializers.CharField(min_length=2, max_length=2),
        allow_empty=True,
        default=list,
    )


class SubscriptionPaymentSerializer(serializers.ModelSerializer):
    user_email = serializers.ReadOnlyField(source="user.email")

    class Meta:
        model = SubscriptionPayment
        fields = [
            "user",
            "user_email",
            "status",
            "session_id",
            "amount_cents",
            "currency",
            "created_at",
            "completed_at",
        ]
        read_only_fields = fields
