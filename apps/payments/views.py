"""API views for the subscription paywall and Stripe Checkout."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import APIException, ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.administration.services import configure_stripe, get_app_settings
from apps.users.permissions import IsPlatformAdmin

from . import services, stripe_service
from .serializers import (
    CheckoutSessionSerializer,
    ConfirmPaymentSerializer,
    StripeConfigurationSerializer,
    SubscriptionPaymentSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class ServiceUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Payments are temporarily unavailable."
    default_code = "service_unavailable"


class PaymentGatewayError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "The payment provider could not process the request."
    default_code = "payment_gateway_error"


class PaymentViewSet(viewsets.ViewSet):
    """Subscription payments.

    Callers open a checkout session, get redirected to Stripe and confirm the
    session on return. Pending and housekeeping endpoints are admin-only.
    """

    admin_actions = {
        "stripe_config",
        "user_status",
        "pending",
        "pending_count",
        "clear_expired",
        "force_check",
    }

    def get_permissions(self):  # type: ignore
        if self.action in self.admin_actions:
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        return [permissions.IsAuthenticated()]

    @action(detail=False, methods=["get"], url_path="stripe/configured")
    def stripe_configured(self, request):
        return Response({"configured": stripe_service.is_configured()})

    @action(detail=False, methods=["put"], url_path="stripe/config")
    def stripe_config(self, request):
        serializer = StripeConfigurationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        configure_stripe(
            serializer.validated_data["secret_key"],
            serializer.validated_data["allowed_countries"],
        )
        return Response({"configured": stripe_service.is_configured()})

    @action(detail=False, methods=["post"])
    def checkout(self, request):
        """Opens a checkout session; items default to the subscription fee.

        The success URL receives `?session_id={CHECKOUT_SESSION_ID}`.
        """
        serializer = CheckoutSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        items = data.get("items") or [services.subscription_item()]

        try:
            session = services.start_checkout(request.user, items, data["success_url"], data["cancel_url"])
        except services.CheckoutValidationError as exc:
            raise ValidationError({"items": [str(exc)]})
        except stripe_service.StripeNotConfiguredError as exc:
            raise ServiceUnavailable(str(exc))
        except stripe_service.StripePaymentError as exc:
            raise PaymentGatewayError(str(exc))
        return Response(session, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path=r"sessions/(?P<session_id>[^/]+)/status")
    def session_status(self, request, session_id=None):
        if not stripe_service.is_configured():
            raise ServiceUnavailable("Stripe is not configured.")
        return Response(services.session_status(session_id))

    @action(detail=False, methods=["post"])
    def confirm(self, request):
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            services.confirm_payment(request.user, serializer.validated_data["session_id"])
        except services.PaymentVerificationError as exc:
            raise ValidationError({"session_id": [str(exc)]})
        except stripe_service.StripeNotConfiguredError as exc:
            raise ServiceUnavailable(str(exc))
        except stripe_service.StripePaymentError as exc:
            raise PaymentGatewayError(str(exc))
        return Response({"confirmed": True})

    @action(detail=False, methods=["get"])
    def subscription(self, request):
        """Whether the caller may use the platform, and why."""
        user = request.user
        payment = services.get_payment(user)
        return Response(
            {
                "active": services.has_active_subscription(user),
                "paid": bool(payment and payment.is_completed),
                "grace_period_ends_at": services.grace_period_ends_at(user),
                "subscription_fee_cents": get_app_settings().subscription_fee_cents,
                "payment": SubscriptionPaymentSerializer(payment).data if payment else None,
            }
        )

    @action(detail=False, methods=["get"], url_path=r"users/(?P<user_id>\d+)/status")
    def user_status(self, request, user_id=None):
        user = get_object_or_404(User, pk=user_id)
        payment = services.get_payment(user)
        return Response(SubscriptionPaymentSerializer(payment).data if payment else None)

    @action(detail=False, methods=["get"])
    def pending(self, request):
        payments = services.pending_payments()
        return Response(SubscriptionPaymentSerializer(payments, many=True).data)

    @action(detail=False, methods=["get"], url_path="pending/count")
    def pending_count(self, request):
        return Response({"count": services.pending_payments().count()})

    @action(detail=False, methods=["post"], url_path="maintenance/clear-expired")
    def clear_expired(self, request):
        updates = services.clear_expired_pending()
        logger.info("Admin %s cleared %s expired pending payments", request.user.pk, len(updates))
        return Response(updates)

    @action(detail=False, methods=["post"], url_path="maintenance/force-check")
    def force_check(self, request):
        return Response(services.force_check_pending())
