"""Integration tests for subscription payments and the paywall."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import patch

import stripe
from django.db import connection
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase, APITransactionTestCase

from apps.administration.models import AppSettings
from apps.payments.models import SubscriptionPayment
from apps.payments.tasks import clear_expired_pending_statuses, force_check_subscription_statuses
from apps.users.models import User

SESSION_CREATE = "apps.payments.stripe_service.stripe.checkout.Session.create"
SESSION_RETRIEVE = "apps.payments.stripe_service.stripe.checkout.Session.retrieve"


def _paid_session(session_id: str, user: User, payment_status: str = "paid") -> dict[str, object]:
    return {
        "id": session_id,
        "payment_status": payment_status,
        "amount_total": 999,
        "currency": "usd",
        "client_reference_id": str(user.pk),
    }


@override_settings(STRIPE_SECRET_KEY="sk_test_handyconnect")
class CheckoutAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="client@example.com",
            password="ClientPass123",
            account_type=User.AccountType.CLIENT,
        )
        self.client.force_authenticate(self.user)
        self.url = reverse("payment-checkout")
        self.redirect_urls = {
            "success_url": "https://app.example.com/payment-success",
            "cancel_url": "https://app.example.com/payment-failure",
        }

    @patch(SESSION_CREATE)
    def test_checkout_defaults_to_subscription_item(self, create) -> None:
        create.return_value = {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/cs_test_1"}

        response = self.client.post(self.url, self.redirect_urls, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data, {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/cs_test_1"})

        kwargs = create.call_args.kwargs
        self.assertEqual(kwargs["api_key"], "sk_test_handyconnect")
        self.assertEqual(
            kwargs["success_url"],
            "https://app.example.com/payment-success?session_id={CHECKOUT_SESSION_ID}",
        )
        self.assertEqual(kwargs["line_items"][0]["price_data"]["unit_amount"], 999)
        self.assertEqual(kwargs["line_items"][0]["price_data"]["product_data"]["name"], "HandyConnect Subscription")

        payment = SubscriptionPayment.objects.get(user=self.user)
        self.assertEqual(payment.status, SubscriptionPayment.Status.PENDING)
        self.assertEqual(payment.session_id, "cs_test_1")

    @patch(SESSION_CREATE)
    def test_total_must_cover_fee(self, create) -> None:
        payload = dict(
            self.redirect_urls,
            items=[
                {
                    "product_name": "Cheap",
                    "product_description": "",
                    "currency": "usd",
                    "price_in_cents": 100,
                    "quantity": 1,
                }
            ],
        )
        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        create.assert_not_called()

    def test_invalid_items_rejected(self) -> None:
        payload = dict(
            self.redirect_urls,
            items=[
                {
                    "product_name": "Sub",
                    "currency": "usd",
                    "price_in_cents": 999,
                    "quantity": 0,
                }
            ],
        )
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(STRIPE_SECRET_KEY="")
    def test_not_configured_returns_503(self) -> None:
        self.assertFalse(self.client.get(reverse("payment-stripe-configured")).data["configured"])
        response = self.client.post(self.url, self.redirect_urls, format="json")
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    @patch(SESSION_CREATE)
    def test_stripe_error_returns_502(self, create) -> None:
        create.side_effect = stripe.StripeError("card network down")
        response = self.client.post(self.url, self.redirect_urls, format="json")
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertFalse(SubscriptionPayment.objects.filter(user=self.user).exists())

    @patch(SESSION_RETRIEVE)
    def test_session_status(self, retrieve) -> None:
        retrieve.return_value = _paid_session("cs_test_2", self.user)
        response = self.client.get(reverse("payment-session-status", args=["cs_test_2"]))
        self.assertEqual(response.data["status"], "completed")
        self.assertEqual(response.data["user"], str(self.user.pk))

        retrieve.return_value = _paid_session("cs_test_2", self.user, payment_status="unpaid")
        response = self.client.get(reverse("payment-session-status", args=["cs_test_2"]))
        self.assertEqual(response.data["status"], "failed")
        self.assertIn("unpaid", response.data["error"])

    @patch(SESSION_RETRIEVE)
    def test_confirm_payment_is_idempotent(self, retrieve) -> None:
        SubscriptionPayment.objects.create(user=self.user, session_id="cs_test_3", amount_cents=999)
        retrieve.return_value = _paid_session("cs_test_3", self.user)
        url = reverse("payment-confirm")

        response = self.client.post(url, {"session_id": "cs_test_3"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"confirmed": True})

        response = self.client.post(url, {"session_id": "cs_test_3"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(retrieve.call_count, 1)

        payment = SubscriptionPayment.objects.get(user=self.user)
        self.assertTrue(payment.is_completed)
        self.assertIsNotNone(payment.completed_at)

    @patch(SESSION_RETRIEVE)
    def test_confirm_without_pending_row_records_payment(self, retrieve) -> None:
        retrieve.return_value = _paid_session("cs_test_5", self.user)

        response = self.client.post(reverse("payment-confirm"), {"session_id": "cs_test_5"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"confirmed": True})
        payment = SubscriptionPayment.objects.get(user=self.user)
        self.assertTrue(payment.is_completed)
        self.assertEqual(payment.session_id, "cs_test_5")
        self.assertEqual(payment.amount_cents, 999)
        self.assertIsNotNone(payment.completed_at)

    @patch(SESSION_RETRIEVE)
    def test_confirm_rejects_foreign_or_unpaid_session(self, retrieve) -> None:
        other = User.objects.create_user(email="other@example.com", password="OtherPass123")
        retrieve.return_value = _paid_session("cs_test_4", other)
        response = self.client.post(reverse("payment-confirm"), {"session_id": "cs_test_4"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        retrieve.return_value = _paid_session("cs_test_4", self.user, payment_status="unpaid")
        response = self.client.post(reverse("payment-confirm"), {"session_id": "cs_test_4"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(SubscriptionPayment.objects.filter(status="completed").exists())


class PaywallTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="late@example.com",
            password="LatePass123",
            account_type=User.AccountType.CLIENT,
        )
        self.user.date_joined = timezone.now() - timedelta(days=3)
        self.user.save(update_fields=["date_joined"])
        self.client.force_authenticate(self.user)

    def test_expired_grace_period_returns_402(self) -> None:
        response = self.client.get(reverse("worker-list"))
        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertEqual(response.data["code"], "payment_required")

        subscription = self.client.get(reverse("payment-subscription"))
        self.assertFalse(subscription.data["active"])

    def test_completed_payment_unlocks(self) -> None:
        SubscriptionPayment.objects.create(
            user=self.user,
            session_id="cs_paid",
            status=SubscriptionPayment.Status.COMPLETED,
            completed_at=timezone.now(),
        )
        response = self.client.get(reverse("worker-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_pending_payment_does_not_unlock(self) -> None:
        SubscriptionPayment.objects.create(user=self.user, session_id="cs_pending")
        response = self.client.get(reverse("booking-list"))
        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED)

    def test_new_user_inside_grace_period(self) -> None:
        newcomer = User.objects.create_user(
            email="fresh@example.com",
            password="FreshPass123",
            account_type=User.AccountType.CLIENT,
        )
        self.client.force_authenticate(newcomer)
        self.assertTrue(self.client.get(reverse("payment-subscription")).data["active"])


@override_settings(STRIPE_SECRET_KEY="sk_test_handyconnect")
class PaymentAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="admin@example.com", password="AdminPass123", role=User.Role.ADMIN)
        self.payer = User.objects.create_user(email="payer@example.com", password="PayerPass123")
        self.stale = User.objects.create_user(email="stale@example.com", password="StalePass123")
        SubscriptionPayment.objects.create(user=self.payer, session_id="cs_fresh")
        SubscriptionPayment.objects.create(
            user=self.stale,
            session_id="cs_stale",
            created_at=timezone.now() - timedelta(hours=25),
        )
        self.client.force_authenticate(self.admin)

    def test_pending_listing_requires_admin(self) -> None:
        response = self.client.get(reverse("payment-pending-count"))
        self.assertEqual(response.data, {"count": 2})
        self.assertEqual(len(self.client.get(reverse("payment-pending")).data), 2)

        self.client.force_authenticate(self.payer)
        self.assertEqual(self.client.get(reverse("payment-pending")).status_code, status.HTTP_403_FORBIDDEN)

    def test_user_status(self) -> None:
        response = self.client.get(reverse("payment-user-status", args=[self.payer.pk]))
        self.assertEqual(response.data["status"], "pending")

        response = self.client.get(reverse("payment-user-status", args=[self.admin.pk]))
        self.assertIsNone(response.data)

    def test_clear_expired_pending(self) -> None:
        response = self.client.post(reverse("payment-clear-expired"))
        self.assertEqual(
            response.data,
            [{"user": self.stale.pk, "previous_status": "pending", "updated_status": None}],
        )
        self.assertFalse(SubscriptionPayment.objects.filter(user=self.stale).exists())
        self.assertTrue(SubscriptionPayment.objects.filter(user=self.payer).exists())

    @patch(SESSION_RETRIEVE)
    def test_force_check_completes_paid_sessions(self, retrieve) -> None:
        def _lookup(session_id, api_key=None):
            user = self.payer if session_id == "cs_fresh" else self.stale
            return _paid_session(session_id, user, payment_status="paid" if user == self.payer else "unpaid")

        retrieve.side_effect = _lookup
        response = self.client.post(reverse("payment-force-check"))

        statuses = {item["user"]: item["status"] for item in response.data}
        self.assertEqual(statuses, {self.payer.pk: "completed", self.stale.pk: "pending"})

    def test_set_stripe_configuration(self) -> None:
        response = self.client.put(
            reverse("payment-stripe-config"),
            {"secret_key": "sk_live_other", "allowed_countries": ["us", "ca"]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        app_settings = AppSettings.load()
        self.assertEqual(app_settings.stripe_secret_key, "sk_live_other")
        self.assertEqual(app_settings.stripe_allowed_countries, ["US", "CA"])


@override_settings(STRIPE_SECRET_KEY="sk_test_handyconnect")
class PaymentTaskTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="task@example.com", password="TaskPass123")
        SubscriptionPayment.objects.create(
            user=self.user,
            session_id="cs_task",
            created_at=timezone.now() - timedelta(hours=30),
        )

    @patch(SESSION_RETRIEVE)
    def test_force_check_task(self, retrieve) -> None:
        retrieve.return_value = _paid_session("cs_task", self.user)
        result = force_check_subscription_statuses.delay().get()
        self.assertEqual(result, {"checked": 1, "completed": 1})

    def test_clear_expired_task(self) -> None:
        result = clear_expired_pending_statuses.delay().get()
        self.assertEqual(result, {"cleared": 1})


@override_settings(STRIPE_SECRET_KEY="sk_test_handyconnect")
class CheckoutTransactionTests(APITransactionTestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="outside@example.com",
            password="OutsidePass123",
            account_type=User.AccountType.CLIENT,
        )
        self.client.force_authenticate(self.user)

    @patch(SESSION_CREATE)
    def test_stripe_called_outside_database_transaction(self, create) -> None:
        seen_in_transaction = []

        def _create(**kwargs):
            seen_in_transaction.append(connection.in_atomic_block)
            return {"id": "cs_test_tx", "url": "https://checkout.stripe.com/c/cs_test_tx"}

        create.side_effect = _create
        response = self.client.post(
            reverse("payment-checkout"),
            {
                "success_url": "https://app.example.com/payment-success",
                "cancel_url": "https://app.example.com/payment-failure",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(seen_in_transaction, [False])
        self.assertEqual(SubscriptionPayment.objects.get(user=self.user).session_id, "cs_test_tx")
