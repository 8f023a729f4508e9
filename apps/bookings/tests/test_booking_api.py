"""Integration tests for booking API endpoints."""

from __future__ import annotations

from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.users.models import User
from apps.workers.models import WorkerProfile


class BookingAPITestBase(APITestCase):
    def setUp(self) -> None:
        self.client_user = User.objects.create_user(
            email="client@example.com",
            password="ClientPass123",
            name="Cora Client",
            account_type=User.AccountType.CLIENT,
        )
        self.worker = User.objects.create_user(
            email="worker@example.com",
            password="WorkerPass123",
            name="Wes Worker",
            account_type=User.AccountType.WORKER,
        )
        WorkerProfile.objects.create(
            owner=self.worker,
            display_name="Wes the Plumber",
            category=WorkerProfile.Category.PLUMBING,
            description="Leaks and drains.",
            service_area="Springfield",
            hourly_rate=45,
            phone_number="+15550001111",
        )
        self.list_url = reverse("booking-list")

    def _payload(self, **overrides) -> dict[str, object]:
        payload = {
            "worker": self.worker.pk,
            "job_details": "Kitchen sink is leaking.",
            "date_time": "Monday, Feb 10, 2026 at 2:00 PM",
            "location": "742 Evergreen Terrace",
        }
        payload.update(overrides)
        return payload

    def _booking(self, status_value: str = Booking.Status.REQUESTED) -> Booking:
        return Booking.objects.create(
            client=self.client_user,
            worker=self.worker,
            job_details="Fix the faucet.",
            date_time="Tomorrow at 9",
            location="742 Evergreen Terrace",
            status=status_value,
        )

    def _set_status(self, booking: Booking, new_status: str):
        return self.client.post(reverse("booking-set-status", args=[booking.pk]), {"status": new_status}, format="json")


class BookingCreateAPITests(BookingAPITestBase):
    def test_client_can_request_booking(self) -> None:
        self.client.force_authenticate(self.client_user)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        booking = Booking.objects.get(pk=response.data["id"])
        self.assertEqual(booking.client, self.client_user)
        self.assertEqual(booking.status, Booking.Status.REQUESTED)
        self.assertEqual(response.data["worker_name"], "Wes the Plumber")

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, [self.worker.email])

    def test_worker_account_cannot_request(self) -> None:
        self.client.force_authenticate(self.worker)
        response = self.client.post(self.list_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_worker_without_active_profile_rejected(self) -> None:
        WorkerProfile.objects.filter(owner=self.worker).update(is_active=False)
        self.client.force_authenticate(self.client_user)

        response = self.client.post(self.list_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Booking.objects.count(), 0)

    def test_cannot_book_yourself(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.post(self.list_url, self._payload(worker=self.client_user.pk), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blank_fields_rejected(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.post(self.list_url, self._payload(location="   "), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class BookingStatusAPITests(BookingAPITestBase):
    def test_worker_accepts_then_completes(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.worker)

        with self.captureOnCommitCallbacks(execute=True):
            response = self._set_status(booking, Booking.Status.ACCEPTED)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.ACCEPTED)
        self.assertEqual(response.data["allowed_statuses"], [Booking.Status.COMPLETED])
        self.assertEqual(mail.outbox[-1].to, [self.client_user.email])

        response = self._set_status(booking, Booking.Status.COMPLETED)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.COMPLETED)

    def test_client_cancels_request(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.client_user)

        response = self._set_status(booking, Booking.Status.CANCELLED)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_invalid_transition_names_both_states(self) -> None:
        booking = self._booking(Booking.Status.DECLINED)
        self.client.force_authenticate(self.worker)

        response = self._set_status(booking, Booking.Status.ACCEPTED)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("declined", response.data["detail"])
        self.assertIn("accepted", response.data["detail"])

    def test_client_cannot_accept(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.client_user)

        response = self._set_status(booking, Booking.Status.ACCEPTED)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_reads_but_cannot_transition(self) -> None:
        booking = self._booking()
        admin = User.objects.create_user(email="admin@example.com", password="AdminPass123", role=User.Role.ADMIN)
        self.client.force_authenticate(admin)

        response = self.client.get(reverse("booking-detail", args=[booking.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self._set_status(booking, Booking.Status.ACCEPTED)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_outsider_cannot_read_or_transition(self) -> None:
        booking = self._booking()
        outsider = User.objects.create_user(
            email="outsider@example.com",
            password="OutsiderPass123",
            account_type=User.AccountType.CLIENT,
        )
        self.client.force_authenticate(outsider)

        self.assertEqual(
            self.client.get(reverse("booking-detail", args=[booking.pk])).status_code,
            status.HTTP_404_NOT_FOUND,
        )
        self.assertEqual(self._set_status(booking, Booking.Status.CANCELLED).status_code, status.HTTP_403_FORBIDDEN)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.REQUESTED)

    def test_status_change_on_missing_booking(self) -> None:
        self.client.force_authenticate(self.client_user)
        response = self.client.post(reverse("booking-set-status", args=[999999]), {"status": "cancelled"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class BookingQueryAPITests(BookingAPITestBase):
    def test_my_bookings_union(self) -> None:
        own = self._booking()
        other_client = User.objects.create_user(
            email="other@example.com",
            password="OtherPass123",
            account_type=User.AccountType.CLIENT,
        )
        Booking.objects.create(
            client=other_client,
            worker=self.worker,
            job_details="Unclog drain.",
            date_time="Friday",
            location="Elm Street",
        )

        self.client.force_authenticate(self.worker)
        response = self.client.get(self.list_url)
        self.assertEqual(response.data["count"], 2)

        self.client.force_authenticate(self.client_user)
        response = self.client.get(self.list_url)
        self.assertEqual([item["id"] for item in response.data["results"]], [own.pk])

    def test_by_status_scoped_to_caller(self) -> None:
        self._booking()
        accepted = self._booking(Booking.Status.ACCEPTED)
        self.client.force_authenticate(self.client_user)

        response = self.client.get(reverse("booking-by-status"), {"status": "accepted"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data["results"]], [accepted.pk])

        response = self.client.get(reverse("booking-by-status"), {"status": "lost"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_by_client_and_worker_permissions(self) -> None:
        self._booking()
        self.client.force_authenticate(self.client_user)

        response = self.client.get(reverse("booking-by-client", args=[self.client_user.pk]))
        self.assertEqual(response.data["count"], 1)

        response = self.client.get(reverse("booking-by-worker", args=[self.worker.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        admin = User.objects.create_user(email="admin@example.com", password="AdminPass123", role=User.Role.ADMIN)
        self.client.force_authenticate(admin)
        response = self.client.get(reverse("booking-by-worker", args=[self.worker.pk]))
        self.assertEqual(response.data["count"], 1)
