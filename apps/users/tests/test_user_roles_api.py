"""API tests for onboarding profiles, admin roles and the user console."""

from __future__ import annotations

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.administration.models import AdminSession
from apps.users.models import AdminRoleChange, User


class UserProfileAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="new@example.com", password="StrongPass123")
        self.client.force_authenticate(self.user)
        self.url = reverse("user-my-profile")

    def test_profile_is_null_before_onboarding(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data)

    def test_save_profile_sets_account_type(self) -> None:
        response = self.client.put(self.url, {"name": "  Pat  ", "account_type": "worker"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"name": "Pat", "account_type": "worker"})

        self.user.refresh_from_db()
        self.assertTrue(self.user.is_worker())

    def test_account_type_cannot_change(self) -> None:
        self.client.put(self.url, {"name": "Pat", "account_type": "worker"}, format="json")

        response = self.client.put(self.url, {"name": "Pat", "account_type": "client"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("account_type", response.data)

        # Renaming with the same type is fine
        response = self.client.put(self.url, {"name": "Patricia", "account_type": "worker"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_blank_name_rejected(self) -> None:
        response = self.client.put(self.url, {"name": "   ", "account_type": "client"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_public_profile_of_other_user(self) -> None:
        other = User.objects.create_user(
            email="other@example.com",
            password="StrongPass123",
            name="Olive",
            account_type=User.AccountType.CLIENT,
        )

        response = self.client.get(reverse("user-profile", args=[other.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"name": "Olive", "account_type": "client"})

    def test_anonymous_cannot_read_profile(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AdminRoleAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="StrongPass123",
            role=User.Role.ADMIN,
        )
        self.user = User.objects.create_user(email="user@example.com", password="StrongPass123")

    def test_my_role_reports_admin_count(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("user-my-role"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["is_admin"])
        self.assertEqual(response.data["admin_count"], 1)
        self.assertFalse(response.data["can_revoke_admin"])

    def test_admin_session_counts_as_admin(self) -> None:
        AdminSession.objects.create(user=self.user)
        self.client.force_authenticate(self.user)

        response = self.client.get(reverse("user-my-role"))
        self.assertTrue(response.data["is_admin"])
        self.assertEqual(response.data["role"], User.Role.ADMIN)

    def test_list_requires_admin(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)

    def test_grant_and_revoke_admin(self) -> None:
        self.client.force_authenticate(self.admin)
        url = reverse("user-set-role", args=[self.user.pk])

        response = self.client.post(url, {"role": "admin"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["is_admin"])
        self.assertEqual(response.data["admin_count"], 2)

        response = self.client.post(url, {"role": "user"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["admin_count"], 1)
        self.assertEqual(AdminRoleChange.objects.filter(user=self.user).count(), 2)

        log = self.client.get(reverse("user-role-changes"))
        self.assertEqual(log.status_code, status.HTTP_200_OK)
        self.assertFalse(log.data["results"][0]["is_admin"])

    def test_last_admin_cannot_be_revoked(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("user-set-role", args=[self.admin.pk]), {"role": "user"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.has_admin_role())

    def test_superuser_cannot_be_revoked(self) -> None:
        superuser = User.objects.create_superuser(email="root@example.com", password="RootPass123")
        self.client.force_authenticate(self.admin)

        response = self.client.post(reverse("user-set-role", args=[superuser.pk]), {"role": "user"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        superuser.refresh_from_db()
        self.assertEqual(superuser.role, User.Role.ADMIN)
        self.assertFalse(AdminRoleChange.objects.filter(user=superuser).exists())

    def test_search_by_email_and_id(self) -> None:
        self.client.force_authenticate(self.admin)
        url = reverse("user-search")

        response = self.client.get(url, {"q": "USER@example.com"})
        self.assertEqual(response.data["id"], self.user.pk)

        response = self.client.get(url, {"q": str(self.user.pk)})
        self.assertEqual(response.data["email"], self.user.email)

        response = self.client.get(url, {"q": "missing@example.com"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data)

        response = self.client.get(url, {"q": "not-an-id"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


@override_settings(ADMIN_BOOTSTRAP_TOKEN="bootstrap-secret")
class BootstrapAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="first@example.com", password="StrongPass123")
        self.client.force_authenticate(self.user)
        self.url = reverse("user-claim-admin")

    def test_wrong_token_is_rejected(self) -> None:
        response = self.client.post(self.url, {"token": "guess"}, format="json")
        self.assertEqual(response.data, {"granted": False})
        self.user.refresh_from_db()
        self.assertFalse(self.user.has_admin_role())

    def test_first_user_with_token_becomes_admin(self) -> None:
        response = self.client.post(self.url, {"token": "bootstrap-secret"}, format="json")
        self.assertEqual(response.data, {"granted": True})
        self.user.refresh_from_db()
        self.assertTrue(self.user.has_admin_role())

    def test_token_useless_once_an_admin_exists(self) -> None:
        User.objects.create_user(email="boss@example.com", password="StrongPass123", role=User.Role.ADMIN)

        response = self.client.post(self.url, {"token": "bootstrap-secret"}, format="json")
        self.assertEqual(response.data, {"granted": False})
