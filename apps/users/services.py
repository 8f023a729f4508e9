"""Domain services for platform roles."""

from __future__ import annotations

import logging
import secrets

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore

from .models import AdminRoleChange, CustomUser

logger = logging.getLogger(__name__)


class RoleChangeError(Exception):
    """Raised when an admin role change is not allowed."""


class LastAdminError(RoleChangeError):
    """Raised when a role change would leave the platform without admins."""


class SuperuserRoleError(RoleChangeError):
    """Raised when revoking admin from a Django superuser."""


def admin_count() -> int:
    return CustomUser.objects.admins().count()


def can_revoke_admin() -> bool:
    """An admin can only be revoked while another admin remains."""
    return admin_count() > 1


@transaction.atomic
def set_admin_role(user: CustomUser, make_admin: bool, *, changed_by: CustomUser | None = None) -> AdminRoleChange:
    """Grant or revoke the admin role and record the change."""

    # Lock the admin rows so two concurrent revocations cannot both pass the check
    list(CustomUser.objects.admins().select_for_update().values_list("pk", flat=True))

    if not make_admin and user.has_admin_role() and not can_revoke_admin():
        raise LastAdminError("Cannot revoke the last remaining admin.")
    if not make_admin and user.is_superuser:
        raise SuperuserRoleError("Superusers cannot be revoked through the API.")

    user.role = CustomUser.Role.ADMIN if make_admin else CustomUser.Role.USER
    user.save(update_fields=["role", "updated_at"])

    change = AdminRoleChange.objects.create(
        user=user,
        changed_by=changed_by,
        is_admin=user.has_admin_role(),
        admin_count=admin_count(),
    )
    logger.info(
        "Admin role %s for user %s by %s (admins now: %s)",
        "granted" if make_admin else "revoked",
        user.pk,
        getattr(changed_by, "pk", None),
        change.admin_count,
    )
    return change


def bootstrap_admin(user: CustomUser, token: str) -> bool:
    """Make ``user`` the first admin when the bootstrap token matches."""

    expected = getattr(settings, "ADMIN_BOOTSTRAP_TOKEN", "")
    if not expected or not token or not secrets.compare_digest(str(token), str(expected)):
        logger.warning("Rejected admin bootstrap attempt by user %s", user.pk)
        return False
    if admin_count() > 0:
        return False
    set_admin_role(user, True, changed_by=user)
    return True
