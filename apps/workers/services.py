"""Domain services for worker profiles."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore

from .images import process_profile_image
from .models import WorkerProfile

logger = logging.getLogger(__name__)


class WorkerProfileExistsError(Exception):
    """Raised when a worker tries to create a second profile."""


def has_active_profile(user) -> bool:
    return WorkerProfile.objects.active().filter(owner=user).exists()


@transaction.atomic
def create_profile(owner, **fields) -> WorkerProfile:
    if WorkerProfile.objects.select_for_update().filter(owner=owner).exists():
        raise WorkerProfileExistsError("A worker profile already exists for this account.")
    profile = WorkerProfile.objects.create(owner=owner, **fields)
    logger.info("Created worker profile %s for user %s", profile.pk, owner.pk)
    return profile


def set_profile_image(profile: WorkerProfile, file_obj) -> WorkerProfile:
    """Store a new profile image, replacing the previous file."""

    content = process_profile_image(file_obj)
    if profile.profile_image:
        profile.profile_image.delete(save=False)
    profile.profile_image.save(content.name, content, save=False)
    profile.save(update_fields=["profile_image", "updated_at"])
    logger.info("Updated profile image for worker %s", profile.owner_id)
    return profile


def remove_profile_image(profile: WorkerProfile) -> bool:
    if not profile.profile_image:
        return False
    profile.profile_image.delete(save=False)
    profile.save(update_fields=["profile_image", "updated_at"])
    logger.info("Removed profile image for worker %s", profile.owner_id)
    return True
