"""Validation and downscaling of worker profile images."""

from __future__ import annotations

import logging
import uuid
from io import BytesIO

from django.conf import settings  # type: ignore
from django.core.files.base import ContentFile  # type: ignore
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp"}


class InvalidImageError(ValueError):
    """Raised when an uploaded file is not an acceptable profile image."""


def _max_size() -> int:
    return getattr(settings, "WORKER_IMAGE_MAX_SIZE", 5 * 1024 * 1024)


def _max_dimension() -> int:
    return getattr(settings, "WORKER_IMAGE_MAX_DIMENSION", 1024)


def _validate_image(file_obj) -> Image.Image:
    size = getattr(file_obj, "size", None)
    max_size = _max_size()
    if size is not None and size > max_size:
        raise InvalidImageError(f"File is too large. Maximum is {max_size / 1024 / 1024:.1f} MB.")

    try:
        file_obj.seek(0)
        img = Image.open(file_obj)
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise InvalidImageError("The file is not a valid image.") from exc

    if img.format not in ALLOWED_FORMATS:
        raise InvalidImageError(f"Unsupported image format: {img.format}. Use JPEG, PNG or WEBP.")
    return img


def _optimize_image(img: Image.Image, quality: int = 85) -> tuple[BytesIO, str]:
    """Downscale to the maximum side and re-encode in the source format."""

    image_format = img.format
    max_dimension = _max_dimension()
    if img.width > max_dimension or img.height > max_dimension:
        img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

    out = BytesIO()
    if image_format == "JPEG":
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(out, format="JPEG", quality=quality, optimize=True)
    elif image_format == "WEBP":
        img.save(out, format="WEBP", quality=quality, method=6)
    else:
        img.save(out, format="PNG", optimize=True)
    out.seek(0)
    return out, ALLOWED_FORMATS[image_format]


def process_profile_image(file_obj) -> ContentFile:
    """Validate an upload and return the optimized file ready for storage."""

    img = _validate_image(file_obj)
    original_size = img.size
    optimized, ext = _optimize_image(img)
    logger.info("Processed profile image %sx%s -> %sx%s", *original_size, *img.size)
    return ContentFile(optimized.getvalue(), name=f"{uuid.uuid4().hex[:12]}.{ext}")
