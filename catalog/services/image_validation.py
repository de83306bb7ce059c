"""Validation of uploaded product images."""

from typing import Optional

from catalog.config.configuration import (
    DEFAULT_ALLOWED_CONTENT_TYPES,
    DEFAULT_MAX_FILE_SIZE_BYTES,
    ImageConfig,
)
from catalog.errors import ValidationError
from catalog.models import ImageFile

DEFAULT_IMAGE_CONFIG = ImageConfig(
    allowed_content_types=DEFAULT_ALLOWED_CONTENT_TYPES,
    max_file_size_bytes=DEFAULT_MAX_FILE_SIZE_BYTES,
    width=800,
    height=600,
)


def validate_image_file(image: Optional[ImageFile], settings: ImageConfig = DEFAULT_IMAGE_CONFIG) -> ImageFile:
    """
    Check an uploaded image before it is sent to the media service.

    Args:
        image: The uploaded file, or None when the client sent none.
        settings: Allowed content types and maximum size.

    Returns:
        The same image, for chaining.

    Raises:
        ValidationError: If the file is missing or empty, has a disallowed
            content type, or is larger than the configured maximum.
    """
    if image is None or image.size == 0:
        raise ValidationError("File is required")

    content_type = (image.content_type or "").lower()
    if content_type not in settings.allowed_content_types:
        raise ValidationError("Only image files (JPEG, PNG, GIF) are allowed")

    if image.size > settings.max_file_size_bytes:
        limit_mb = settings.max_file_size_bytes / (1024 * 1024)
        raise ValidationError(f"File size must be less than {limit_mb:g}MB")

    return image
