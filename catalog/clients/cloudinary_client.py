"""Cloudinary client for product image storage."""

import io
import logging
from typing import Any
from urllib.parse import urlsplit

import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError

from catalog.config.configuration import get_config
from catalog.errors import DeleteError, UploadError

logger = logging.getLogger(__name__)

DELIVERY_HOST = "res.cloudinary.com"


class CloudinaryClient:
    """Uploads and deletes product images on Cloudinary.

    Credentials are passed on every call instead of through the SDK's global
    configuration, so several clients can coexist in one process.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "products",
        width: int = 800,
        height: int = 600,
        delivery_host: str = DELIVERY_HOST,
    ):
        """Initialize the Cloudinary client.

        Args:
            cloud_name: Cloudinary cloud name
            api_key: Cloudinary API key
            api_secret: Cloudinary API secret
            folder: Folder that uploaded images are placed in
            width: Width images are cropped to on upload
            height: Height images are cropped to on upload
            delivery_host: Host serving delivery URLs for this cloud
        """
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._delivery_host = delivery_host.lower()
        self._transformation = [
            {"width": width, "height": height, "crop": "fill", "quality": "auto"}
        ]

    def _credentials(self) -> dict[str, Any]:
        return {
            "cloud_name": self._cloud_name,
            "api_key": self._api_key,
            "api_secret": self._api_secret,
        }

    def upload(self, content: bytes, content_type: str, filename: str = "") -> str:
        """Upload an image and return its public HTTPS URL.

        Args:
            content: Raw image bytes
            content_type: MIME type declared by the client
            filename: Original file name, used only for diagnostics

        Returns:
            The secure URL of the stored asset.

        Raises:
            UploadError: If the upload fails or the response carries no URL.
        """
        logger.info(f"Uploading {filename or 'image'} ({content_type}, {len(content)} bytes)")

        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(content),
                folder=self._folder,
                resource_type="image",
                transformation=self._transformation,
                **self._credentials(),
            )
        except CloudinaryError as e:
            raise UploadError(f"Image upload failed: {e}") from e

        url = result.get("secure_url")
        if not url:
            raise UploadError(f"Image upload failed: no URL in response for {filename or 'image'}")

        logger.info(f"Uploaded image as {result.get('public_id')}")
        return url

    def delete(self, asset_id: str) -> bool:
        """Delete an image by its public id.

        Args:
            asset_id: Cloudinary public id, including its folder prefix

        Returns:
            True if Cloudinary removed the asset, False if it was not found
            or no id was given.

        Raises:
            DeleteError: If the request itself fails.
        """
        if not asset_id:
            return False

        try:
            result = cloudinary.uploader.destroy(
                asset_id,
                resource_type="image",
                invalidate=True,
                **self._credentials(),
            )
        except CloudinaryError as e:
            raise DeleteError(f"Failed to delete image {asset_id}: {e}") from e

        status = result.get("result")
        if status != "ok":
            logger.info(f"Cloudinary did not delete {asset_id}: {status}")
            return False

        logger.info(f"Deleted image {asset_id}")
        return True

    def hosts(self, url: str) -> bool:
        """Return True if the URL is delivered from this client's cloud.

        Delivery URLs look like ``https://<host>/<cloud_name>/image/upload/...``.
        URLs on other hosts or other clouds never belong to this account.
        """
        if not isinstance(url, str):
            return False
        try:
            parsed = urlsplit(url.strip())
        except ValueError:
            return False
        if parsed.scheme.lower() not in ("http", "https"):
            return False
        if (parsed.hostname or "") != self._delivery_host:
            return False

        segments = parsed.path.split("/")
        return len(segments) > 1 and segments[1] == self._cloud_name

    def build_url(self, asset_id: str) -> str:
        """Build the transformed delivery URL for a stored asset."""
        if not asset_id:
            return ""

        url, _ = cloudinary.utils.cloudinary_url(
            asset_id,
            secure=True,
            transformation=self._transformation,
            cloud_name=self._cloud_name,
        )
        return url


def create_cloudinary_client() -> CloudinaryClient:
    """Create a Cloudinary client using configuration."""
    config = get_config()
    return CloudinaryClient(
        cloud_name=config.cloudinary.cloud_name,
        api_key=config.cloudinary.api_key,
        api_secret=config.cloudinary.api_secret,
        folder=config.cloudinary.folder,
        width=config.images.width,
        height=config.images.height,
    )
