"""Product image reconciliation.

Decides which media service calls an update needs and which image reference
gets persisted:

| intent          | media service                                   | new image     |
|-----------------|-------------------------------------------------|---------------|
| RemoveImage     | delete the current image if hosted              | ""            |
| ReplaceWithFile | upload, then delete the current image if hosted | uploaded URL  |
| ReplaceWithUrl  | delete the current image if hosted and changed  | the given URL |
| NoChange        | nothing                                         | unchanged     |

Upload failures propagate and abort the update. Delete failures of any kind
are logged and reported through the result outcome; they never change the
new image. Only URLs the asset store itself hosts are ever deleted.
"""

import logging
import posixpath
import re
from typing import List, Protocol
from urllib.parse import urlsplit

from catalog.models import (
    AssetOperation,
    AssetOperationKind,
    NoChange,
    ReconciliationOutcome,
    ReconciliationResult,
    RemoveImage,
    ReplaceWithFile,
    ReplaceWithUrl,
    UpdateIntent,
)

logger = logging.getLogger(__name__)

UPLOAD_SEGMENT = "upload"
VERSION_SEGMENT = re.compile(r"v\d+")


class AssetStore(Protocol):
    """Media service operations used during reconciliation."""

    def upload(self, content: bytes, content_type: str, filename: str = "") -> str: ...

    def delete(self, asset_id: str) -> bool: ...

    def hosts(self, url: str) -> bool: ...


def _path_segments(url: str) -> List[str]:
    """Split an absolute http(s) URL path, keeping the leading root segment.

    Returns an empty list when the value is not an absolute http(s) URL.
    """
    if not isinstance(url, str) or not url.strip():
        return []
    try:
        parsed = urlsplit(url.strip())
    except ValueError:
        return []
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return []
    return parsed.path.split("/")


def derive_asset_id(url: str) -> str:
    """
    Derive the media service asset id from a delivery URL.

    For ``.../upload/v{version}/{folder}/{asset_id}.{ext}`` this yields
    ``folder/asset_id``; without a folder it yields ``asset_id``. Never raises.

    Args:
        url: Stored image URL.

    Returns:
        The asset id, or an empty string when the URL is not valid or has
        fewer than three path segments (counting the root).
    """
    segments = _path_segments(url)
    if len(segments) < 3:
        return ""

    asset_id, _ = posixpath.splitext(segments[-1])
    if not asset_id:
        return ""

    if len(segments) >= 4:
        folder = segments[-2]
        if folder and folder != UPLOAD_SEGMENT and not VERSION_SEGMENT.fullmatch(folder):
            return f"{folder}/{asset_id}"
    return asset_id


def is_asset_store_url(url: str) -> bool:
    """Return True if the URL has the shape of a media service delivery URL.

    Only the path is checked; whether the asset belongs to this account is
    decided by the asset store (see ``AssetStore.hosts``).
    """
    segments = _path_segments(url)
    return UPLOAD_SEGMENT in segments and bool(derive_asset_id(url))


class ImageReconciler:
    """Applies an image update intent against the media service."""

    def __init__(self, asset_store: AssetStore):
        self._asset_store = asset_store

    def reconcile(self, existing_image: str, intent: UpdateIntent) -> ReconciliationResult:
        """Perform the media service calls for an intent and compute the new image.

        Args:
            existing_image: Image value stored before the update ("" for none).
            intent: The single image intent of the update request.

        Returns:
            ReconciliationResult with the image to persist and the calls made.

        Raises:
            UploadError: If uploading a replacement file fails. Nothing has
                been deleted at that point.
            TypeError: If the intent is not one of the known variants.
        """
        existing_image = existing_image or ""

        if isinstance(intent, NoChange):
            return ReconciliationResult(new_image=existing_image)

        if isinstance(intent, RemoveImage):
            logger.info("Removing product image")
            return self._result("", self._delete_previous(existing_image))

        if isinstance(intent, ReplaceWithFile):
            image = intent.image
            new_url = self._asset_store.upload(image.content, image.content_type, image.filename)
            operations = [AssetOperation(AssetOperationKind.UPLOAD, new_url, True)]
            # Old asset goes only after the new one is safely stored
            if existing_image != new_url:
                operations.extend(self._delete_previous(existing_image))
            return self._result(new_url, operations)

        if isinstance(intent, ReplaceWithUrl):
            if intent.url == existing_image:
                return ReconciliationResult(new_image=existing_image)
            return self._result(intent.url, self._delete_previous(existing_image))

        raise TypeError(f"Unknown image update intent: {intent!r}")

    def _delete_previous(self, existing_image: str) -> List[AssetOperation]:
        if not (is_asset_store_url(existing_image) and self._asset_store.hosts(existing_image)):
            if existing_image:
                logger.debug(f"Not deleting {existing_image}: not hosted by the media service")
            return []

        asset_id = derive_asset_id(existing_image)
        try:
            deleted = self._asset_store.delete(asset_id)
        except Exception as e:
            # Cleanup never blocks the update
            logger.warning(f"Could not delete previous image {asset_id}: {e}")
            deleted = False
        else:
            if not deleted:
                logger.warning(f"Previous image {asset_id} was not deleted")

        return [AssetOperation(AssetOperationKind.DELETE, asset_id, deleted)]

    @staticmethod
    def _result(new_image: str, operations: List[AssetOperation]) -> ReconciliationResult:
        cleanup_failed = any(
            op.kind == AssetOperationKind.DELETE and not op.succeeded for op in operations
        )
        outcome = (
            ReconciliationOutcome.COMPLETED_WITH_CLEANUP_WARNING
            if cleanup_failed
            else ReconciliationOutcome.COMPLETED
        )
        return ReconciliationResult(new_image=new_image, operations=operations, outcome=outcome)
