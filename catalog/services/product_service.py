"""Product CRUD service.

Thin orchestration over the record store. Updates run image reconciliation
before the record is written so the stored image always reflects what the
media service holds.
"""

import logging
from typing import List, Optional

from catalog.config.configuration import ImageConfig
from catalog.errors import NotFoundError
from catalog.models import (
    ImageFile,
    Product,
    ProductFields,
    ProductUpdateResult,
    ReplaceWithFile,
    UpdateIntent,
)
from catalog.repositories import RecordStore
from catalog.services.image_reconciliation import AssetStore, ImageReconciler, derive_asset_id
from catalog.services.image_validation import DEFAULT_IMAGE_CONFIG, validate_image_file

logger = logging.getLogger(__name__)


class ProductService:
    """Service for managing products and their images."""

    def __init__(
        self,
        repository: RecordStore,
        asset_store: AssetStore,
        image_settings: ImageConfig = DEFAULT_IMAGE_CONFIG,
    ):
        """Initialize the product service.

        Args:
            repository: Record store holding product rows.
            asset_store: Media service for product images.
            image_settings: Rules for uploaded images.
        """
        self._repository = repository
        self._asset_store = asset_store
        self._image_settings = image_settings
        self._reconciler = ImageReconciler(asset_store)

    def list_products(self) -> List[Product]:
        return self._repository.list_all()

    def get_product(self, product_id: int) -> Optional[Product]:
        return self._repository.find_by_id(product_id)

    def create_product(
        self,
        fields: ProductFields,
        image_file: Optional[ImageFile] = None,
        image_url: Optional[str] = None,
    ) -> Product:
        """Create a product, uploading its image first when a file is given.

        A file takes precedence over a URL.

        Raises:
            ValidationError: If the file is rejected. Nothing is uploaded.
            UploadError: If the upload fails. Nothing is persisted.
            sqlite3.Error: If the insert fails. The uploaded image is discarded
                first.
        """
        image = ""
        uploaded = False
        if image_file is not None:
            validate_image_file(image_file, self._image_settings)
            image = self._asset_store.upload(image_file.content, image_file.content_type, image_file.filename)
            uploaded = True
        elif image_url and image_url.strip():
            image = image_url.strip()

        try:
            return self._repository.insert(Product.from_fields(fields, image=image))
        except Exception:
            if uploaded:
                self._discard_upload(image)
            raise

    def update_product(
        self,
        product_id: int,
        fields: ProductFields,
        intent: UpdateIntent,
    ) -> Optional[ProductUpdateResult]:
        """Update a product and reconcile its image.

        Returns:
            The persisted product with its reconciliation result, or None if
            no product has this id. Absent products cause no media calls.

        Raises:
            ValidationError: If a replacement file is rejected.
            UploadError: If uploading the replacement fails. The stored record
                and its current image are left untouched.
            sqlite3.Error: If the record write fails. A freshly uploaded
                replacement is discarded first.
        """
        if isinstance(intent, ReplaceWithFile):
            validate_image_file(intent.image, self._image_settings)

        existing = self._repository.find_by_id(product_id)
        if existing is None:
            logger.info(f"Product {product_id} not found for update")
            return None

        reconciliation = self._reconciler.reconcile(existing.image, intent)
        if reconciliation.has_cleanup_warning:
            logger.warning(
                f"Product {product_id} updated with leftover assets: {reconciliation.deleted_asset_ids}"
            )

        try:
            product = self._repository.update_in_place(
                Product.from_fields(fields, image=reconciliation.new_image, product_id=product_id)
            )
        except NotFoundError:
            # Deleted concurrently; the fresh upload has no owner any more
            if isinstance(intent, ReplaceWithFile):
                self._discard_upload(reconciliation.new_image)
            logger.info(f"Product {product_id} disappeared during update")
            return None
        except Exception:
            if isinstance(intent, ReplaceWithFile):
                self._discard_upload(reconciliation.new_image)
            raise

        return ProductUpdateResult(product=product, reconciliation=reconciliation)

    def delete_product(self, product_id: int) -> bool:
        return self._repository.delete(product_id)

    def _discard_upload(self, url: str) -> None:
        asset_id = derive_asset_id(url)
        if not asset_id:
            return
        try:
            self._asset_store.delete(asset_id)
        except Exception as e:
            logger.warning(f"Could not discard uploaded image {asset_id}: {e}")
