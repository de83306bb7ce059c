"""Service layer for the catalog backend."""

from catalog.services.image_reconciliation import (
    AssetStore,
    ImageReconciler,
    derive_asset_id,
    is_asset_store_url,
)
from catalog.services.image_validation import validate_image_file
from catalog.services.product_service import ProductService

__all__ = [
    "AssetStore",
    "ImageReconciler",
    "derive_asset_id",
    "is_asset_store_url",
    "validate_image_file",
    "ProductService",
]
