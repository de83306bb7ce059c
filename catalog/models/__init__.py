"""Data models module."""

from catalog.models.product import Product, ProductFields
from catalog.models.image_intent import (
    ImageFile,
    NoChange,
    RemoveImage,
    ReplaceWithFile,
    ReplaceWithUrl,
    UpdateIntent,
    build_update_intent,
)
from catalog.models.reconciliation import (
    AssetOperation,
    AssetOperationKind,
    ProductUpdateResult,
    ReconciliationOutcome,
    ReconciliationResult,
)

__all__ = [
    "Product",
    "ProductFields",
    "ImageFile",
    "NoChange",
    "RemoveImage",
    "ReplaceWithFile",
    "ReplaceWithUrl",
    "UpdateIntent",
    "build_update_intent",
    "AssetOperation",
    "AssetOperationKind",
    "ProductUpdateResult",
    "ReconciliationOutcome",
    "ReconciliationResult",
]
