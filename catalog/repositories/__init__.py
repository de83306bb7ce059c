"""Record store implementations."""

from catalog.repositories.product_repository import ProductRepository, RecordStore

__all__ = ["ProductRepository", "RecordStore"]
