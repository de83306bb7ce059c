"""FastAPI dependencies wiring the service layer to configuration."""

from typing import Optional

from catalog.clients import SqliteClient, create_cloudinary_client
from catalog.config import get_config
from catalog.repositories import ProductRepository
from catalog.services import ProductService

_product_service: Optional[ProductService] = None


def get_product_service() -> ProductService:
    """
    Get the product service singleton.

    Lazy-creates the database connection and Cloudinary client on first use.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _product_service
    if _product_service is None:
        config = get_config()
        repository = ProductRepository(SqliteClient(config.database.path))
        _product_service = ProductService(
            repository=repository,
            asset_store=create_cloudinary_client(),
            image_settings=config.images,
        )
    return _product_service
