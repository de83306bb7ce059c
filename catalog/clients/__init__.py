"""Client modules for external services."""

from catalog.clients.sqlite_client import SqliteClient
from catalog.clients.cloudinary_client import CloudinaryClient, create_cloudinary_client

__all__ = [
    "SqliteClient",
    "CloudinaryClient",
    "create_cloudinary_client",
]
