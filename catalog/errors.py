"""Exceptions raised across the catalog backend."""


class CatalogError(Exception):
    """Base class for catalog errors."""

    pass


class ValidationError(CatalogError):
    """Raised when input is rejected before any side effect happens."""

    pass


class NotFoundError(CatalogError):
    """Raised when a product id does not exist in the record store."""

    pass


class UploadError(CatalogError):
    """Raised when the media service could not store an image."""

    pass


class DeleteError(CatalogError):
    """Raised when the media service could not delete an image."""

    pass
