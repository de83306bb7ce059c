"""HTTP controllers."""

from catalog.api.controller.product_controller import router as product_router

__all__ = ["product_router"]
