"""Product models for database representation."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ProductFields:
    """Editable fields supplied by create and update requests."""

    name: str
    description: str
    price: Decimal


@dataclass
class Product:
    """Product data model representing a product record."""

    id: Optional[int]  # Assigned by the record store on insert
    name: str
    description: str
    price: Decimal
    image: str = ""  # Empty when the product has no image

    @classmethod
    def from_fields(cls, fields: ProductFields, image: str = "", product_id: Optional[int] = None) -> "Product":
        return cls(
            id=product_id,
            name=fields.name,
            description=fields.description,
            price=fields.price,
            image=image,
        )
