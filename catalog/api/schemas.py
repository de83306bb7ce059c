"""Request and response schemas for the product API."""

from decimal import Decimal
from typing import Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from catalog.models import Product, ProductFields


class ProductForm(BaseModel):
    """Product fields posted as multipart form data."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    price: Decimal = Field(gt=0)
    image_url: Optional[str] = None

    @field_validator("image_url")
    @classmethod
    def _check_image_url(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        parsed = urlsplit(value)
        if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
            raise ValueError("Invalid URL format")
        return value

    def to_fields(self) -> ProductFields:
        return ProductFields(name=self.name, description=self.description, price=self.price)


class ProductResponse(BaseModel):
    """Product representation returned to clients."""

    id: int
    name: str
    description: str
    price: Decimal
    image: str = ""

    @field_serializer("price", when_used="json")
    def _price_as_number(self, value: Decimal) -> Union[int, float]:
        # Rendered as a JSON number instead of a decimal string
        if value == value.to_integral_value():
            return int(value)
        return float(value)

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            image=product.image or "",
        )
