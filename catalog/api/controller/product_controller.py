"""REST controller for product CRUD."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError

from catalog.api.dependencies import get_product_service
from catalog.api.schemas import ProductForm, ProductResponse
from catalog.errors import ValidationError
from catalog.models import ImageFile, build_update_intent
from catalog.services import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


def _parse_form(name: str, description: str, price: str, image_url: Optional[str]) -> ProductForm:
    try:
        return ProductForm(name=name, description=description, price=price, image_url=image_url)
    except PydanticValidationError as e:
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        ]
        raise ValidationError("; ".join(messages)) from e


async def _read_upload(upload: Optional[UploadFile]) -> Optional[ImageFile]:
    # Browsers post an unnamed empty part when no file was chosen
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return ImageFile(
        content=content,
        filename=upload.filename,
        content_type=upload.content_type or "",
    )


def _not_found(product_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Product with ID {product_id} not found",
    )


@router.get("", response_model=List[ProductResponse])
async def list_products(service: ProductService = Depends(get_product_service)) -> List[ProductResponse]:
    products = await run_in_threadpool(service.list_products)
    return [ProductResponse.from_product(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    product = await run_in_threadpool(service.get_product, product_id)
    if product is None:
        raise _not_found(product_id)
    return ProductResponse.from_product(product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    image_file: Optional[UploadFile] = File(None, alias="imageFile"),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    Create a product from multipart form data.

    An uploaded `imageFile` wins over `imageUrl`; with neither the product
    has no image.
    """
    form = _parse_form(name, description, price, image_url)
    upload = await _read_upload(image_file)

    product = await run_in_threadpool(service.create_product, form.to_fields(), upload, form.image_url)
    logger.info(f"Created product {product.id}")
    return ProductResponse.from_product(product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    image_file: Optional[UploadFile] = File(None, alias="imageFile"),
    remove_image: bool = Form(False, alias="removeImage"),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """
    Update a product from multipart form data.

    Image handling, highest precedence first: `removeImage`, `imageFile`,
    `imageUrl`, otherwise the current image is kept.
    """
    form = _parse_form(name, description, price, image_url)
    upload = await _read_upload(image_file)
    intent = build_update_intent(remove_image=remove_image, image_file=upload, image_url=form.image_url)

    result = await run_in_threadpool(service.update_product, product_id, form.to_fields(), intent)
    if result is None:
        raise _not_found(product_id)
    return ProductResponse.from_product(result.product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Response:
    deleted = await run_in_threadpool(service.delete_product, product_id)
    if not deleted:
        raise _not_found(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
