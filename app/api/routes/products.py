"""Product endpoints. Every route requires a valid Bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_current_user, get_product_service
from app.schemas.auth import CurrentUser
from app.schemas.common import ErrorResponse
from app.schemas.product import (
    MessageResponse,
    ProductRequest,
    ProductResponse,
    ProductStatisticsResponse,
)
from app.services.products import ProductService

router = APIRouter(
    dependencies=[Depends(get_current_user)],
    responses={401: {"model": ErrorResponse}},
)

PRODUCT_NOT_FOUND = "Product not found"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)


@router.get("", response_model=list[ProductResponse])
def list_products(
    products: Annotated[ProductService, Depends(get_product_service)],
) -> list[ProductResponse]:
    return [ProductResponse.model_validate(p) for p in products.list_all()]


@router.get("/statistics", response_model=ProductStatisticsResponse)
def get_statistics(
    products: Annotated[ProductService, Depends(get_product_service)],
) -> ProductStatisticsResponse:
    """Total number of active products and the time the count was taken."""
    return products.get_statistics()


@router.get("/my-products", response_model=list[ProductResponse])
def list_my_products(
    products: Annotated[ProductService, Depends(get_product_service)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[ProductResponse]:
    """Products created by the authenticated user."""
    return [ProductResponse.model_validate(p) for p in products.list_by_owner(user.id)]


@router.get(
    "/search",
    response_model=list[ProductResponse],
    responses={400: {"model": ErrorResponse}},
)
def search_products(
    products: Annotated[ProductService, Depends(get_product_service)],
    search_term: Annotated[str | None, Query(alias="searchTerm")] = None,
) -> list[ProductResponse]:
    """Case-insensitive substring search over product descriptions."""
    return [ProductResponse.model_validate(p) for p in products.search_by_name(search_term)]


@router.get(
    "/category/{category}",
    response_model=list[ProductResponse],
    responses={400: {"model": ErrorResponse}},
)
def list_by_category(
    category: str,
    products: Annotated[ProductService, Depends(get_product_service)],
) -> list[ProductResponse]:
    """Products whose category equals the given one, ignoring case."""
    return [ProductResponse.model_validate(p) for p in products.list_by_category(category)]


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_product(
    product_id: int,
    products: Annotated[ProductService, Depends(get_product_service)],
) -> ProductResponse:
    product = products.get_by_id(product_id)
    if product is None:
        raise _not_found()
    return ProductResponse.model_validate(product)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_product(
    body: ProductRequest,
    products: Annotated[ProductService, Depends(get_product_service)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ProductResponse:
    """Create a product owned by the authenticated user."""
    return ProductResponse.model_validate(products.create(body, user.id))


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
def update_product(
    product_id: int,
    body: ProductRequest,
    products: Annotated[ProductService, Depends(get_product_service)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ProductResponse:
    """Replace a product's fields. Only the owner may update it."""
    product = products.update(product_id, body, user.id)
    if product is None:
        raise _not_found()
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_product(
    product_id: int,
    products: Annotated[ProductService, Depends(get_product_service)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Soft-delete a product. Only the owner may delete it; afterwards GET returns 404."""
    if not products.delete(product_id, user.id):
        raise _not_found()
    return MessageResponse(message="Product deleted successfully")
