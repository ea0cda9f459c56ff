"""REST endpoints for the product grid."""

from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from src.price_editor.api.http.deps import (
    get_product_service,
    require_editor,
    require_manager,
)
from src.price_editor.api.http.envelope import success
from src.price_editor.core.errors import (
    BadRequestError,
    PermissionDeniedError,
    ProductNotFoundError,
)
from src.price_editor.core.security import get_client_ip
from src.price_editor.core.services import HostUser, ProductService
from src.price_editor.entities.product import ProductQuery
from src.price_editor.runtime.context import get_config

router = APIRouter(tags=["products"])

QUERY_PARAMS = tuple(ProductQuery.model_fields)
WRITE_METHODS = ["POST", "PUT", "PATCH"]


class FieldUpdateRequest(BaseModel):
    field: str
    value: Any = None


class BulkUpdateRequest(BaseModel):
    product_ids: list[int] = Field(min_length=1)
    field: str
    value: Any = None


def parse_product_query(params: Mapping[str, Any]) -> ProductQuery:
    """Build a grid query from request parameters, ignoring unknown keys."""
    data = {key: params[key] for key in QUERY_PARAMS if params.get(key) is not None}
    data.setdefault("per_page", get_config().editor.page_length)
    return ProductQuery.model_validate(data)


@router.get("/products")
async def list_products(
    request: Request,
    user: HostUser = Depends(require_manager),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    page = await service.list_products(parse_product_query(request.query_params))
    return success(
        page,
        headers={"X-WP-Total": str(page.total), "X-WP-TotalPages": str(page.pages)},
    )


# Declared before the single-product route so "bulk" never parses as an id.
@router.api_route("/products/bulk", methods=WRITE_METHODS)
async def bulk_update_products(
    request: Request,
    body: BulkUpdateRequest,
    user: HostUser = Depends(require_editor),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    # Every id must be editable before anything is written.
    for product_id in body.product_ids:
        try:
            await service.ensure_can_edit(product_id, user)
        except ProductNotFoundError as exc:
            raise PermissionDeniedError(
                f"You do not have permission to edit product #{product_id}.",
                product_id=product_id,
            ) from exc

    result = await service.bulk_update(
        body.product_ids, body.field, body.value, user, get_client_ip(request)
    )
    return success(result)


@router.api_route("/products/{product_id}", methods=WRITE_METHODS)
async def update_product(
    request: Request,
    product_id: int,
    body: FieldUpdateRequest,
    user: HostUser = Depends(require_editor),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    if product_id <= 0:
        raise BadRequestError("Product ID is required.")

    await service.ensure_can_edit(product_id, user)
    result = await service.update_field(
        product_id, body.field, body.value, user, get_client_ip(request)
    )
    return success(
        {
            "old_value": result.old_value,
            "new_value": result.new_value,
            "product": result.product,
        },
        message=result.message,
    )


@router.get("/categories")
async def list_categories(
    user: HostUser = Depends(require_manager),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    return success(await service.get_categories())


@router.get("/tax-classes")
async def list_tax_classes(
    user: HostUser = Depends(require_manager),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    return success(await service.get_tax_classes())
