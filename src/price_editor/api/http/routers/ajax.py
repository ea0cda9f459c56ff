"""Form-encoded action endpoint used by the editor page script.

Each request names an ``action``; every action is gated by login, the
editor nonce, the manage capability and the per-user rate limit, in that
order.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.price_editor.api.http.deps import (
    ensure_manager,
    get_current_user,
    get_product_service,
)
from src.price_editor.api.http.envelope import success
from src.price_editor.api.http.middleware.limiter import enforce_rate_limit
from src.price_editor.api.http.routers.products import parse_product_query
from src.price_editor.core.errors import (
    BadRequestError,
    InvalidNonceError,
)
from src.price_editor.core.security import get_client_ip, log_event, verify_nonce
from src.price_editor.core.services import HostUser

router = APIRouter(tags=["ajax"])

NONCE_HEADER = "x-wpe-nonce"

AjaxHandler = Callable[[Request, HostUser, dict[str, Any]], Awaitable[JSONResponse]]


async def _read_params(request: Request) -> dict[str, Any]:
    """Query string merged with the form body; the body wins."""
    params: dict[str, Any] = dict(request.query_params)
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    ):
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    return params


async def _get_categories(
    request: Request, user: HostUser, params: dict[str, Any]
) -> JSONResponse:
    service = get_product_service(request)
    return success(await service.get_categories())


async def _get_tax_classes(
    request: Request, user: HostUser, params: dict[str, Any]
) -> JSONResponse:
    service = get_product_service(request)
    return success(await service.get_tax_classes())


async def _get_products(
    request: Request, user: HostUser, params: dict[str, Any]
) -> JSONResponse:
    service = get_product_service(request)
    return success(await service.list_products(parse_product_query(params)))


async def _update_product(
    request: Request, user: HostUser, params: dict[str, Any]
) -> JSONResponse:
    service = get_product_service(request)
    try:
        product_id = abs(int(params.get("product_id") or 0))
    except ValueError:
        product_id = 0
    if not product_id:
        raise BadRequestError("Product ID is required.")

    await service.ensure_can_edit(product_id, user)

    field = (params.get("field") or "").strip()
    if not field:
        raise BadRequestError("Field is required.")

    result = await service.update_field(
        product_id,
        field,
        params.get("value", ""),
        user,
        client_ip=get_client_ip(request),
    )
    return success(result, message=result.message)


ACTIONS: dict[str, AjaxHandler] = {
    "wpe_get_categories": _get_categories,
    "wpe_get_tax_classes": _get_tax_classes,
    "wpe_get_products": _get_products,
    "wpe_update_product": _update_product,
}


@router.post("/ajax")
async def dispatch(request: Request) -> JSONResponse:
    params = await _read_params(request)
    action = params.get("action", "")
    handler = ACTIONS.get(action)
    if handler is None:
        raise BadRequestError("Unknown action.", action=action)

    user = await get_current_user(request)

    nonce = params.get("nonce") or request.headers.get(NONCE_HEADER)
    if not verify_nonce(user.id, nonce):
        log_event("invalid_nonce", request, user.id, action=action)
        raise InvalidNonceError()

    ensure_manager(user)
    await enforce_rate_limit(user.id)

    return await handler(request, user, params)
