"""Response envelope shared by the REST and AJAX endpoints."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse

from src.price_editor.core.errors import PriceEditorError


def success(
    data: Any = None,
    message: str | None = None,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": True, "message": message, "data": data}),
        headers=headers,
    )


def failure(
    message: str,
    status_code: int,
    code: str,
    request_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {
        "success": False,
        "message": message,
        "data": {"status": status_code, "code": code},
    }
    if request_id:
        content["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def error_response(exc: PriceEditorError, request_id: str | None = None) -> JSONResponse:
    return failure(exc.message, exc.status_code, exc.code, request_id, exc.headers)
