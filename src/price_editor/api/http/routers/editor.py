"""Bootstrap data for the editor page."""

from fastapi import APIRouter, Depends
from sqlmodel import Session
from starlette.responses import JSONResponse

from src.price_editor.api.http.deps import (
    get_db_session,
    get_product_service,
    require_manager,
)
from src.price_editor.api.http.envelope import success
from src.price_editor.core.fields import FIELDS, PRODUCT_STATUSES, STOCK_STATUSES, TAX_STATUSES
from src.price_editor.core.security import generate_nonce
from src.price_editor.core.services import HostUser, ProductService
from src.price_editor.entities.settings import AVAILABLE_COLUMNS, EditorSettingsRepository
from src.price_editor.runtime.context import get_config

router = APIRouter(prefix="/editor", tags=["editor"])


@router.get("/context")
async def editor_context(
    user: HostUser = Depends(require_manager),
    session: Session = Depends(get_db_session),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    """Everything the grid needs on load, including a fresh nonce for AJAX calls."""
    config = get_config()
    prefix = config.app.api_prefix.rstrip("/")
    return success(
        {
            "nonce": generate_nonce(user.id),
            "rest_base": prefix,
            "ajax_url": f"{prefix}/ajax",
            "user": {"id": user.id, "name": user.name},
            "settings": EditorSettingsRepository(session).get(),
            "columns": AVAILABLE_COLUMNS,
            "fields": [spec.describe() for spec in FIELDS.values()],
            "statuses": list(PRODUCT_STATUSES),
            "tax_statuses": list(TAX_STATUSES),
            "stock_statuses": list(STOCK_STATUSES),
            "categories": await service.get_categories(),
            "tax_classes": await service.get_tax_classes(),
            "page_length": config.editor.page_length,
        }
    )
