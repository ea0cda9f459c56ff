"""Editor settings screen endpoints."""

from fastapi import APIRouter, Depends
from loguru import logger
from sqlmodel import Session
from starlette.responses import JSONResponse

from src.price_editor.api.http.deps import (
    get_db_session,
    get_product_service,
    require_manager,
)
from src.price_editor.api.http.envelope import success
from src.price_editor.core.services import HostUser, ProductService
from src.price_editor.entities.settings import (
    EditorSettingsRepository,
    SettingsUpdate,
    sanitize_settings,
)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
async def get_settings(
    user: HostUser = Depends(require_manager),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    return success(EditorSettingsRepository(session).get())


@router.put("")
async def update_settings(
    body: SettingsUpdate,
    user: HostUser = Depends(require_manager),
    session: Session = Depends(get_db_session),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    """Save settings; invalid values fall back to defaults and come back as notices."""
    repository = EditorSettingsRepository(session)
    category_slugs = {c.slug for c in await service.get_categories()}

    result = sanitize_settings(body, repository.get(), category_slugs)
    repository.save(result.settings)
    session.commit()

    logger.bind(user_id=user.id, notices=len(result.notices)).info("settings.saved")
    return success(
        result,
        message="Settings saved." if not result.notices else " ".join(result.notices),
    )
