"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.price_editor.api.http.app_data import ApplicationDependencies
from src.price_editor.api.http.middleware.limiter import enforce_rate_limit
from src.price_editor.core.errors import AuthenticationError, PermissionDeniedError
from src.price_editor.core.services import (
    HostUser,
    IdentityProvider,
    ProductService,
    ProductStore,
)
from src.price_editor.core.services.host import credential_headers
from src.price_editor.runtime.context import get_config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a session that commits when the request handler succeeds."""
    app_deps = get_app_dependencies(request)
    with app_deps.database_service.session_scope() as session:
        yield session


def get_product_service(request: Request) -> ProductService:
    return get_app_dependencies(request).product_service


def get_product_store(request: Request) -> ProductStore:
    return get_app_dependencies(request).product_store


def get_identity_provider(request: Request) -> IdentityProvider:
    return get_app_dependencies(request).identity_provider


async def get_current_user(request: Request) -> HostUser:
    """Resolve the caller through the host; anonymous callers get a 401."""
    provider = get_identity_provider(request)
    user = await provider.resolve(credential_headers(request.headers))
    if user is None:
        raise AuthenticationError()

    request.state.user_id = user.id
    return user


def ensure_manager(user: HostUser) -> None:
    if not user.can(get_config().editor.manage_capability):
        raise PermissionDeniedError()


async def require_manager(user: HostUser = Depends(get_current_user)) -> HostUser:
    """Gate for every REST endpoint: manage capability, then the rate limit."""
    ensure_manager(user)
    await enforce_rate_limit(user.id)
    return user


async def require_editor(user: HostUser = Depends(require_manager)) -> HostUser:
    """Gate for writes: the manager gate plus the edit capability."""
    if not user.can(get_config().editor.edit_capability):
        raise PermissionDeniedError("You do not have permission to edit this product.")
    return user
