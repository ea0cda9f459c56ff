"""Test client wired to in-memory services."""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from src.price_editor.api.http.app import app
from src.price_editor.api.http.app_data import ApplicationDependencies
from src.price_editor.api.http.deps import get_db_session
from src.price_editor.api.http.middleware.limiter import (
    LocalFixedWindowRateLimiter,
    configure_rate_limiter,
)
from src.price_editor.core.services import DbSessionService, ProductService

from .host import FakeIdentityProvider, FakeProductStore

MANAGER = {"Authorization": "Bearer manager"}
VIEWER = {"Authorization": "Bearer viewer"}
CUSTOMER = {"Authorization": "Bearer customer"}


@pytest.fixture
def database_service() -> Mock:
    service = Mock(spec=DbSessionService)
    service.health_check.return_value = True
    return service


@pytest.fixture
def rate_limiter() -> Generator[LocalFixedWindowRateLimiter]:
    limiter = LocalFixedWindowRateLimiter(100, 60, "wpe_rate_")
    configure_rate_limiter(limiter=limiter)
    yield limiter
    configure_rate_limiter(limiter=LocalFixedWindowRateLimiter(100, 60, "wpe_rate_"))


@pytest.fixture
def api_client(
    product_store: FakeProductStore,
    product_service: ProductService,
    identity_provider: FakeIdentityProvider,
    database_service: Mock,
    session: Session,
    rate_limiter: LocalFixedWindowRateLimiter,
) -> Generator[TestClient]:
    """TestClient without the lifespan; dependencies are injected directly."""
    app.state.app_dependencies = ApplicationDependencies(
        product_store=product_store,
        product_service=product_service,
        identity_provider=identity_provider,
        database_service=database_service,
    )
    app.dependency_overrides[get_db_session] = lambda: session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
