"""Tests for the price-editor command line."""

import os
from unittest.mock import AsyncMock, Mock, patch

import pytest
from typer.testing import CliRunner

from src.price_editor.cli import app
from src.price_editor.core.services.database import DbSessionService
from src.price_editor.entities.settings import EditorSettings, EditorSettingsRepository

runner = CliRunner()


@pytest.fixture
def db_service(tmp_path, monkeypatch) -> DbSessionService:
    service = DbSessionService(url=f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setattr(
        "src.price_editor.core.services.database.DbSessionService", lambda: service
    )
    monkeypatch.setattr("src.price_editor.runtime.init_db.DbSessionService", lambda: service)
    yield service
    service.dispose()


def test_init_db_seeds_settings(db_service):
    result = runner.invoke(app, ["init-db"])

    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output
    with db_service.session_scope() as session:
        assert EditorSettingsRepository(session).exists()


def test_settings_show_and_reset(db_service):
    runner.invoke(app, ["init-db"])
    with db_service.session_scope() as session:
        EditorSettingsRepository(session).save(EditorSettings(start_category="hats"))

    result = runner.invoke(app, ["settings", "show"])
    assert result.exit_code == 0, result.output
    assert "hats" in result.output

    result = runner.invoke(app, ["settings", "reset", "--force"])
    assert result.exit_code == 0
    assert "deleted" in result.output
    with db_service.session_scope() as session:
        assert not EditorSettingsRepository(session).exists()


def test_settings_reset_clears_shared_rate_limit_counters(db_service, monkeypatch):
    client = AsyncMock()
    redis_service = Mock()
    redis_service.get_client.return_value = client
    redis_service.close = AsyncMock()
    clear = AsyncMock(return_value=3)
    monkeypatch.setattr(
        "src.price_editor.core.services.redis_service.RedisService", lambda: redis_service
    )
    monkeypatch.setattr(
        "src.price_editor.api.http.middleware.limiter.clear_rate_limit_counters", clear
    )

    result = runner.invoke(app, ["settings", "reset", "--force"])

    assert result.exit_code == 0, result.output
    assert "Cleared 3 rate limit counters" in result.output
    clear.assert_awaited_once_with(client, "wpe_rate_")
    redis_service.close.assert_awaited_once()


def test_settings_reset_can_be_cancelled(db_service):
    runner.invoke(app, ["init-db"])

    result = runner.invoke(app, ["settings", "reset"], input="n\n")

    assert "Cancelled" in result.output
    with db_service.session_scope() as session:
        assert EditorSettingsRepository(session).exists()


def test_config_check_reports_missing_keys():
    with patch.dict(os.environ, {"WC_SITE_URL": "https://shop.test"}, clear=True):
        result = runner.invoke(app, ["config", "check"])

    assert result.exit_code == 1
    assert "WC_CONSUMER_KEY" in result.output


def test_config_check_passes():
    env = {
        "WC_SITE_URL": "https://shop.test",
        "WC_CONSUMER_KEY": "ck",
        "WC_CONSUMER_SECRET": "cs",
    }
    with patch.dict(os.environ, env, clear=True):
        result = runner.invoke(app, ["config", "check"])

    assert result.exit_code == 0, result.output
    assert "All required variables are set" in result.output
