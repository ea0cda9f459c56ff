"""Unit tests for configuration loading, overrides and environment settings."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from loguru import logger

from src.price_editor.runtime.config.config_data import (
    ConfigData,
    DatabaseConfig,
    EditorConfig,
    HostConfig,
    RateLimiterConfig,
    RedisConfig,
)
from src.price_editor.runtime.config.config_template import (
    load_templated_yaml,
    substitute_env_vars,
    validate_config_env_vars,
)
from src.price_editor.runtime.config.settings import EnvironmentVariables
from src.price_editor.runtime.context import (
    AppContext,
    get_config,
    get_context,
    set_config,
    with_context,
)

CONFIG_TEMPLATE = """
config:
  host:
    site_url: ${WC_SITE_URL:-http://localhost:8080}
    consumer_key: ${WC_CONSUMER_KEY:-}
    consumer_secret: ${WC_CONSUMER_SECRET:-}
  rate_limiter:
    requests: ${RATE_LIMIT_REQUESTS:-100}
  redis:
    url: ${REDIS_URL:-}
"""


class TestSubstitution:
    def test_default_used_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("a: ${MISSING:-fallback}") == "a: fallback"

    def test_value_from_environment(self):
        with patch.dict(os.environ, {"WC_SITE_URL": "https://shop.test"}, clear=True):
            assert substitute_env_vars("${WC_SITE_URL:-x}") == "https://shop.test"


class TestLoadTemplatedYaml:
    def test_loads_sections(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_TEMPLATE)

        env = {
            "WC_SITE_URL": "https://shop.test",
            "WC_CONSUMER_KEY": "ck",
            "WC_CONSUMER_SECRET": "cs",
            "RATE_LIMIT_REQUESTS": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(path)

        assert config.host.api_base_url == "https://shop.test/wp-json/"
        assert config.host.consumer_key == "ck"
        assert config.rate_limiter.requests == 5
        assert config.redis.connection_string == ""

    def test_environment_prefixed_override(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_TEMPLATE)

        env = {
            "APP_ENVIRONMENT": "production",
            "WC_SITE_URL": "https://staging.test",
            "PRODUCTION_WC_SITE_URL": "https://shop.test",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(path)

        assert config.host.site_url == "https://shop.test"

    def test_missing_api_keys_warn_about_unauthenticated_requests(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_TEMPLATE)

        messages = []
        handler_id = logger.add(lambda message: messages.append(message.record), level="WARNING")
        try:
            with patch.dict(os.environ, {}, clear=True):
                load_templated_yaml(path)
        finally:
            logger.remove(handler_id)

        warnings = [r["message"] for r in messages if "consumer credentials" in r["message"]]
        assert len(warnings) == 1
        assert "unauthenticated" in warnings[0]
        assert "caller" not in warnings[0]

    def test_empty_file_is_rejected(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ValueError):
            load_templated_yaml(path)

    def test_missing_variables_reported(self):
        with patch.dict(os.environ, {"WC_SITE_URL": "https://shop.test"}, clear=True):
            missing = validate_config_env_vars()

        assert set(missing) == {"WC_CONSUMER_KEY", "WC_CONSUMER_SECRET"}


class TestConfigModels:
    def test_redis_password_injected(self):
        redis = RedisConfig(url="redis://cache:6379/0", password="s3cret")

        assert redis.connection_string == "redis://:s3cret@cache:6379/0"
        assert "s3cret" not in redis.sanitized_connection_string

    def test_database_password_from_environment(self):
        db = DatabaseConfig(
            url="postgresql://editor@db:5432/editor", password_env_var="DB_PASSWORD"
        )
        with patch.dict(os.environ, {"DB_PASSWORD": "pw"}, clear=True):
            assert db.connection_string == "postgresql://editor:pw@db:5432/editor"

    def test_host_base_url_normalized(self):
        assert HostConfig(site_url="https://shop.test///").api_base_url == (
            "https://shop.test/wp-json/"
        )


class TestContext:
    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert isinstance(get_config(), ConfigData)
        assert context.config is get_config()

    def test_partial_override_is_merged_and_reverted(self):
        original = get_config()

        override = ConfigData(rate_limiter=RateLimiterConfig(requests=3))
        with with_context(override):
            config = get_config()
            assert config.rate_limiter.requests == 3
            assert config.rate_limiter.window_seconds == original.rate_limiter.window_seconds
            assert config.host.site_url == original.host.site_url

        assert get_config() is original

    def test_nested_overrides(self):
        with with_context(ConfigData(editor=EditorConfig(enable_logging=True))):
            with with_context(ConfigData(editor=EditorConfig(page_length=25))):
                config = get_config()
                assert config.editor.enable_logging is True
                assert config.editor.page_length == 25
            assert get_config().editor.page_length == 50

    def test_rejects_non_config_override(self):
        with pytest.raises(ValueError):
            with with_context({"editor": {}}):
                pass

    def test_set_config_replaces_everything(self):
        original = get_config()
        token_config = ConfigData(editor=EditorConfig(page_length=10))
        try:
            set_config(token_config)
            assert get_config() is token_config
        finally:
            set_config(original)


class TestEnvironmentVariables:
    def test_default_values(self):
        with patch.dict(os.environ, {}, clear=True):
            env_vars = EnvironmentVariables(_env_file=None)

        assert env_vars.environment == "development"
        assert env_vars.database_url == "sqlite:///./price_editor.db"
        assert env_vars.redis_url is None
        assert not env_vars.has_host_credentials

    def test_loading_from_environment(self):
        env = {
            "APP_ENVIRONMENT": "production",
            "WC_SITE_URL": "https://shop.test",
            "WC_CONSUMER_KEY": "ck",
            "WC_CONSUMER_SECRET": "cs",
        }
        with patch.dict(os.environ, env, clear=True):
            env_vars = EnvironmentVariables(_env_file=None)

        assert env_vars.environment == "production"
        assert env_vars.wc_site_url == "https://shop.test"
        assert env_vars.has_host_credentials
