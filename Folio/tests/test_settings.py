"""Tests for environment configuration."""

import logging

import pytest
from Folio.api.logging_config import setup_logging
from Folio.config.settings import RemoteConfig, Settings
from Folio.utils.errors import ConfigurationError
from pythonjsonlogger.json import JsonFormatter


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "ENVIRONMENT", "UPLOAD_BACKEND",
                 "JWT_SECRET_KEY", "ADMIN_PASSWORD", "CORS_ORIGINS", "REMOTE_TIMEOUT", "CACHE_KEY"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_defaults(self, clean_env):
        settings = Settings()
        assert settings.remote.is_configured is False
        assert settings.remote.table == "portfolio"
        assert settings.remote.bucket == "portfolio-images"
        assert settings.remote.document_key == 1
        assert settings.cache.key == "portfolio_data"
        assert settings.api.cors_origins == ["*"]
        settings.validate()

    def test_remote_from_env(self, clean_env):
        clean_env.setenv("SUPABASE_URL", "https://demo.supabase.co")
        clean_env.setenv("SUPABASE_ANON_KEY", "anon")
        assert RemoteConfig().is_configured is True

    def test_blank_values_are_unset(self, clean_env):
        clean_env.setenv("SUPABASE_URL", "   ")
        clean_env.setenv("SUPABASE_ANON_KEY", "anon")
        assert RemoteConfig().is_configured is False

    def test_cors_list(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
        assert Settings().api.cors_origins == ["https://a.example", "https://b.example"]

    def test_bad_upload_backend(self, clean_env):
        clean_env.setenv("UPLOAD_BACKEND", "ftp")
        with pytest.raises(ConfigurationError) as exc:
            Settings().validate()
        assert "UPLOAD_BACKEND" in exc.value.message

    @pytest.mark.parametrize("key", ["portfolio data", "../escape", "a/b", ""])
    def test_bad_cache_key(self, clean_env, key):
        settings = Settings()
        settings.cache.key = key
        with pytest.raises(ConfigurationError) as exc:
            settings.validate()
        assert "CACHE_KEY" in exc.value.message

    def test_environment_read_once(self, clean_env):
        clean_env.setenv("ENVIRONMENT", "staging")
        settings = Settings()
        assert settings.environment == "staging"
        assert settings.security.environment == "staging"

    def test_production_needs_secrets(self, clean_env):
        clean_env.setenv("ENVIRONMENT", "production")
        with pytest.raises(ConfigurationError) as exc:
            Settings().validate()
        assert len(exc.value.context["errors"]) == 2

    def test_to_dict_hides_credentials(self, clean_env):
        clean_env.setenv("SUPABASE_ANON_KEY", "anon-secret")
        assert "anon-secret" not in str(Settings().to_dict())


class TestLogging:

    def setup_method(self):
        self.saved = logging.getLogger().handlers[:]

    def teardown_method(self):
        logging.getLogger().handlers = self.saved

    def test_json_format(self):
        root = setup_logging("DEBUG", "json")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_text_format(self):
        root = setup_logging("warning", "text")
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
