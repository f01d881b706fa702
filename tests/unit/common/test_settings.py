"""Tests for environment-driven settings."""

from permtree.core.config import Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PERMTREE_STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("PERMTREE_DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.storage_backend == "sql"
        assert settings.database_url == "sqlite:///permtree.db"
        assert settings.log_level == "INFO"
        assert settings.log_to_file is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PERMTREE_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("PERMTREE_LOG_TO_FILE", "true")
        settings = Settings(_env_file=None)
        assert settings.storage_backend == "memory"
        assert settings.log_to_file is True

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PERMTREE_DATABASE_URL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("PERMTREE_DATABASE_URL=sqlite:///from-file.db\n")
        settings = Settings(_env_file=str(env_file))
        assert settings.database_url == "sqlite:///from-file.db"

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
