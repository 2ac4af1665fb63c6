"""
Tests for flowinit.config.
"""

from flowinit.config import Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "LOG_FORMAT", "DEFAULT_COLLEGE", "OUTPUT_DIR"):
            monkeypatch.delenv(f"FLOWINIT_{name}", raising=False)

        settings = Settings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.log_format == "console"
        assert settings.default_college is None
        assert settings.output_dir == "initializers"

    def test_only_compiler_settings_are_declared(self):
        """Every declared setting is read by the CLI or the logging setup."""
        assert set(Settings.model_fields) == {"log_level", "log_format", "default_college", "output_dir"}

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("FLOWINIT_LOG_FORMAT", "json")
        monkeypatch.setenv("FLOWINIT_OUTPUT_DIR", "build/initializers")

        settings = Settings(_env_file=None)

        assert settings.log_format == "json"
        assert settings.output_dir == "build/initializers"

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
