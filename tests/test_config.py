"""Tests for settings loaded from the environment."""

from pathlib import Path

from config import Settings
from services import SERVICE_PROVIDER


class TestSettings:
    """Test the Settings class."""

    def test_defaults(self, monkeypatch):
        """Test the default values."""
        monkeypatch.delenv("SERVICE_REGISTRY_SYMBOL_MODEL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.symbol_model == "ast"
        assert settings.services_dir == "META-INF/services"
        assert SERVICE_PROVIDER in settings.marker_names
        assert settings.timestamp_format == "%Y-%m-%dT%H:%M:%S%z"

    def test_env_override(self, monkeypatch):
        """Test that SERVICE_REGISTRY_ variables override defaults."""
        monkeypatch.setenv("SERVICE_REGISTRY_SYMBOL_MODEL", "import")
        monkeypatch.setenv("SERVICE_REGISTRY_CLASS_OUTPUT_DIR", "/tmp/classes")
        settings = Settings(_env_file=None)
        assert settings.symbol_model == "import"
        assert settings.get_class_output_path() == Path("/tmp/classes")

    def test_output_paths_fall_back(self, monkeypatch, tmp_path):
        """Test fallback to the given default, then the working directory."""
        monkeypatch.delenv("SERVICE_REGISTRY_SOURCE_OUTPUT_DIR", raising=False)
        monkeypatch.chdir(tmp_path)
        settings = Settings(_env_file=None)
        assert settings.get_source_output_path(Path("src")) == Path("src")
        assert settings.get_source_output_path() == tmp_path
