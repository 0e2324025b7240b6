"""Tests for settings, the YAML loader and error types."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.core.config import ApiSettings, ConfigLoader, LoggingSettings, Settings
from src.core.config.settings import DEFAULT_HOST_URL, DEFAULT_INTEL_URL
from src.core.exceptions import (
    ConfigurationError,
    CSAPIError,
    HTTPStatusError,
    MissingCredentialsError,
    MissingParametersError,
)


class TestApiSettings:
    """Tests for ApiSettings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CS_ID", raising=False)
        monkeypatch.delenv("CS_KEY", raising=False)
        settings = ApiSettings()

        assert settings.id == ""
        assert settings.key == ""
        assert settings.intel_url == DEFAULT_INTEL_URL
        assert settings.host_url == DEFAULT_HOST_URL
        assert settings.timeout_seconds == 30.0
        assert settings.trace is False

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CS_ID", "env-id")
        monkeypatch.setenv("CS_KEY", "env-key")
        monkeypatch.setenv("CS_TRACE", "true")
        settings = ApiSettings()

        assert settings.id == "env-id"
        assert settings.key == "env-key"
        assert settings.trace is True

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ApiSettings(timeout_seconds=0)


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_level_normalized(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_empty_file_is_none(self) -> None:
        assert LoggingSettings(file="").file is None


class TestSettingsFromYaml:
    """Tests for Settings.from_yaml."""

    def test_sections(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text(
            "api:\n"
            "  id: yaml-id\n"
            "  key: yaml-key\n"
            "  host_url: https://host.example.com/\n"
            "logging:\n"
            "  level: info\n"
            "  use_rich: false\n"
        )
        settings = Settings.from_yaml(path)

        assert settings.api.id == "yaml-id"
        assert settings.api.host_url == "https://host.example.com/"
        assert settings.logging.level == "INFO"
        assert settings.logging.use_rich is False

    def test_missing_sections_use_defaults(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("")
        settings = Settings.from_yaml(path)

        assert settings.api.intel_url == DEFAULT_INTEL_URL
        assert settings.logging.level == "WARNING"


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_get_dotted(self, temp_dir: Path) -> None:
        path = temp_dir / "c.yaml"
        path.write_text("api:\n  trace: true\n")
        loader = ConfigLoader(path)
        loader.load()

        assert loader.get("api.trace") is True
        assert loader.get("api.missing", "fallback") == "fallback"
        assert loader.get("nope.deeper") is None

    def test_no_path(self) -> None:
        assert ConfigLoader().load() == {}

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(temp_dir / "absent.yaml").load()
        assert exc_info.value.code == "config_error"

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.yaml"
        path.write_text("api: [unclosed\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(path).load()
        assert "error" in exc_info.value.details

    def test_non_mapping(self, temp_dir: Path) -> None:
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader(path).load()

    def test_malformed_section(self, temp_dir: Path) -> None:
        path = temp_dir / "c.yaml"
        path.write_text("api: just-a-string\n")
        loader = ConfigLoader(path)
        loader.load()
        assert loader.get_section("api") == {}


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_str_includes_code(self) -> None:
        assert str(MissingCredentialsError()) == (
            "missing_credentials: You must provide the CrowdStrike API ID and key"
        )

    def test_all_are_csapi_errors(self) -> None:
        assert isinstance(HTTPStatusError(500, "Internal Server Error"), CSAPIError)
        assert isinstance(ConfigurationError("x"), CSAPIError)

    def test_missing_parameters_lists_names(self) -> None:
        err = MissingParametersError(missing=["type", "value"])
        assert err.missing == ["type", "value"]
        assert err.details == {"missing": ["type", "value"]}

    def test_code_override(self) -> None:
        assert CSAPIError("boom", code="custom").code == "custom"
        assert CSAPIError("boom").code == "error"
