"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.config.loader import ConfigLoader

DEFAULT_INTEL_URL = "https://intelapi.crowdstrike.com/"
DEFAULT_HOST_URL = "https://falconapi.crowdstrike.com/"


class ApiSettings(BaseSettings):
    """API access settings.

    The id and key are read from ``CS_ID`` and ``CS_KEY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    id: str = Field(
        default="",
        description="API client id",
    )
    key: str = Field(
        default="",
        description="API client secret",
    )
    intel_url: str = Field(
        default=DEFAULT_INTEL_URL,
        min_length=8,
        description="Base URL of the intelligence API",
    )
    host_url: str = Field(
        default=DEFAULT_HOST_URL,
        min_length=8,
        description="Base URL of the host IOC management API",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )
    trace: bool = Field(
        default=False,
        description="Trace HTTP requests and responses",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CSAPI_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="WARNING",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CSAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api: ApiSettings = Field(default_factory=ApiSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Values from the file take precedence over the environment.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.
        """
        loader = ConfigLoader(path)
        loader.load()

        return cls(
            api=ApiSettings(**loader.get_section("api")),
            logging=LoggingSettings(**loader.get_section("logging")),
        )

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from default locations.

        Priority: config/default.yaml > environment variables > .env > defaults

        Returns:
            Settings instance.
        """
        default_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"
        if default_path.exists():
            return cls.from_yaml(default_path)

        return cls()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
