"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Protocol


@dataclass
class ToolsConfig:
    """Carvel tool locations."""
    kapp_binary: str
    kbld_binary: str


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_tools_config(self) -> ToolsConfig:
        """Get tool configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        ...


def _env_int(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_tools_config(self) -> ToolsConfig:
        """Get tool configuration from environment variables."""
        return ToolsConfig(
            kapp_binary=os.getenv("KAPP_BINARY", "kapp"),
            kbld_binary=os.getenv("KBLD_BINARY", "kbld"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=_env_int("API_PORT", "8080"),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
        )

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration from environment variables."""
        return LoggingConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
