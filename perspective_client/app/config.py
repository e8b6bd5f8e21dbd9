"""Client configuration management."""

import logging
from functools import lru_cache
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings

COMMENT_ANALYZER_URL = (
    "https://commentanalyzer.googleapis.com/v1alpha1/comments:analyze"
)


class Settings(BaseSettings):
    """Client settings managed via Pydantic BaseSettings.

    Attributes:
        PERSPECTIVE_API_KEY: API key sent as the ``key`` query parameter.
        PERSPECTIVE_API_URL: The comment analyzer endpoint.
        REQUEST_TIMEOUT: Transport timeout in seconds.
        MAX_TEXT_LENGTH: Maximum comment length accepted before truncation.
        DEFAULT_ATTRIBUTES: Comma-separated attributes requested by default.
        LOG_LEVEL: The logging level for the client.
        OTEL_ENABLED: Whether OpenTelemetry tracing is enabled.
        OTEL_SERVICE_NAME: The service name for OpenTelemetry.
        OTEL_EXPORTER_OTLP_ENDPOINT: The OTLP endpoint for OpenTelemetry.
        OTEL_TRACES_SAMPLER_ARG: The sampling rate for traces.
        OTLP_SECURE: Whether to use a secure connection for OTLP.
        METRICS_ENABLED: Whether Prometheus metrics are recorded.
    """

    # Perspective API
    PERSPECTIVE_API_KEY: str | None = None
    PERSPECTIVE_API_URL: str = COMMENT_ANALYZER_URL
    REQUEST_TIMEOUT: float = 10.0

    # Payload defaults
    MAX_TEXT_LENGTH: int = 3000
    DEFAULT_ATTRIBUTES: str = "TOXICITY"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"

    # OpenTelemetry Configuration
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "perspective-client"
    OTEL_EXPORTER_OTLP_ENDPOINT: str = ""
    OTEL_TRACES_SAMPLER_ARG: float = 1.0
    OTLP_SECURE: bool = False

    # Prometheus Configuration
    METRICS_ENABLED: bool = True

    @model_validator(mode="before")
    @classmethod
    def _strip_inline_comments(cls, data: Any) -> Any:
        if isinstance(data, dict):
            cleaned_data = {}
            for key, value in data.items():
                if isinstance(value, str):
                    cleaned_data[key] = value.split("#")[0].strip()
                else:
                    cleaned_data[key] = value
            return cleaned_data
        return data

    @property
    def default_attributes(self) -> list[str]:
        """Get the attributes requested when the caller names none.

        Returns:
            Upper-cased attribute names split from DEFAULT_ATTRIBUTES. Falls
            back to ``["TOXICITY"]`` when the setting holds no names.
        """
        names = [
            name.strip().upper()
            for name in self.DEFAULT_ATTRIBUTES.split(",")
            if name.strip()
        ]
        return names or ["TOXICITY"]

    @property
    def log_level(self) -> int:
        """Convert the string log level from settings to a logging constant.

        Returns:
            The integer value of the logging level (e.g., logging.INFO,
            logging.DEBUG). Defaults to logging.INFO if the configured
            LOG_LEVEL is invalid.
        """
        return getattr(logging, self.LOG_LEVEL.upper(), logging.INFO)

    class Config:
        """Pydantic configuration class for Settings.

        Attributes:
            env_file (str): The name of the environment file to load (e.g., ".env").
            case_sensitive (bool): Whether environment variable names are case-sensitive.
            extra (str): Unrelated variables in the environment file are ignored.
        """

        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Create and cache a Settings instance.

    Returns:
        A cached instance of the Settings class.
    """
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging at the configured level.

    Args:
        settings: Settings to read LOG_LEVEL from. Uses the cached settings
            when omitted.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)
    logging.getLogger("httpx").setLevel(max(settings.log_level, logging.WARNING))


settings = get_settings()
