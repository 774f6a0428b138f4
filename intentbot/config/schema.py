"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

from intentbot.core.dispatcher import DEFAULT_QUERY_FAILURE_MESSAGE, DEFAULT_WORKERS
from intentbot.nlu.dialogflow import DEFAULT_API_VERSION, DEFAULT_BASE_URL, is_valid_client_token


class NLUConfig(BaseModel):
    """Dialogflow NLU service configuration."""

    model_config = ConfigDict(extra="ignore")

    client_token: str = ""  # Client access token from the Dialogflow agent settings
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    lang: str = "en"
    timeout_seconds: float = Field(default=10.0, gt=0)

    @property
    def token_valid(self) -> bool:
        return is_valid_client_token(self.client_token)


class DispatcherConfig(BaseModel):
    """Worker pool and failure policy configuration."""

    model_config = ConfigDict(extra="ignore")

    workers: int = Field(default=DEFAULT_WORKERS, ge=1)
    queue_maxsize: int = Field(default=0, ge=0)  # 0 means unbounded
    query_timeout_seconds: float | None = None  # None waits for the NLU client timeout only
    on_query_failure: Literal["drop", "report"] = "drop"
    query_failure_message: str = DEFAULT_QUERY_FAILURE_MESSAGE

    @field_validator("query_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            return None
        return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="ignore")

    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    diagnostics_enabled: bool = True  # Per-request line with author, server, channel and message text

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class TelemetryConfig(BaseModel):
    """Metrics configuration."""

    model_config = ConfigDict(extra="ignore")

    prometheus_enabled: bool = False
    host: str = "127.0.0.1"  # localhost only by default
    port: int = 9464


class Config(BaseSettings):
    """Root configuration for intentbot."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, env_prefix="INTENTBOT_", env_nested_delimiter="__")

    config_version: int = 1
    nlu: NLUConfig = Field(default_factory=NLUConfig)
    dispatcher: DispatcherConfig = Field(default_factory=DispatcherConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @property
    def intelligence_enabled(self) -> bool:
        """Whether the dispatcher can be enabled with the configured NLU token."""
        return self.nlu.token_valid
