"""Configuration for the M-Pesa SDK.

Uses Pydantic v2 for validation with sensible defaults. Credentials are not
part of the configuration; they are passed to the client directly.
"""

from __future__ import annotations

import os
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TelemetryConfig(BaseModel):
    """Structured logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "mpesa-sdk"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard level name."""
        supported = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in supported:
            msg = f"Unsupported log level: {v}. Supported: {supported}"
            raise ValueError(msg)
        return v.upper()


class CacheConfig(BaseModel):
    """Access token cache configuration."""

    model_config = ConfigDict(frozen=True)

    # Subtracted from the provider's expiry before a token is handed out.
    token_expiry_margin: Annotated[int, Field(ge=0, le=600)] = 60


class ClientConfig(BaseModel):
    """Main configuration for the M-Pesa client."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0
    user_agent: str = "mpesa-sdk/0.1.0 Python"

    # Sub-configurations
    cache: CacheConfig = Field(default_factory=CacheConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "MPESA_") -> Self:
        """Create config from environment variables."""

        def get_env(key: str, default: str) -> str:
            return os.environ.get(f"{prefix}{key}", default)

        return cls(
            timeout=float(get_env("TIMEOUT", "30.0")),
            connect_timeout=float(get_env("CONNECT_TIMEOUT", "10.0")),
            cache=CacheConfig(
                token_expiry_margin=int(get_env("TOKEN_EXPIRY_MARGIN", "60")),
            ),
            telemetry=TelemetryConfig(
                log_level=get_env("LOG_LEVEL", "INFO"),
            ),
        )
