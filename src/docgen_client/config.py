"""
Document Generator Client - Configuration Module

Centralized configuration management with Pydantic settings.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    CONSOLE = "console"


class GeneratorConfig(BaseSettings):
    """Document generation service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DOCUMENT_GENERATOR_",
        extra="ignore",
        frozen=True,
    )

    base_uri: str = Field(description="Base URI of the API used to generate documents")
    encryption_key: Optional[SecretStr] = Field(
        default=None,
        description="Key used to encrypt messages. It must match the one of the service.",
    )
    encrypt_data: bool = Field(default=False)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("base_uri", mode="before")
    @classmethod
    def normalize_base_uri(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("base_uri must be a non-empty string")
        return v.strip().rstrip("/")

    @field_validator("encryption_key", mode="before")
    @classmethod
    def empty_key_is_none(cls, v):
        if isinstance(v, str) and not v:
            return None
        return v

    def get_encryption_key(self) -> Optional[str]:
        """Unwrap the secret for the cipher."""
        if self.encryption_key is None:
            return None
        return self.encryption_key.get_secret_value()


class LogConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        extra="ignore"
    )

    level: str = Field(default="INFO")
    format: LogFormat = Field(default=LogFormat.CONSOLE)

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    generator: GeneratorConfig
    log: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **generator_overrides) -> "AppConfig":
        """Load configuration from environment file.

        Keyword arguments override generator settings read from the
        environment.
        """
        if env_file and Path(env_file).exists():
            from dotenv import load_dotenv
            load_dotenv(env_file)

        return cls(
            generator=GeneratorConfig(**generator_overrides),
            log=LogConfig(),
        )


def load_config(env_file: Optional[str] = None, **generator_overrides) -> AppConfig:
    """Load application configuration."""
    return AppConfig.from_env(env_file, **generator_overrides)
