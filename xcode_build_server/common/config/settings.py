from functools import lru_cache
from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator

from xcode_build_server.common.config.constants import (
    DEFAULT_CONFIGURATION,
    DEFAULT_DESTINATION,
    EXTRACTION_TIMEOUT_SECONDS,
    MAX_BUFFER_BYTES,
)


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="XCODE_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode flag")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Emit JSON formatted logs")

    base_dir: Optional[str] = Field(
        default=None,
        description="Directory under which build logs are stored"
    )
    log_dir_name: str = Field(default="build-logs")

    default_configuration: str = Field(default=DEFAULT_CONFIGURATION)
    default_destination: str = Field(default=DEFAULT_DESTINATION)

    xcodebuild_binary: str = Field(default="xcodebuild")
    xcrun_binary: str = Field(default="xcrun")
    xcresulttool_legacy: bool = Field(
        default=False,
        description="Pass --legacy to 'xcresulttool get' (required by Xcode 16+)"
    )

    max_buffer_bytes: int = Field(default=MAX_BUFFER_BYTES, ge=1024)
    process_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    extraction_timeout_seconds: float = Field(default=EXTRACTION_TIMEOUT_SECONDS, gt=0)

    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("log_dir_name")
    @classmethod
    def validate_log_dir_name(cls, v: str) -> str:
        if not v or "/" in v or v in {".", ".."}:
            raise ValueError(f"Invalid log directory name: {v!r}")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        if self.environment == Environment.PRODUCTION and self.debug:
            raise ValueError("Debug mode must be disabled in production")
        return self

    def get_base_dir(self) -> Path:
        if not self.base_dir:
            raise ValueError("Base directory is required")
        return Path(self.base_dir)

    def get_log_dir(self) -> Path:
        return self.get_base_dir() / self.log_dir_name

@lru_cache()
def get_settings() -> Settings:
    return Settings()
