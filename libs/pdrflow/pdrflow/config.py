"""Configuration management using pydantic-settings."""

from datetime import tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, model_validator
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict

from pdrflow.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

DEFAULT_BEDROCK_MODEL_ID = "anthropic.claude-3-5-sonnet-20241022-v2:0"


class LLMConfig(BaseSettings):
    """Text-generation provider configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    provider: str = "bedrock"  # "bedrock" | "anthropic"
    model: str = Field(
        default=DEFAULT_BEDROCK_MODEL_ID,
        validation_alias=AliasChoices("LLM_MODEL", "BedrockModelId"),
    )
    # Transcript conversion dominates run time; keep the read timeout long.
    timeout_s: float = Field(
        default=600.0,
        gt=0,
        validation_alias=AliasChoices("LLM_TIMEOUT_S", "BedrockTimeoutInSecs"),
    )
    connect_timeout_s: float = Field(default=30.0, gt=0)
    max_tokens: int | None = Field(default=None, ge=1)
    region: str | None = None

    # anthropic only
    api_key: str = ""
    base_url: str | None = None


class StorageConfig(BaseSettings):
    """Object store backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: str = "s3"  # "s3" | "local"
    local_dir: str = "./data"
    endpoint_url: str | None = None
    region: str | None = None


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Destination of the output manifest
    destination_bucket: str = Field(
        default="",
        validation_alias=AliasChoices("DESTINATION_BUCKET", "DestinationBucket"),
    )
    output_prefix: str = "PDR/"

    # Contact center instance whose contacts are resolved
    instance_id: str = ""
    aws_region: str | None = Field(default=None, validation_alias=AliasChoices("AWS_REGION"))

    max_manifest_lines: int = Field(default=1_000_000, ge=1)
    transcript_max_lines: int = Field(default=10_000, ge=1)
    # IANA zone for the storage prefix date; unset means the process local zone.
    prefix_timezone: str | None = None

    log_dir: str = "./logs"

    llm: LLMConfig = Field(default_factory=LLMConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def _validate_timezone(self) -> "Settings":
        name = str(self.prefix_timezone or "").strip()
        if not name:
            self.prefix_timezone = None
            return self
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown PREFIX_TIMEZONE: {name!r}") from exc
        self.prefix_timezone = name
        return self

    @property
    def prefix_tzinfo(self) -> tzinfo | None:
        if not self.prefix_timezone:
            return None
        return ZoneInfo(self.prefix_timezone)

    def llm_config(self) -> dict[str, Any]:
        """Return an LLM config dict for the provider registry."""
        cfg = self.llm.model_dump()
        provider = str(cfg.get("provider") or "").strip().lower()
        if not provider:
            raise ConfigurationError("LLM_PROVIDER is not configured")
        cfg["provider"] = provider
        cfg["region"] = cfg.get("region") or self.aws_region
        if not str(cfg.get("base_url") or "").strip():
            cfg.pop("base_url", None)
        return cfg

    def require_destination_bucket(self) -> str:
        bucket = str(self.destination_bucket or "").strip()
        if not bucket:
            raise ConfigurationError("DESTINATION_BUCKET is not configured")
        return bucket
