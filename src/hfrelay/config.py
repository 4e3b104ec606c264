"""hfrelay configuration: loads from hfrelay.yaml + environment."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path("hfrelay.yaml")

FLAN_T5_LARGE_URL = "https://api-inference.huggingface.co/models/google/flan-t5-large"


class ConfigError(RuntimeError):
    """Raised when the process cannot start with the given configuration."""


def _load_yaml_config(path: Path = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """Load the optional YAML overlay from the working directory."""
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


class TelegramConfig(BaseSettings):
    """Telegram bot configuration."""

    token: str = Field(
        default="",
        validation_alias="TELEGRAM_TOKEN",
        description="Bot API token",
    )
    api_base: str = Field(default="https://api.telegram.org")
    webhook_path: str = Field(default="/api/webhook")
    webhook_secret: str | None = Field(
        default=None,
        description="Expected X-Telegram-Bot-Api-Secret-Token header. Empty = not checked",
    )
    timeout_s: float = Field(default=10.0, gt=0)

    # TELEGRAM_TOKEN is read without the prefix via its alias
    model_config = SettingsConfigDict(
        env_prefix="HFRELAY_TELEGRAM_", populate_by_name=True, extra="ignore"
    )

    @field_validator("webhook_path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        path = value.strip() or "/api/webhook"
        return path if path.startswith("/") else f"/{path}"


class InferenceConfig(BaseSettings):
    """Hugging Face inference API configuration."""

    api_token: str = Field(
        default="",
        validation_alias="HF_API_TOKEN",
        description="Bearer token for the inference API",
    )
    api_url: str = Field(default=FLAN_T5_LARGE_URL)
    timeout_s: float = Field(default=30.0, gt=0)
    max_length: int = Field(default=150, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_p: float = Field(default=0.85, gt=0.0, le=1.0)

    model_config = SettingsConfigDict(
        env_prefix="HFRELAY_INFERENCE_", populate_by_name=True, extra="ignore"
    )


class RelayConfig(BaseSettings):
    """Root hfrelay configuration."""

    # Server
    host: str = Field(default="0.0.0.0", description="Server bind host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server bind port")

    # Sub-configs
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")

    model_config = SettingsConfigDict(env_prefix="HFRELAY_")

    @classmethod
    def load(cls, path: Path = DEFAULT_CONFIG_PATH) -> RelayConfig:
        """Load config from YAML + env vars (env takes precedence)."""
        yaml_cfg = _load_yaml_config(path)

        telegram_data = yaml_cfg.pop("telegram", None) or {}
        inference_data = yaml_cfg.pop("inference", None) or {}

        kwargs: dict[str, Any] = _without_env_overrides(cls, yaml_cfg)
        kwargs["telegram"] = TelegramConfig(**_without_env_overrides(TelegramConfig, telegram_data))
        kwargs["inference"] = InferenceConfig(
            **_without_env_overrides(InferenceConfig, inference_data)
        )
        return cls(**kwargs)


def _without_env_overrides(
    settings_cls: type[BaseSettings], data: dict[str, Any]
) -> dict[str, Any]:
    # Init kwargs beat env vars in pydantic-settings, so drop YAML keys the env already sets
    from_env = settings_cls().model_fields_set
    return {key: value for key, value in data.items() if key not in from_env}


def validate_startup(config: RelayConfig) -> None:
    """Reject configurations the relay cannot serve with."""
    if not config.telegram.token.strip():
        raise ConfigError("TELEGRAM_TOKEN is not set")


# Singleton
_config: RelayConfig | None = None


def get_config() -> RelayConfig:
    """Get or create the global config."""
    global _config
    if _config is None:
        _config = RelayConfig.load()
    return _config
