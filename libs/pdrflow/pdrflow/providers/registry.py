"""Provider factory and registry."""

from __future__ import annotations

from typing import Any
from collections.abc import Mapping

from pdrflow.config import Settings
from pdrflow.exceptions import ConfigurationError
from pdrflow.providers.contact.base import ContactDirectory
from pdrflow.providers.llm.base import LLMProvider


def get_llm_provider(config: Mapping[str, Any]) -> LLMProvider:
    """Get LLM provider based on configuration."""
    provider_type = str(config.get("provider", "bedrock") or "bedrock").strip().lower()

    match provider_type:
        case "bedrock":
            from pdrflow.providers.llm.bedrock import BedrockProvider

            model = str(config.get("model") or "").strip()
            if not model:
                raise ConfigurationError("Bedrock provider requires a model id (LLM_MODEL)")
            return BedrockProvider(
                model,
                region=config.get("region"),
                timeout_s=float(config.get("timeout_s", 600.0)),
                connect_timeout_s=float(config.get("connect_timeout_s", 30.0)),
            )
        case "anthropic" | "claude":
            from pdrflow.providers.llm.anthropic import DEFAULT_ANTHROPIC_MODEL, AnthropicProvider

            api_key = str(config.get("api_key") or "").strip()
            if not api_key:
                raise ConfigurationError("Anthropic provider requires api_key")
            model = str(config.get("model") or DEFAULT_ANTHROPIC_MODEL).strip()
            if model.startswith("anthropic."):
                raise ConfigurationError(
                    f"LLM_MODEL {model!r} is a Bedrock model id; set an Anthropic API model name"
                )
            return AnthropicProvider(
                api_key=api_key,
                model=model,
                base_url=config.get("base_url"),
                timeout_s=float(config.get("timeout_s", 600.0)),
            )
        case _:
            raise ConfigurationError(f"Unknown LLM provider: {provider_type}")


def get_contact_directory(settings: Settings) -> ContactDirectory:
    """Get the contact directory for the configured contact-center instance."""
    from pdrflow.providers.contact.connect import ConnectContactDirectory

    instance_id = str(settings.instance_id or "").strip()
    if not instance_id:
        raise ConfigurationError("INSTANCE_ID is not configured")
    return ConnectContactDirectory(instance_id, region=settings.aws_region)
