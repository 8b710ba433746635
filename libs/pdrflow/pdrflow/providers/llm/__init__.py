"""LLM Provider implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pdrflow.providers.llm.base import LLMCompletionResult, LLMProvider, LLMUsage, Message

if TYPE_CHECKING:
    from pdrflow.providers.llm.anthropic import AnthropicProvider
    from pdrflow.providers.llm.bedrock import BedrockProvider

__all__ = ["AnthropicProvider", "BedrockProvider", "LLMCompletionResult", "LLMProvider", "LLMUsage", "Message"]


def __getattr__(name: str) -> Any:
    if name == "AnthropicProvider":
        from pdrflow.providers.llm.anthropic import AnthropicProvider

        return AnthropicProvider
    if name == "BedrockProvider":
        from pdrflow.providers.llm.bedrock import BedrockProvider

        return BedrockProvider
    raise AttributeError(name)
