"""LLM Provider base class."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class Message:
    """A chat message."""

    role: str  # "system" | "user" | "assistant"
    content: str


@dataclass
class LLMUsage:
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


@dataclass
class LLMCompletionResult:
    text: str
    usage: LLMUsage | None = None


class LLMProvider(ABC):
    """Abstract base class for text-generation providers."""

    provider: str = "llm"
    model: str = ""

    @abstractmethod
    async def complete_with_usage(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMCompletionResult:
        """Generate a completion for a conversation.

        Args:
            messages: List of chat messages.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate (provider default when None).

        Returns:
            Text of the first content block of the response message, plus usage.

        Raises:
            ProviderError: The call failed or the response carried no text.
        """
        ...

    async def complete(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> str:
        result = await self.complete_with_usage(messages, temperature=temperature, max_tokens=max_tokens)
        return result.text

    async def close(self) -> None:
        """Close any underlying resources (optional)."""
        return None
