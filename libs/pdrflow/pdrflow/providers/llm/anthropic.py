"""Anthropic LLM Provider implementation using official SDK."""

from __future__ import annotations

import logging
import time

import anthropic

from pdrflow.error_codes import ErrorCode
from pdrflow.exceptions import ProviderError
from pdrflow.providers.llm._utils import build_usage, log_llm_call, normalize_role, split_system_messages
from pdrflow.providers.llm.base import LLMCompletionResult, LLMProvider, Message

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 4096


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API provider (direct API, no Bedrock)."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        base_url: str | None = None,
        *,
        timeout_s: float = 600.0,
    ) -> None:
        self.provider = "anthropic"
        self.api_key = str(api_key or "").strip()
        if not self.api_key:
            raise ValueError("AnthropicProvider requires api_key")
        self.model = str(model or "").strip() or DEFAULT_ANTHROPIC_MODEL

        # SDK expects base_url without /v1 suffix
        resolved = str(base_url or "").strip().rstrip("/")
        if resolved.endswith("/v1"):
            resolved = resolved[:-3]
        self.base_url = resolved or None

        self._client = anthropic.AsyncAnthropic(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=float(timeout_s),
            max_retries=0,
        )

    async def complete_with_usage(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMCompletionResult:
        system, non_system = split_system_messages(messages)

        started = time.perf_counter()
        try:
            response = await self._client.messages.create(
                model=self.model,
                messages=[
                    {"role": normalize_role(m.role), "content": str(m.content or "")} for m in non_system
                ],
                system=system or anthropic.NOT_GIVEN,
                temperature=float(temperature),
                max_tokens=int(max_tokens) if max_tokens is not None else DEFAULT_MAX_TOKENS,
            )
        except anthropic.APITimeoutError as exc:
            logger.warning("llm timeout: %s", exc)
            raise ProviderError(self.provider, str(exc), error_code=ErrorCode.LLM_TIMEOUT) from exc
        except anthropic.APIConnectionError as exc:
            logger.warning("llm connection error: %s", exc)
            raise ProviderError(self.provider, str(exc), error_code=ErrorCode.LLM_FAILED) from exc
        except anthropic.APIStatusError as exc:
            logger.warning("llm request failed (status=%s): %s", exc.status_code, exc)
            raise ProviderError(self.provider, str(exc), error_code=ErrorCode.LLM_FAILED) from exc

        blocks = list(response.content or [])
        text = getattr(blocks[0], "text", None) if blocks else None
        if not isinstance(text, str) or not text.strip():
            raise ProviderError(
                self.provider,
                "malformed response: first content block carries no text",
                error_code=ErrorCode.LLM_FAILED,
            )

        latency_ms = int((time.perf_counter() - started) * 1000)
        usage = None
        if response.usage is not None:
            usage = build_usage(response.usage.input_tokens, response.usage.output_tokens)
        log_llm_call(logger, provider=self.provider, model=self.model, latency_ms=latency_ms, usage=usage)
        return LLMCompletionResult(text=text, usage=usage)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    async def __aenter__(self) -> "AnthropicProvider":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object | None,
    ) -> None:
        await self.close()
