"""Amazon Bedrock LLM provider (Converse API via boto3)."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ConnectTimeoutError, ReadTimeoutError

from pdrflow.error_codes import ErrorCode
from pdrflow.exceptions import ProviderError
from pdrflow.providers.llm._utils import build_usage, log_llm_call, normalize_role, split_system_messages
from pdrflow.providers.llm.base import LLMCompletionResult, LLMProvider, Message

logger = logging.getLogger(__name__)

_TIMEOUT_CODES = {"ModelTimeoutException", "RequestTimeout", "RequestTimeoutException"}


def _extract_first_text(resp: dict[str, Any]) -> str:
    content = (((resp.get("output") or {}).get("message") or {}).get("content")) or []
    if not content:
        raise ValueError("response message has no content blocks")
    text = content[0].get("text") if isinstance(content[0], dict) else None
    if not isinstance(text, str) or not text.strip():
        raise ValueError("first content block carries no text")
    return text


class BedrockProvider(LLMProvider):
    """Bedrock Converse provider. One attempt per call; the SDK's own retries are disabled."""

    def __init__(
        self,
        model: str,
        *,
        region: str | None = None,
        timeout_s: float = 600.0,
        connect_timeout_s: float = 30.0,
        client: Any | None = None,
    ) -> None:
        self.provider = "bedrock"
        self.model = str(model or "").strip()
        if not self.model:
            raise ValueError("BedrockProvider requires model")
        self.region = region
        self.timeout_s = float(timeout_s)
        self.connect_timeout_s = float(connect_timeout_s)
        self._client: Any | None = client

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client

        import boto3

        self._client = boto3.client(
            "bedrock-runtime",
            region_name=self.region,
            config=Config(
                connect_timeout=self.connect_timeout_s,
                read_timeout=self.timeout_s,
                retries={"total_max_attempts": 1},
            ),
        )
        return self._client

    async def complete_with_usage(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMCompletionResult:
        client = self._ensure_client()
        system, non_system = split_system_messages(messages)

        request: dict[str, Any] = {
            "modelId": self.model,
            "messages": [
                {"role": normalize_role(m.role), "content": [{"text": str(m.content or "")}]}
                for m in non_system
            ],
            "inferenceConfig": {"temperature": float(temperature)},
        }
        if max_tokens is not None:
            request["inferenceConfig"]["maxTokens"] = int(max_tokens)
        if system:
            request["system"] = [{"text": system}]

        started = time.perf_counter()
        try:
            resp: dict[str, Any] = await asyncio.to_thread(lambda: dict(client.converse(**request)))
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", "") or "")
            logger.warning("llm request failed (provider=%s, model=%s, code=%s)", self.provider, self.model, code)
            raise ProviderError(
                self.provider,
                str(exc),
                error_code=ErrorCode.LLM_TIMEOUT if code in _TIMEOUT_CODES else ErrorCode.LLM_FAILED,
            ) from exc
        except (ReadTimeoutError, ConnectTimeoutError) as exc:
            logger.warning("llm timeout (provider=%s, model=%s): %s", self.provider, self.model, exc)
            raise ProviderError(self.provider, str(exc), error_code=ErrorCode.LLM_TIMEOUT) from exc
        except BotoCoreError as exc:
            logger.warning("llm connection error (provider=%s, model=%s): %s", self.provider, self.model, exc)
            raise ProviderError(self.provider, str(exc), error_code=ErrorCode.LLM_FAILED) from exc

        try:
            text = _extract_first_text(resp)
        except ValueError as exc:
            raise ProviderError(self.provider, f"malformed response: {exc}", error_code=ErrorCode.LLM_FAILED) from exc

        latency_ms = int((time.perf_counter() - started) * 1000)
        raw_usage = resp.get("usage") or {}
        usage = build_usage(
            raw_usage.get("inputTokens"),
            raw_usage.get("outputTokens"),
            total_tokens=raw_usage.get("totalTokens"),
        )
        log_llm_call(logger, provider=self.provider, model=self.model, latency_ms=latency_ms, usage=usage)
        return LLMCompletionResult(text=text, usage=usage)
