"""Shared utilities for LLM providers."""

from __future__ import annotations

import logging

from pdrflow.providers.llm.base import LLMUsage, Message


def split_system_messages(messages: list[Message]) -> tuple[str | None, list[Message]]:
    system_chunks: list[str] = []
    non_system: list[Message] = []
    for m in messages:
        role = str(m.role or "").strip().lower()
        if role == "system":
            if m.content:
                system_chunks.append(str(m.content))
            continue
        non_system.append(m)
    system = "\n\n".join(system_chunks).strip() if system_chunks else ""
    return (system or None), non_system


def normalize_role(role: str | None) -> str:
    value = str(role or "").strip().lower()
    return value if value in {"user", "assistant"} else "user"


def build_usage(
    prompt_tokens: int | None,
    completion_tokens: int | None,
    *,
    total_tokens: int | None = None,
) -> LLMUsage | None:
    if prompt_tokens is None and completion_tokens is None and total_tokens is None:
        return None
    if total_tokens is None and prompt_tokens is not None and completion_tokens is not None:
        total_tokens = int(prompt_tokens + completion_tokens)
    return LLMUsage(
        prompt_tokens=int(prompt_tokens) if isinstance(prompt_tokens, int) else None,
        completion_tokens=int(completion_tokens) if isinstance(completion_tokens, int) else None,
        total_tokens=int(total_tokens) if isinstance(total_tokens, int) else None,
    )


def log_llm_call(
    logger: logging.Logger,
    *,
    provider: str,
    model: str,
    latency_ms: int,
    usage: LLMUsage | None,
) -> None:
    logger.info(
        "llm call (provider=%s, model=%s, latency_ms=%s, prompt_tokens=%s, completion_tokens=%s, total_tokens=%s)",
        provider,
        model,
        int(latency_ms),
        getattr(usage, "prompt_tokens", None),
        getattr(usage, "completion_tokens", None),
        getattr(usage, "total_tokens", None),
    )
