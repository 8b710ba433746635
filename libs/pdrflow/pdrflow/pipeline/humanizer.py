"""Raw contact transcript -> readable AGENT/CUSTOMER dialogue."""

from __future__ import annotations

import json
import logging
from typing import NamedTuple

from pdrflow.exceptions import HumanizationError, ProviderError
from pdrflow.models.artifact import TRANSCRIPT_SUFFIX
from pdrflow.providers.llm.base import LLMProvider, Message
from pdrflow.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

HUMANIZED_SUFFIX = "_TRANSCRIPT.txt"
DEFAULT_MAX_LINES = 10_000

TRANSCRIPT_PROMPT = (
    "I have a JSON transcript from an Amazon Connect conversation. "
    "Please convert it into a human-readable format with AGENT and CUSTOMER as the keys. "
    "Here is the JSON transcript:\n\n"
    "{transcript}"
)


class HumanizeOutcome(NamedTuple):
    key: str
    succeeded: bool


def humanized_key(raw_key: str) -> str:
    """contact.json -> contact_TRANSCRIPT.txt"""
    if raw_key.endswith(TRANSCRIPT_SUFFIX):
        return raw_key[: -len(TRANSCRIPT_SUFFIX)] + HUMANIZED_SUFFIX
    return raw_key + HUMANIZED_SUFFIX


def build_transcript_messages(raw_content: str) -> list[Message]:
    """Embed the (compacted) JSON transcript in the conversion instruction.

    Raises:
        ValueError: The content is not valid JSON (e.g. it was cut at the line cap).
        RecursionError: The document nests deeper than the parser can follow.
    """
    document = json.loads(raw_content)
    compact = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
    return [Message(role="user", content=TRANSCRIPT_PROMPT.format(transcript=compact))]


class TranscriptHumanizer:
    def __init__(
        self,
        store: ObjectStore,
        llm: LLMProvider,
        *,
        max_lines: int = DEFAULT_MAX_LINES,
        max_tokens: int | None = None,
    ) -> None:
        self.store = store
        self.llm = llm
        self.max_lines = int(max_lines)
        self.max_tokens = max_tokens

    async def convert(self, bucket: str, raw_key: str, *, contact_id: str | None = None) -> str:
        """Fetch, transform and persist one transcript; return the new key."""

        def _error(message: str) -> HumanizationError:
            return HumanizationError(message, contact_id=contact_id, bucket=bucket, key=raw_key)

        try:
            lines = await self.store.get_lines(bucket, raw_key, max_lines=self.max_lines)
        except Exception as exc:
            raise _error(f"fetch failed: {exc}") from exc

        try:
            messages = build_transcript_messages("".join(lines))
        except (ValueError, RecursionError) as exc:
            raise _error(f"transcript is not usable JSON: {exc!r}") from exc

        try:
            text = await self.llm.complete(messages, temperature=0.0, max_tokens=self.max_tokens)
        except ProviderError as exc:
            raise HumanizationError(
                f"text generation failed: {exc.message}",
                contact_id=contact_id,
                bucket=bucket,
                key=raw_key,
                error_code=exc.error_code,
            ) from exc
        except Exception as exc:
            raise _error(f"text generation failed: {exc}") from exc

        out_key = humanized_key(raw_key)
        try:
            await self.store.put_text(bucket, out_key, text, content_type="text/plain")
        except Exception as exc:
            raise _error(f"persisting {out_key} failed: {exc}") from exc
        return out_key

    async def humanize(self, bucket: str, raw_key: str, *, contact_id: str | None = None) -> HumanizeOutcome:
        """Return the key to link: the readable transcript, or the raw one on failure."""
        try:
            out_key = await self.convert(bucket, raw_key, contact_id=contact_id)
        except HumanizationError as exc:
            logger.warning(
                "transcript humanization failed, linking raw transcript "
                "(contact_id=%s, bucket=%s, key=%s, error_code=%s): %s",
                contact_id,
                bucket,
                raw_key,
                getattr(exc.error_code, "value", exc.error_code),
                exc.message,
            )
            return HumanizeOutcome(key=raw_key, succeeded=False)

        logger.info(
            "transcript humanized (contact_id=%s, bucket=%s, key=%s)",
            contact_id,
            bucket,
            out_key,
        )
        return HumanizeOutcome(key=out_key, succeeded=True)
