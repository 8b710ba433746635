from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from datetime import datetime, timezone

import pytest

from pdrflow.config import LLMConfig, Settings, StorageConfig
from pdrflow.error_codes import ErrorCode
from pdrflow.exceptions import ObjectNotFoundError, ProviderError
from pdrflow.models.contact import ContactDetails, StorageResourceType
from pdrflow.providers.contact.base import ContactDirectory
from pdrflow.providers.llm.base import LLMCompletionResult, LLMProvider, Message
from pdrflow.storage.object_store import ObjectStore, ObjectSummary


class InMemoryObjectStore(ObjectStore):
    """Object store double with S3-like listing order and per-call failure hooks."""

    def __init__(self, page_size: int = 1000) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.page_size = page_size
        self.calls: list[tuple[str, str, str]] = []
        self.fail_get: set[str] = set()
        self.fail_put: set[str] = set()
        self.fail_presign: set[str] = set()
        self.fail_list_prefixes: set[str] = set()

    def add(self, bucket: str, key: str, data: bytes | str = b"", content_type: str = "") -> None:
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self.objects[(bucket, key)] = (raw, content_type)

    def text(self, bucket: str, key: str) -> str:
        return self.objects[(bucket, key)][0].decode("utf-8")

    def content_type(self, bucket: str, key: str) -> str:
        return self.objects[(bucket, key)][1]

    def _load(self, bucket: str, key: str) -> bytes:
        self.calls.append(("get", bucket, key))
        if key in self.fail_get:
            raise RuntimeError(f"get failed: {key}")
        if (bucket, key) not in self.objects:
            raise ObjectNotFoundError(bucket, key)
        return self.objects[(bucket, key)][0]

    async def get_lines(self, bucket: str, key: str, *, max_lines: int | None = None) -> list[str]:
        data = self._load(bucket, key)
        lines = data.decode("utf-8").splitlines()
        return lines if max_lines is None else lines[:max_lines]

    async def put_bytes(self, bucket: str, key: str, data: bytes, *, content_type: str) -> str:
        self.calls.append(("put", bucket, key))
        if key in self.fail_put or bucket in self.fail_put:
            raise RuntimeError(f"put failed: {key}")
        self.objects[(bucket, key)] = (bytes(data), content_type)
        return f"mem://{bucket}/{key}"

    async def iter_objects(self, bucket: str, prefix: str) -> AsyncIterator[ObjectSummary]:
        keys = sorted(k for (b, k) in self.objects if b == bucket and k.startswith(prefix))
        for start in range(0, max(len(keys), 1), self.page_size):
            self.calls.append(("list", bucket, prefix))
            if prefix in self.fail_list_prefixes:
                raise RuntimeError(f"list failed: {prefix}")
            for key in keys[start : start + self.page_size]:
                yield ObjectSummary(key=key, size=len(self.objects[(bucket, key)][0]))

    async def presign(self, bucket: str, key: str, *, expires_in: int) -> str:
        self.calls.append(("presign", bucket, key))
        if key in self.fail_presign:
            raise RuntimeError(f"signing failed: {key}")
        return f"https://{bucket}.s3.test/{key}?X-Amz-Expires={expires_in}"

    def call_count(self, op: str) -> int:
        return sum(1 for call in self.calls if call[0] == op)


class FakeContactDirectory(ContactDirectory):
    def __init__(self) -> None:
        self.contacts: dict[str, ContactDetails] = {}
        self.buckets: dict[StorageResourceType, str | None] = {
            StorageResourceType.CALL_RECORDINGS: "connect-storage",
            StorageResourceType.CHAT_TRANSCRIPTS: "connect-storage",
        }
        self.described: list[str] = []
        self.bucket_lookups: list[StorageResourceType] = []

    def add_contact(self, contact_id: str, channel: str, initiated_at: datetime) -> None:
        self.contacts[contact_id] = ContactDetails(
            contact_id=contact_id,
            channel=channel,
            initiation_timestamp=initiated_at,
        )

    async def describe_contact(self, contact_id: str) -> ContactDetails:
        self.described.append(contact_id)
        if contact_id not in self.contacts:
            raise ProviderError(
                "connect",
                f"contact not found: {contact_id}",
                error_code=ErrorCode.CONTACT_RESOLUTION_FAILED,
            )
        return self.contacts[contact_id]

    async def storage_bucket(self, resource_type: StorageResourceType) -> str | None:
        self.bucket_lookups.append(resource_type)
        return self.buckets.get(resource_type)


class ScriptedLLM(LLMProvider):
    """Returns `reply(prompt)`; a reply that is an exception is raised instead."""

    def __init__(self, reply: Callable[[str], str | Exception] | None = None) -> None:
        self.provider = "scripted"
        self.model = "scripted-model"
        self.reply = reply or (lambda prompt: "AGENT: Hello\nCUSTOMER: Hi")
        self.calls: list[tuple[list[Message], float]] = []
        self.closed = False

    async def complete_with_usage(
        self,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> LLMCompletionResult:
        self.calls.append((list(messages), float(temperature)))
        out = self.reply(messages[-1].content)
        if isinstance(out, Exception):
            raise out
        return LLMCompletionResult(text=out)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        destination_bucket="pdr-output",
        instance_id="instance-1",
        prefix_timezone="UTC",
        log_dir=str(tmp_path / "logs"),
        llm=LLMConfig(provider="bedrock", model="anthropic.test-model"),
        storage=StorageConfig(backend="local", local_dir=str(tmp_path / "data")),
    )


@pytest.fixture()
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture()
def directory() -> FakeContactDirectory:
    return FakeContactDirectory()


@pytest.fixture()
def llm() -> ScriptedLLM:
    return ScriptedLLM()


@pytest.fixture()
def utc_noon() -> datetime:
    return datetime(2025, 3, 9, 12, 30, tzinfo=timezone.utc)
