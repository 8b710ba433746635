"""Object store interface and local implementation."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

from pdrflow.exceptions import ObjectNotFoundError


@dataclass(frozen=True)
class ObjectSummary:
    key: str
    size: int | None = None


class ObjectStore(ABC):
    @abstractmethod
    async def get_lines(self, bucket: str, key: str, *, max_lines: int | None = None) -> list[str]:
        """Load the object as text lines (without line endings), at most `max_lines`."""

    @abstractmethod
    async def put_bytes(self, bucket: str, key: str, data: bytes, *, content_type: str) -> str:
        """Store bytes and return an identifier for the object."""

    @abstractmethod
    def iter_objects(self, bucket: str, prefix: str) -> AsyncIterator[ObjectSummary]:
        """Yield every object under `prefix`, page by page, in listing order."""

    @abstractmethod
    async def presign(self, bucket: str, key: str, *, expires_in: int) -> str:
        """Return a time-limited retrieval link for the object."""

    async def put_text(
        self,
        bucket: str,
        key: str,
        text: str,
        *,
        content_type: str = "text/plain",
    ) -> str:
        return await self.put_bytes(bucket, key, text.encode("utf-8"), content_type=content_type)


class LocalObjectStore(ObjectStore):
    """Filesystem object store for local runs: one directory per bucket."""

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir)

    def _path(self, bucket: str, key: str) -> Path:
        safe_bucket = bucket.strip().replace("/", "_")
        return self.base_dir / safe_bucket / key.lstrip("/")

    async def get_lines(self, bucket: str, key: str, *, max_lines: int | None = None) -> list[str]:
        path = self._path(bucket, key)
        if not path.is_file():
            raise ObjectNotFoundError(bucket, key)

        def _read() -> list[str]:
            out: list[str] = []
            with path.open("r", encoding="utf-8", newline="") as fh:
                for line in fh:
                    if max_lines is not None and len(out) >= max_lines:
                        break
                    out.append(line.rstrip("\r\n"))
            return out

        return await asyncio.to_thread(_read)

    async def put_bytes(self, bucket: str, key: str, data: bytes, *, content_type: str) -> str:
        path = self._path(bucket, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, data)
        return str(path)

    async def iter_objects(self, bucket: str, prefix: str) -> AsyncIterator[ObjectSummary]:
        root = self.base_dir / bucket.strip().replace("/", "_")
        if not root.exists():
            return
        keys = sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())
        for key in keys:
            if key.startswith(prefix):
                yield ObjectSummary(key=key, size=(root / key).stat().st_size)

    async def presign(self, bucket: str, key: str, *, expires_in: int) -> str:
        path = self._path(bucket, key)
        if not path.is_file():
            raise ObjectNotFoundError(bucket, key)
        return path.resolve().as_uri()
