"""Amazon S3 object store implementation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator
from typing import Any

from botocore.config import Config
from botocore.exceptions import ClientError

from pdrflow.exceptions import ObjectNotFoundError
from pdrflow.storage.object_store import ObjectStore, ObjectSummary
from pdrflow.storage.s3_pagination import ListPage, iter_list_objects_v2

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(exc: ClientError) -> bool:
    code = str(exc.response.get("Error", {}).get("Code", "") or "")
    return code in _NOT_FOUND_CODES


class S3ObjectStore(ObjectStore):
    """S3 object store.

    `expected_bucket_owner` is sent with reads and writes of object content
    when set (the owning account id of the Lambda function).
    """

    def __init__(
        self,
        *,
        region: str | None = None,
        endpoint_url: str | None = None,
        expected_bucket_owner: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.expected_bucket_owner = str(expected_bucket_owner or "").strip() or None
        self._client: Any | None = client

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client

        import boto3

        self._client = boto3.client(
            "s3",
            region_name=self.region,
            endpoint_url=self.endpoint_url,
            config=Config(retries={"total_max_attempts": 1}),
        )
        return self._client

    def _owner_kwargs(self) -> dict[str, str]:
        if self.expected_bucket_owner:
            return {"ExpectedBucketOwner": self.expected_bucket_owner}
        return {}

    async def get_lines(self, bucket: str, key: str, *, max_lines: int | None = None) -> list[str]:
        client = self._ensure_client()

        def _get() -> list[str]:
            resp = client.get_object(Bucket=bucket, Key=key, **self._owner_kwargs())
            body = resp["Body"]
            out: list[str] = []
            try:
                for raw in body.iter_lines():
                    if max_lines is not None and len(out) >= max_lines:
                        break
                    out.append(raw.decode("utf-8").rstrip("\r"))
            finally:
                body.close()
            return out

        try:
            return await asyncio.to_thread(_get)
        except ClientError as exc:
            if _is_not_found(exc):
                raise ObjectNotFoundError(bucket, key) from exc
            raise

    async def put_bytes(self, bucket: str, key: str, data: bytes, *, content_type: str) -> str:
        client = self._ensure_client()

        def _put() -> None:
            client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                **self._owner_kwargs(),
            )

        await asyncio.to_thread(_put)
        logger.info("s3 object written (bucket=%s, key=%s, bytes=%d)", bucket, key, len(data))
        return f"s3://{bucket}/{key}"

    async def iter_objects(self, bucket: str, prefix: str) -> AsyncIterator[ObjectSummary]:
        client = self._ensure_client()
        pages: Iterator[ListPage] = iter_list_objects_v2(client, bucket=bucket, prefix=prefix)

        while True:
            page = await asyncio.to_thread(next, pages, None)
            if page is None:
                return
            logger.debug(
                "s3 list page (bucket=%s, prefix=%s, page=%d, objects=%d, more=%s)",
                bucket,
                prefix,
                page.number,
                len(page.contents),
                page.next_token is not None,
            )
            for obj in page.contents:
                key = str(obj.get("Key") or "")
                if not key:
                    continue
                size = obj.get("Size")
                yield ObjectSummary(key=key, size=int(size) if size is not None else None)

    async def presign(self, bucket: str, key: str, *, expires_in: int) -> str:
        client = self._ensure_client()

        def _gen() -> str:
            return str(
                client.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": bucket, "Key": key},
                    ExpiresIn=max(1, int(expires_in)),
                )
            )

        return await asyncio.to_thread(_gen)
