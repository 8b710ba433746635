"""Presigned retrieval links."""

from __future__ import annotations

from datetime import timedelta

from pdrflow.exceptions import LinkSigningError
from pdrflow.storage.object_store import ObjectStore

LINK_EXPIRY = timedelta(days=7)


class LinkIssuer:
    """Issues read links valid for seven days. No retries."""

    def __init__(self, store: ObjectStore) -> None:
        self.store = store
        self.expires_in = int(LINK_EXPIRY.total_seconds())

    async def issue_link(self, bucket: str, key: str, *, contact_id: str | None = None) -> str:
        try:
            return await self.store.presign(bucket, key, expires_in=self.expires_in)
        except Exception as exc:
            raise LinkSigningError(
                f"presigning failed: {exc}",
                contact_id=contact_id,
                bucket=bucket,
                key=key,
            ) from exc
