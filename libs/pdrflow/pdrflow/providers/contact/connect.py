"""Amazon Connect contact directory (boto3)."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from pdrflow.error_codes import ErrorCode
from pdrflow.exceptions import ProviderError
from pdrflow.models.contact import ContactDetails, StorageResourceType
from pdrflow.providers.contact.base import ContactDirectory

logger = logging.getLogger(__name__)


class ConnectContactDirectory(ContactDirectory):
    def __init__(
        self,
        instance_id: str,
        *,
        region: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.provider = "connect"
        self.instance_id = str(instance_id or "").strip()
        if not self.instance_id:
            raise ValueError("ConnectContactDirectory requires instance_id")
        self.region = region
        self._client: Any | None = client

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client

        import boto3

        self._client = boto3.client(
            "connect",
            region_name=self.region,
            config=Config(retries={"total_max_attempts": 1}),
        )
        return self._client

    async def describe_contact(self, contact_id: str) -> ContactDetails:
        def _describe() -> dict[str, Any]:
            client = self._ensure_client()
            return dict(client.describe_contact(InstanceId=self.instance_id, ContactId=contact_id))

        try:
            resp = await asyncio.to_thread(_describe)
        except (ClientError, BotoCoreError) as exc:
            raise ProviderError(
                self.provider,
                f"describe_contact failed (contact_id={contact_id}): {exc}",
                error_code=ErrorCode.CONTACT_RESOLUTION_FAILED,
            ) from exc

        contact = resp.get("Contact") or {}
        started = contact.get("InitiationTimestamp")
        if not isinstance(started, datetime):
            raise ProviderError(
                self.provider,
                f"contact has no initiation timestamp (contact_id={contact_id})",
                error_code=ErrorCode.CONTACT_RESOLUTION_FAILED,
            )
        return ContactDetails(
            contact_id=contact_id,
            channel=str(contact.get("Channel") or ""),
            initiation_timestamp=started,
        )

    async def storage_bucket(self, resource_type: StorageResourceType) -> str | None:
        def _find() -> str | None:
            client = self._ensure_client()
            token: str | None = None
            while True:
                kwargs: dict[str, Any] = {"InstanceId": self.instance_id, "ResourceType": resource_type.value}
                if token:
                    kwargs["NextToken"] = token
                resp = dict(client.list_instance_storage_configs(**kwargs))
                for config in resp.get("StorageConfigs") or []:
                    storage_type = str(config.get("StorageType") or "")
                    logger.debug(
                        "storage config (resource_type=%s, storage_type=%s)",
                        resource_type.value,
                        storage_type,
                    )
                    if storage_type.upper() == "S3":
                        bucket = str((config.get("S3Config") or {}).get("BucketName") or "").strip()
                        if bucket:
                            return bucket
                token = str(resp.get("NextToken") or "") or None
                if not token:
                    return None

        try:
            return await asyncio.to_thread(_find)
        except (ClientError, BotoCoreError) as exc:
            raise ProviderError(
                self.provider,
                f"list_instance_storage_configs failed (resource_type={resource_type.value}): {exc}",
                error_code=ErrorCode.PROVIDER_FAILED,
            ) from exc
