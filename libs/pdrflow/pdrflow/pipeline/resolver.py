"""Contact -> storage location resolution."""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo

from pdrflow.error_codes import ErrorCode
from pdrflow.exceptions import ProviderError, ResolutionError
from pdrflow.models.contact import Channel, ResolvedLocation, StorageLayout, StorageResourceType
from pdrflow.providers.contact.base import ContactDirectory

logger = logging.getLogger(__name__)

ANALYSIS_ROOTS: dict[Channel, str] = {
    Channel.VOICE: "Analysis/Voice/Redacted",
    Channel.CHAT: "Analysis/Chat/Redacted",
}


def build_key_prefix(
    contact_id: str,
    channel: Channel,
    initiated_at: datetime,
    tz: tzinfo | None = None,
) -> str:
    """Analysis/<Voice|Chat>/Redacted/<yyyy>/<mm>/<dd>/<contact_id>.

    The date is taken in `tz`; None means the zone of the running process.
    """
    if initiated_at.tzinfo is None:
        initiated_at = initiated_at.replace(tzinfo=timezone.utc)
    local = initiated_at.astimezone(tz)
    return f"{ANALYSIS_ROOTS[channel]}/{local.year:04d}/{local.month:02d}/{local.day:02d}/{contact_id}"


async def resolve_storage_layout(directory: ContactDirectory) -> StorageLayout:
    """Look up the recordings and transcripts buckets once for the whole run.

    A failed lookup leaves that kind unconfigured; contacts needing it are
    then skipped with a ResolutionError instead of failing the run.
    """
    buckets: dict[StorageResourceType, str | None] = {}
    for resource_type in (StorageResourceType.CALL_RECORDINGS, StorageResourceType.CHAT_TRANSCRIPTS):
        try:
            buckets[resource_type] = await directory.storage_bucket(resource_type)
        except ProviderError as exc:
            logger.warning(
                "storage config lookup failed (resource_type=%s): %s",
                resource_type.value,
                exc,
            )
            buckets[resource_type] = None

    layout = StorageLayout(
        call_recordings_bucket=buckets[StorageResourceType.CALL_RECORDINGS],
        chat_transcripts_bucket=buckets[StorageResourceType.CHAT_TRANSCRIPTS],
    )
    logger.info(
        "storage layout resolved (call_recordings=%s, chat_transcripts=%s, mode=%s)",
        layout.call_recordings_bucket,
        layout.chat_transcripts_bucket,
        "single-bucket" if layout.single_bucket else "per-kind",
    )
    return layout


class LocationResolver:
    def __init__(
        self,
        directory: ContactDirectory,
        layout: StorageLayout,
        *,
        tz: tzinfo | None = None,
    ) -> None:
        self.directory = directory
        self.layout = layout
        self.tz = tz

    async def resolve(self, contact_id: str) -> ResolvedLocation:
        try:
            details = await self.directory.describe_contact(contact_id)
        except ProviderError as exc:
            raise ResolutionError(
                f"contact lookup failed: {exc.message}",
                contact_id=contact_id,
                error_code=exc.error_code or ErrorCode.CONTACT_RESOLUTION_FAILED,
            ) from exc

        channel = Channel.parse(details.channel)
        if channel is None:
            raise ResolutionError(f"unsupported channel {details.channel!r}", contact_id=contact_id)

        bucket = self.layout.bucket_for(channel)
        if not bucket:
            raise ResolutionError(
                f"no S3 storage configured for {channel.value} artifacts",
                contact_id=contact_id,
                error_code=ErrorCode.STORAGE_NOT_CONFIGURED,
            )

        location = ResolvedLocation(
            contact_id=contact_id,
            channel=channel,
            bucket=bucket,
            key_prefix=build_key_prefix(contact_id, channel, details.initiation_timestamp, self.tz),
        )
        logger.info(
            "contact resolved (contact_id=%s, channel=%s, bucket=%s, prefix=%s)",
            contact_id,
            channel.value,
            location.bucket,
            location.key_prefix,
        )
        return location
