"""Contact and storage-location models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Channel(str, Enum):
    VOICE = "VOICE"
    CHAT = "CHAT"

    @classmethod
    def parse(cls, value: str | None) -> "Channel | None":
        raw = str(value or "").strip().upper()
        for channel in cls:
            if channel.value == raw:
                return channel
        return None


class StorageResourceType(str, Enum):
    CALL_RECORDINGS = "CALL_RECORDINGS"
    CHAT_TRANSCRIPTS = "CHAT_TRANSCRIPTS"


@dataclass(frozen=True)
class ContactDetails:
    contact_id: str
    channel: str  # as reported by the contact directory, e.g. "VOICE", "CHAT", "TASK"
    initiation_timestamp: datetime


@dataclass(frozen=True)
class StorageLayout:
    """Buckets holding contact artifacts, resolved once per run."""

    call_recordings_bucket: str | None
    chat_transcripts_bucket: str | None

    @property
    def single_bucket(self) -> bool:
        if not self.call_recordings_bucket or not self.chat_transcripts_bucket:
            return False
        return self.call_recordings_bucket.lower() == self.chat_transcripts_bucket.lower()

    def bucket_for(self, channel: Channel) -> str | None:
        if self.single_bucket:
            return self.call_recordings_bucket
        if channel is Channel.VOICE:
            return self.call_recordings_bucket
        return self.chat_transcripts_bucket


@dataclass(frozen=True)
class ResolvedLocation:
    contact_id: str
    channel: Channel
    bucket: str
    key_prefix: str
