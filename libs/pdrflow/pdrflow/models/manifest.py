"""Disclosure manifest models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pdrflow.models.contact import Channel

MANIFEST_HEADER = ("ContactId", "Channel", "FileType", "S3PreSignedURL")


class FileType(str, Enum):
    RECORDING = "RECORDING"
    TRANSCRIPT = "TRANSCRIPT"


@dataclass(frozen=True)
class ManifestRow:
    contact_id: str
    channel: Channel
    file_type: FileType
    link: str

    def as_record(self) -> tuple[str, str, str, str]:
        return (self.contact_id, self.channel.value, self.file_type.value, self.link)


@dataclass(frozen=True)
class ManifestLocation:
    """Bucket and key of an input or output manifest object."""

    bucket: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"
