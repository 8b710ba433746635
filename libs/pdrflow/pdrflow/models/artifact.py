"""Artifact model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pdrflow.models.contact import Channel

RECORDING_SUFFIX = ".wav"
TRANSCRIPT_SUFFIX = ".json"


class ArtifactKind(Enum):
    RECORDING = "RECORDING"
    TRANSCRIPT = "TRANSCRIPT"
    UNRECOGNIZED = "UNRECOGNIZED"

    @classmethod
    def from_key(cls, key: str) -> "ArtifactKind":
        if key.endswith(RECORDING_SUFFIX):
            return cls.RECORDING
        if key.endswith(TRANSCRIPT_SUFFIX):
            return cls.TRANSCRIPT
        return cls.UNRECOGNIZED


def channel_for_key(key: str) -> Channel:
    """Row channel is taken from the object key, not from the resolved contact."""
    return Channel.VOICE if "Voice" in key else Channel.CHAT


@dataclass(frozen=True)
class ArtifactObject:
    key: str
    kind: ArtifactKind
    size: int | None = None

    @property
    def channel(self) -> Channel:
        return channel_for_key(self.key)
