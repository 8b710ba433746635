"""Core data models for PDRFlow."""

from pdrflow.models.artifact import ArtifactKind, ArtifactObject, channel_for_key
from pdrflow.models.contact import (
    Channel,
    ContactDetails,
    ResolvedLocation,
    StorageLayout,
    StorageResourceType,
)
from pdrflow.models.manifest import MANIFEST_HEADER, FileType, ManifestLocation, ManifestRow

__all__ = [
    "ArtifactKind",
    "ArtifactObject",
    "Channel",
    "ContactDetails",
    "FileType",
    "MANIFEST_HEADER",
    "ManifestLocation",
    "ManifestRow",
    "ResolvedLocation",
    "StorageLayout",
    "StorageResourceType",
    "channel_for_key",
]
