"""Artifact discovery under a resolved location."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from pdrflow.exceptions import EnumerationError
from pdrflow.models.artifact import ArtifactKind, ArtifactObject
from pdrflow.models.contact import ResolvedLocation
from pdrflow.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)


def classify(key: str, size: int | None = None) -> ArtifactObject:
    return ArtifactObject(key=key, kind=ArtifactKind.from_key(key), size=size)


class ArtifactEnumerator:
    """Lists a location page by page and yields recordings and transcripts.

    Objects with any other suffix are dropped. The sequence is lazy; calling
    `enumerate` again restarts the listing from the first page.
    """

    def __init__(self, store: ObjectStore) -> None:
        self.store = store

    async def enumerate(self, location: ResolvedLocation) -> AsyncIterator[ArtifactObject]:
        objects = self.store.iter_objects(location.bucket, location.key_prefix).__aiter__()
        found = 0
        while True:
            try:
                summary = await anext(objects)
            except StopAsyncIteration:
                break
            except Exception as exc:
                raise EnumerationError(
                    f"listing failed after {found} artifacts: {exc}",
                    contact_id=location.contact_id,
                    bucket=location.bucket,
                    key=location.key_prefix,
                ) from exc

            artifact = classify(summary.key, summary.size)
            if artifact.kind is ArtifactKind.UNRECOGNIZED:
                logger.debug("object skipped (bucket=%s, key=%s)", location.bucket, summary.key)
                continue
            found += 1
            yield artifact

        logger.info(
            "artifacts enumerated (contact_id=%s, bucket=%s, prefix=%s, artifacts=%d)",
            location.contact_id,
            location.bucket,
            location.key_prefix,
            found,
        )
