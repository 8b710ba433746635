"""Object storage backends."""

from pdrflow.config import Settings
from pdrflow.exceptions import ConfigurationError
from pdrflow.storage.object_store import LocalObjectStore, ObjectStore, ObjectSummary
from pdrflow.storage.s3_store import S3ObjectStore


def get_object_store(settings: Settings, *, expected_bucket_owner: str | None = None) -> ObjectStore:
    backend = str(settings.storage.backend or "s3").strip().lower()
    if backend == "s3":
        return S3ObjectStore(
            region=settings.storage.region or settings.aws_region,
            endpoint_url=settings.storage.endpoint_url,
            expected_bucket_owner=expected_bucket_owner,
        )
    if backend == "local":
        return LocalObjectStore(settings.storage.local_dir)
    raise ConfigurationError(f"Unknown storage backend: {backend!r} (expected: s3/local)")


__all__ = ["LocalObjectStore", "ObjectStore", "ObjectSummary", "S3ObjectStore", "get_object_store"]
