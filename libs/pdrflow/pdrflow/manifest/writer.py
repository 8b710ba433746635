"""Output manifest writer."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from datetime import datetime

from pdrflow.exceptions import OutputWriteError
from pdrflow.models.manifest import MANIFEST_HEADER, ManifestLocation, ManifestRow
from pdrflow.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)


def render_manifest_csv(rows: Iterable[ManifestRow]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(MANIFEST_HEADER)
    for row in rows:
        writer.writerow(row.as_record())
    return buf.getvalue()


def output_manifest_key(prefix: str, now: datetime | None = None) -> str:
    """PDR/PDR_2025-01-31T14-05-09.csv (local wall-clock time, second precision)."""
    stamp = (now or datetime.now()).replace(microsecond=0, tzinfo=None).isoformat()
    name = f"PDR_{stamp}.csv".replace(":", "-")
    base = str(prefix or "")
    if base and not base.endswith("/"):
        base = f"{base}/"
    return f"{base}{name}"


async def write_manifest(
    store: ObjectStore,
    bucket: str,
    rows: list[ManifestRow],
    *,
    prefix: str,
    now: datetime | None = None,
) -> ManifestLocation:
    """Persist all rows as one CSV object. Any failure is an OutputWriteError."""
    key = output_manifest_key(prefix, now)
    try:
        body = render_manifest_csv(rows)
        await store.put_text(bucket, key, body, content_type="text/csv")
    except Exception as exc:
        raise OutputWriteError(f"output manifest could not be written: {exc}", bucket=bucket, key=key) from exc

    logger.info("manifest written (bucket=%s, key=%s, rows=%d)", bucket, key, len(rows))
    return ManifestLocation(bucket=bucket, key=key)
