"""Input manifest reader."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pdrflow.exceptions import InputParseError, ObjectNotFoundError
from pdrflow.models.manifest import ManifestLocation
from pdrflow.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)


def parse_manifest_lines(lines: Iterable[str], *, max_lines: int) -> list[str]:
    """Parse manifest text lines into contact ids.

    The first line is a header. Each following physical line contributes the
    text before its first comma, trimmed (and unquoted); lines with an empty
    first field are skipped. Quoting never spans lines. More than `max_lines`
    data lines is an error.
    """
    contact_ids: list[str] = []
    it = iter(lines)
    next(it, None)
    for data_lines, line in enumerate(it, start=1):
        if data_lines > max_lines:
            raise InputParseError(f"manifest exceeds {max_lines} data lines")
        contact_id = line.split(",", 1)[0].strip().strip('"').strip()
        if contact_id:
            contact_ids.append(contact_id)
    return contact_ids


async def read_manifest(store: ObjectStore, location: ManifestLocation, *, max_lines: int) -> list[str]:
    """Load the input manifest and return its contact ids, in file order."""
    try:
        # header + ceiling + one extra line is enough to detect an oversized manifest
        lines = await store.get_lines(location.bucket, location.key, max_lines=max_lines + 2)
    except ObjectNotFoundError as exc:
        raise InputParseError("input manifest not found", bucket=location.bucket, key=location.key) from exc
    except UnicodeDecodeError as exc:
        raise InputParseError("input manifest is not UTF-8", bucket=location.bucket, key=location.key) from exc
    except Exception as exc:
        raise InputParseError(
            f"input manifest could not be read: {exc}",
            bucket=location.bucket,
            key=location.key,
        ) from exc

    try:
        contact_ids = parse_manifest_lines(lines, max_lines=max_lines)
    except InputParseError as exc:
        raise InputParseError(exc.message, bucket=location.bucket, key=location.key) from exc

    logger.info(
        "manifest parsed (bucket=%s, key=%s, contacts=%d)",
        location.bucket,
        location.key,
        len(contact_ids),
    )
    return contact_ids
