"""Trigger payload parsing.

The job is started by an S3 object-created notification, an EventBridge
"Object Created" event, or a direct invocation naming the manifest.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote_plus

from pdrflow.exceptions import InputParseError
from pdrflow.models.manifest import ManifestLocation


def _get(obj: Any, *path: str) -> Any:
    cur = obj
    for part in path:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(part)
    return cur


def extract_manifest_location(event: Any) -> ManifestLocation:
    """Return the bucket/key of the arrived input manifest."""
    if not isinstance(event, Mapping):
        raise InputParseError(f"unsupported event payload type: {type(event).__name__}")

    bucket: Any = None
    key: Any = None
    records = event.get("Records")
    if isinstance(records, list) and records:
        bucket = _get(records[0], "s3", "bucket", "name")
        key = _get(records[0], "s3", "object", "key")
        # S3 notifications carry URL-encoded keys
        if isinstance(key, str):
            key = unquote_plus(key)
    elif isinstance(event.get("detail"), Mapping):
        bucket = _get(event, "detail", "bucket", "name")
        key = _get(event, "detail", "object", "key")
    else:
        bucket = event.get("bucket")
        key = event.get("key")

    bucket = str(bucket or "").strip()
    key = str(key or "").strip()
    if not bucket or not key:
        raise InputParseError("event does not name an input manifest (bucket/key missing)")
    return ManifestLocation(bucket=bucket, key=key)


def account_id_from_arn(arn: str | None) -> str | None:
    """arn:aws:lambda:<region>:<account-id>:function:<name> -> account id."""
    parts = str(arn or "").split(":")
    if len(parts) < 5 or parts[0] != "arn":
        return None
    return parts[4] or None
