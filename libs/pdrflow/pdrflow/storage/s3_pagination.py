"""Shared S3 pagination helpers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ListPage:
    number: int
    contents: list[dict[str, Any]] = field(default_factory=list)
    next_token: str | None = None


def iter_list_objects_v2(
    client: Any,
    *,
    bucket: str,
    prefix: str,
    page_size: int | None = None,
) -> Iterator[ListPage]:
    """Iterate over `list_objects_v2` result pages for one prefix.

    Pages are requested lazily: the next call is only issued once the caller
    asks for the next page. Iteration stops when the store no longer returns a
    continuation token.
    """

    token: str | None = None
    seen: set[str] = set()
    number = 0
    while True:
        call_kwargs: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
        if page_size is not None:
            call_kwargs["MaxKeys"] = int(page_size)
        if token:
            call_kwargs["ContinuationToken"] = token

        resp: dict[str, Any] = dict(client.list_objects_v2(**call_kwargs))
        number += 1
        next_token = str(resp.get("NextContinuationToken") or "") if resp.get("IsTruncated") else ""
        yield ListPage(
            number=number,
            contents=list(resp.get("Contents") or []),
            next_token=next_token or None,
        )

        if not next_token:
            break
        if next_token in seen:
            raise RuntimeError(f"S3 listing repeated continuation token (bucket={bucket!r}, prefix={prefix!r})")
        seen.add(next_token)
        token = next_token
