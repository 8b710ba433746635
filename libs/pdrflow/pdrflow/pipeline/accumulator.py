"""Ordered collection of output manifest rows."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator

from pdrflow.models.manifest import FileType, ManifestRow


class ManifestAccumulator:
    """Keeps rows in insertion order. No deduplication, no sorting."""

    def __init__(self) -> None:
        self._rows: list[ManifestRow] = []

    def add(self, row: ManifestRow) -> None:
        self._rows.append(row)

    @property
    def rows(self) -> list[ManifestRow]:
        return list(self._rows)

    def counts_by_type(self) -> dict[FileType, int]:
        return dict(Counter(row.file_type for row in self._rows))

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[ManifestRow]:
        return iter(list(self._rows))
