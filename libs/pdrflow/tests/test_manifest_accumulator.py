from __future__ import annotations

from pdrflow.models.contact import Channel
from pdrflow.models.manifest import FileType, ManifestRow
from pdrflow.pipeline.accumulator import ManifestAccumulator


def test_rows_keep_insertion_order_and_duplicates() -> None:
    acc = ManifestAccumulator()
    rows = [
        ManifestRow("B", Channel.VOICE, FileType.RECORDING, "l1"),
        ManifestRow("A", Channel.CHAT, FileType.TRANSCRIPT, "l2"),
        ManifestRow("B", Channel.VOICE, FileType.RECORDING, "l1"),
    ]
    for row in rows:
        acc.add(row)

    assert acc.rows == rows
    assert len(acc) == 3
    assert acc.counts_by_type() == {FileType.RECORDING: 2, FileType.TRANSCRIPT: 1}


def test_rows_property_is_a_copy() -> None:
    acc = ManifestAccumulator()
    acc.add(ManifestRow("A", Channel.CHAT, FileType.TRANSCRIPT, "l"))
    acc.rows.clear()
    assert len(acc) == 1
