from __future__ import annotations

import pytest

from pdrflow.exceptions import EnumerationError
from pdrflow.models.artifact import ArtifactKind, channel_for_key
from pdrflow.models.contact import Channel, ResolvedLocation
from pdrflow.pipeline.enumerator import ArtifactEnumerator, classify

PREFIX = "Analysis/Voice/Redacted/2025/03/09/c-1"
LOCATION = ResolvedLocation(contact_id="c-1", channel=Channel.VOICE, bucket="connect-storage", key_prefix=PREFIX)


async def _collect(enumerator: ArtifactEnumerator, location: ResolvedLocation = LOCATION) -> list:
    return [artifact async for artifact in enumerator.enumerate(location)]


def test_classify_by_suffix() -> None:
    assert classify("a/b.wav").kind is ArtifactKind.RECORDING
    assert classify("a/b.json").kind is ArtifactKind.TRANSCRIPT
    assert classify("a/b_TRANSCRIPT.txt").kind is ArtifactKind.UNRECOGNIZED
    assert classify("a/b.WAV").kind is ArtifactKind.UNRECOGNIZED
    assert classify("a/b.json.bak").kind is ArtifactKind.UNRECOGNIZED


def test_channel_comes_from_key_substring() -> None:
    assert channel_for_key("Analysis/Voice/Redacted/x.wav") is Channel.VOICE
    assert channel_for_key("Analysis/Chat/Redacted/x.json") is Channel.CHAT
    assert channel_for_key("analysis/voice/x.wav") is Channel.CHAT


@pytest.mark.asyncio
async def test_enumerate_drops_unrecognized_objects(store) -> None:
    store.add("connect-storage", f"{PREFIX}_analysis.json", "{}")
    store.add("connect-storage", f"{PREFIX}_call.wav", b"RIFF")
    store.add("connect-storage", f"{PREFIX}_notes.txt", "x")
    store.add("connect-storage", "Analysis/Voice/Redacted/2025/03/09/c-2.wav", b"RIFF")

    artifacts = await _collect(ArtifactEnumerator(store))
    assert [(a.key, a.kind) for a in artifacts] == [
        (f"{PREFIX}_analysis.json", ArtifactKind.TRANSCRIPT),
        (f"{PREFIX}_call.wav", ArtifactKind.RECORDING),
    ]
    assert artifacts[1].size == 4


@pytest.mark.asyncio
async def test_enumerate_with_no_objects_yields_nothing(store) -> None:
    assert await _collect(ArtifactEnumerator(store)) == []


@pytest.mark.asyncio
async def test_multi_page_listing_matches_single_page(store) -> None:
    keys = [f"{PREFIX}_{i:02d}.wav" for i in range(7)] + [f"{PREFIX}_{i:02d}.json" for i in range(5)]
    for key in keys:
        store.add("connect-storage", key, b"x")

    store.page_size = 1000
    single = await _collect(ArtifactEnumerator(store))
    single_pages = store.call_count("list")

    store.calls.clear()
    store.page_size = 3
    paged = await _collect(ArtifactEnumerator(store))

    assert single_pages == 1
    assert store.call_count("list") == 4
    assert [a.key for a in paged] == [a.key for a in single]
    assert len(paged) == 12


@pytest.mark.asyncio
async def test_enumerate_is_restartable(store) -> None:
    store.add("connect-storage", f"{PREFIX}.wav", b"x")
    enumerator = ArtifactEnumerator(store)
    assert [a.key for a in await _collect(enumerator)] == [a.key for a in await _collect(enumerator)]


@pytest.mark.asyncio
async def test_listing_failure_raises_enumeration_error_with_context(store) -> None:
    store.fail_list_prefixes.add(PREFIX)
    with pytest.raises(EnumerationError) as info:
        await _collect(ArtifactEnumerator(store))
    assert info.value.contact_id == "c-1"
    assert info.value.bucket == "connect-storage"
    assert info.value.key == PREFIX
