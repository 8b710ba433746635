from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from pdrflow.error_codes import ErrorCode
from pdrflow.exceptions import ProviderError, ResolutionError
from pdrflow.models.contact import Channel, StorageLayout, StorageResourceType
from pdrflow.pipeline.resolver import LocationResolver, build_key_prefix, resolve_storage_layout


def test_build_key_prefix_zero_pads_date_parts(utc_noon) -> None:
    prefix = build_key_prefix("c-1", Channel.VOICE, utc_noon, timezone.utc)
    assert prefix == "Analysis/Voice/Redacted/2025/03/09/c-1"


def test_build_key_prefix_uses_chat_root() -> None:
    started = datetime(2024, 11, 1, 8, 0, tzinfo=timezone.utc)
    assert build_key_prefix("c-2", Channel.CHAT, started, timezone.utc) == "Analysis/Chat/Redacted/2024/11/01/c-2"


def test_build_key_prefix_date_follows_injected_zone() -> None:
    late_utc = datetime(2025, 3, 9, 23, 30, tzinfo=timezone.utc)
    assert build_key_prefix("c", Channel.VOICE, late_utc, ZoneInfo("Asia/Tokyo")).endswith("/2025/03/10/c")

    early_utc = datetime(2025, 3, 9, 3, 0, tzinfo=timezone.utc)
    assert build_key_prefix("c", Channel.VOICE, early_utc, ZoneInfo("America/Los_Angeles")).endswith(
        "/2025/03/08/c"
    )


def test_build_key_prefix_defaults_to_process_local_zone() -> None:
    started = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
    local = started.astimezone()
    expected = f"Analysis/Chat/Redacted/{local.year:04d}/{local.month:02d}/{local.day:02d}/c"
    assert build_key_prefix("c", Channel.CHAT, started) == expected


def test_build_key_prefix_treats_naive_timestamp_as_utc() -> None:
    naive = datetime(2025, 1, 31, 23, 59)
    assert build_key_prefix("c", Channel.VOICE, naive, ZoneInfo("Asia/Tokyo")).endswith("/2025/02/01/c")


@pytest.mark.asyncio
async def test_storage_layout_single_bucket_is_case_insensitive(directory) -> None:
    directory.buckets = {
        StorageResourceType.CALL_RECORDINGS: "Connect-Storage",
        StorageResourceType.CHAT_TRANSCRIPTS: "connect-storage",
    }
    layout = await resolve_storage_layout(directory)
    assert layout.single_bucket
    assert layout.bucket_for(Channel.CHAT) == "Connect-Storage"
    assert directory.bucket_lookups == [
        StorageResourceType.CALL_RECORDINGS,
        StorageResourceType.CHAT_TRANSCRIPTS,
    ]


@pytest.mark.asyncio
async def test_storage_layout_per_kind(directory) -> None:
    directory.buckets = {
        StorageResourceType.CALL_RECORDINGS: "recordings",
        StorageResourceType.CHAT_TRANSCRIPTS: "transcripts",
    }
    layout = await resolve_storage_layout(directory)
    assert not layout.single_bucket
    assert layout.bucket_for(Channel.VOICE) == "recordings"
    assert layout.bucket_for(Channel.CHAT) == "transcripts"


@pytest.mark.asyncio
async def test_storage_layout_lookup_failure_leaves_kind_unconfigured(directory) -> None:
    async def _boom(resource_type: StorageResourceType) -> str | None:
        if resource_type is StorageResourceType.CHAT_TRANSCRIPTS:
            raise ProviderError("connect", "access denied")
        return "recordings"

    directory.storage_bucket = _boom
    layout = await resolve_storage_layout(directory)
    assert layout == StorageLayout(call_recordings_bucket="recordings", chat_transcripts_bucket=None)


@pytest.mark.asyncio
async def test_resolve_voice_and_chat_contacts(directory) -> None:
    directory.add_contact("v-1", "VOICE", datetime(2025, 2, 3, 10, 0, tzinfo=timezone.utc))
    directory.add_contact("c-1", "Chat", datetime(2025, 2, 4, 10, 0, tzinfo=timezone.utc))
    layout = StorageLayout(call_recordings_bucket="recordings", chat_transcripts_bucket="transcripts")
    resolver = LocationResolver(directory, layout, tz=timezone.utc)

    voice = await resolver.resolve("v-1")
    assert voice.channel is Channel.VOICE
    assert voice.bucket == "recordings"
    assert voice.key_prefix == "Analysis/Voice/Redacted/2025/02/03/v-1"

    chat = await resolver.resolve("c-1")
    assert chat.channel is Channel.CHAT
    assert chat.bucket == "transcripts"
    assert chat.key_prefix == "Analysis/Chat/Redacted/2025/02/04/c-1"


@pytest.mark.asyncio
async def test_resolve_unknown_contact_raises_resolution_error(directory) -> None:
    resolver = LocationResolver(directory, StorageLayout("b", "b"), tz=timezone.utc)
    with pytest.raises(ResolutionError) as info:
        await resolver.resolve("missing")
    assert info.value.contact_id == "missing"
    assert info.value.error_code == ErrorCode.CONTACT_RESOLUTION_FAILED


@pytest.mark.asyncio
async def test_resolve_unsupported_channel(directory, utc_noon) -> None:
    directory.add_contact("t-1", "TASK", utc_noon)
    resolver = LocationResolver(directory, StorageLayout("b", "b"), tz=timezone.utc)
    with pytest.raises(ResolutionError) as info:
        await resolver.resolve("t-1")
    assert info.value.contact_id == "t-1"


@pytest.mark.asyncio
async def test_resolve_without_storage_for_channel(directory, utc_noon) -> None:
    directory.add_contact("c-1", "CHAT", utc_noon)
    resolver = LocationResolver(directory, StorageLayout("recordings", None), tz=timezone.utc)
    with pytest.raises(ResolutionError) as info:
        await resolver.resolve("c-1")
    assert info.value.error_code == ErrorCode.STORAGE_NOT_CONFIGURED
