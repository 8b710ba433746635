"""Disclosure job orchestration (strictly sequential, one contact at a time)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any

from pdrflow.config import Settings
from pdrflow.events import extract_manifest_location
from pdrflow.exceptions import (
    ConfigurationError,
    EnumerationError,
    InputParseError,
    LinkSigningError,
    OutputWriteError,
    PipelineError,
    ResolutionError,
)
from pdrflow.manifest.reader import read_manifest
from pdrflow.manifest.writer import write_manifest
from pdrflow.models.artifact import ArtifactKind, ArtifactObject
from pdrflow.models.contact import ResolvedLocation
from pdrflow.models.manifest import FileType, ManifestLocation, ManifestRow
from pdrflow.pipeline.accumulator import ManifestAccumulator
from pdrflow.pipeline.enumerator import ArtifactEnumerator
from pdrflow.pipeline.humanizer import TranscriptHumanizer
from pdrflow.pipeline.links import LinkIssuer
from pdrflow.pipeline.resolver import LocationResolver, resolve_storage_layout
from pdrflow.providers.contact.base import ContactDirectory
from pdrflow.providers.llm.base import LLMProvider
from pdrflow.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

STATUS_OK = "200 OK"
STATUS_FAILED = "500 Internal Server Error"


class JobState(str, Enum):
    IDLE = "idle"
    PARSING_INPUT = "parsing_input"
    RESOLVING_LOCATIONS = "resolving_locations"
    ENUMERATING_ARTIFACTS = "enumerating_artifacts"
    HUMANIZING_TRANSCRIPTS = "humanizing_transcripts"
    ISSUING_LINKS = "issuing_links"
    ACCUMULATING = "accumulating"
    DONE = "done"
    FAILED = "failed"


_TERMINAL = {JobState.DONE, JobState.FAILED}


@dataclass
class JobStats:
    contacts_total: int = 0
    contacts_processed: int = 0
    contacts_skipped: int = 0
    transcripts_humanized: int = 0
    transcripts_fallback: int = 0
    rows_omitted: int = 0


@dataclass
class JobResult:
    state: JobState
    rows: list[ManifestRow] = field(default_factory=list)
    output: ManifestLocation | None = None
    stats: JobStats = field(default_factory=JobStats)
    error: PipelineError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is JobState.DONE

    @property
    def status(self) -> str:
        """Coarse signal handed back to the invoking layer."""
        return STATUS_OK if self.succeeded else STATUS_FAILED


class DisclosureJob:
    """Runs one disclosure request from input manifest to output manifest.

    Per-contact and per-object failures are logged and skipped (or fall back
    to the raw transcript); only an unreadable input or an unwritable output
    fails the run.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        store: ObjectStore,
        directory: ContactDirectory,
        llm: LLMProvider,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings
        self.store = store
        self.directory = directory
        self.llm = llm
        self.tz = tz if tz is not None else settings.prefix_tzinfo
        self.clock = clock

        self.enumerator = ArtifactEnumerator(store)
        self.humanizer = TranscriptHumanizer(
            store,
            llm,
            max_lines=settings.transcript_max_lines,
            max_tokens=settings.llm.max_tokens,
        )
        self.links = LinkIssuer(store)

        self.state = JobState.IDLE
        self.transitions: list[JobState] = [JobState.IDLE]

    def _transition(self, state: JobState) -> None:
        if self.state is state:
            return
        self.state = state
        self.transitions.append(state)
        log = logger.info if state in _TERMINAL or state is JobState.PARSING_INPUT else logger.debug
        log("job state -> %s", state.value)

    async def run_event(self, event: Any) -> JobResult:
        """Entry point for trigger payloads (S3 notification, EventBridge, direct)."""
        try:
            location = extract_manifest_location(event)
        except InputParseError as exc:
            self._transition(JobState.PARSING_INPUT)
            logger.error("job failed: %s", exc)
            self._transition(JobState.FAILED)
            return JobResult(state=JobState.FAILED, error=exc)
        return await self.run(location)

    async def run(self, manifest: ManifestLocation) -> JobResult:
        stats = JobStats()
        accumulator = ManifestAccumulator()
        try:
            self._transition(JobState.PARSING_INPUT)
            contact_ids = await read_manifest(
                self.store,
                manifest,
                max_lines=self.settings.max_manifest_lines,
            )
            stats.contacts_total = len(contact_ids)

            try:
                destination = self.settings.require_destination_bucket()
            except ConfigurationError as exc:
                raise OutputWriteError(str(exc)) from exc

            layout = await resolve_storage_layout(self.directory)
            resolver = LocationResolver(self.directory, layout, tz=self.tz)

            for contact_id in contact_ids:
                await self._process_contact(contact_id, resolver, accumulator, stats)

            self._transition(JobState.ACCUMULATING)
            output = await write_manifest(
                self.store,
                destination,
                accumulator.rows,
                prefix=self.settings.output_prefix,
                now=self.clock(),
            )
        except (InputParseError, OutputWriteError) as exc:
            logger.error("job failed (manifest=%s): %s", manifest.uri, exc)
            self._transition(JobState.FAILED)
            return JobResult(state=JobState.FAILED, rows=accumulator.rows, stats=stats, error=exc)
        except Exception as exc:
            logger.exception("job failed unexpectedly (manifest=%s)", manifest.uri)
            self._transition(JobState.FAILED)
            error = PipelineError(f"unexpected failure: {exc}", bucket=manifest.bucket, key=manifest.key)
            return JobResult(state=JobState.FAILED, rows=accumulator.rows, stats=stats, error=error)

        by_type = accumulator.counts_by_type()
        logger.info(
            "job completed (manifest=%s, output=%s, contacts=%d, processed=%d, skipped=%d, "
            "recordings=%d, transcripts=%d, humanized=%d, fallback=%d, omitted=%d)",
            manifest.uri,
            output.uri,
            stats.contacts_total,
            stats.contacts_processed,
            stats.contacts_skipped,
            by_type.get(FileType.RECORDING, 0),
            by_type.get(FileType.TRANSCRIPT, 0),
            stats.transcripts_humanized,
            stats.transcripts_fallback,
            stats.rows_omitted,
        )
        self._transition(JobState.DONE)
        return JobResult(state=JobState.DONE, rows=accumulator.rows, output=output, stats=stats)

    async def _process_contact(
        self,
        contact_id: str,
        resolver: LocationResolver,
        accumulator: ManifestAccumulator,
        stats: JobStats,
    ) -> None:
        try:
            self._transition(JobState.RESOLVING_LOCATIONS)
            location = await resolver.resolve(contact_id)

            self._transition(JobState.ENUMERATING_ARTIFACTS)
            async for artifact in self.enumerator.enumerate(location):
                await self._process_artifact(location, artifact, accumulator, stats)
                self._transition(JobState.ENUMERATING_ARTIFACTS)
        except (ResolutionError, EnumerationError) as exc:
            stats.contacts_skipped += 1
            logger.warning(
                "contact skipped (contact_id=%s, bucket=%s, key=%s, error_code=%s): %s",
                exc.contact_id,
                exc.bucket,
                exc.key,
                getattr(exc.error_code, "value", exc.error_code),
                exc.message,
            )
            return
        except Exception:
            stats.contacts_skipped += 1
            logger.exception("contact skipped after unexpected error (contact_id=%s)", contact_id)
            return
        stats.contacts_processed += 1

    async def _process_artifact(
        self,
        location: ResolvedLocation,
        artifact: ArtifactObject,
        accumulator: ManifestAccumulator,
        stats: JobStats,
    ) -> None:
        link_key = artifact.key
        if artifact.kind is ArtifactKind.TRANSCRIPT:
            self._transition(JobState.HUMANIZING_TRANSCRIPTS)
            outcome = await self.humanizer.humanize(location.bucket, artifact.key, contact_id=location.contact_id)
            link_key = outcome.key
            if outcome.succeeded:
                stats.transcripts_humanized += 1
            else:
                stats.transcripts_fallback += 1

        self._transition(JobState.ISSUING_LINKS)
        try:
            link = await self.links.issue_link(location.bucket, link_key, contact_id=location.contact_id)
        except LinkSigningError as exc:
            stats.rows_omitted += 1
            logger.warning(
                "row omitted (contact_id=%s, bucket=%s, key=%s): %s",
                exc.contact_id,
                exc.bucket,
                exc.key,
                exc.message,
            )
            return

        self._transition(JobState.ACCUMULATING)
        file_type = FileType.RECORDING if artifact.kind is ArtifactKind.RECORDING else FileType.TRANSCRIPT
        accumulator.add(
            ManifestRow(
                contact_id=location.contact_id,
                channel=artifact.channel,
                file_type=file_type,
                link=link,
            )
        )
