"""Pipeline factory."""

from __future__ import annotations

from pdrflow.config import Settings
from pdrflow.pipeline.orchestrator import DisclosureJob
from pdrflow.providers import get_contact_directory, get_llm_provider
from pdrflow.storage import get_object_store


def create_disclosure_job(settings: Settings, *, expected_bucket_owner: str | None = None) -> DisclosureJob:
    """Wire a DisclosureJob to the configured AWS services."""
    return DisclosureJob(
        settings,
        store=get_object_store(settings, expected_bucket_owner=expected_bucket_owner),
        directory=get_contact_directory(settings),
        llm=get_llm_provider(settings.llm_config()),
    )
