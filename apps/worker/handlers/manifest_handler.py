"""Manifest event handler."""

from __future__ import annotations

import logging
from typing import Any

from pdrflow.config import Settings
from pdrflow.exceptions import ConfigurationError
from pdrflow.pipeline import create_disclosure_job
from pdrflow.pipeline.orchestrator import STATUS_FAILED, DisclosureJob

logger = logging.getLogger("pdrflow.worker")


async def process_manifest_event(
    event: Any,
    *,
    settings: Settings,
    account_id: str | None = None,
    job: DisclosureJob | None = None,
) -> str:
    """Run one disclosure request and return "200 OK" or "500 Internal Server Error"."""
    if job is None:
        try:
            job = create_disclosure_job(settings, expected_bucket_owner=account_id)
        except (ConfigurationError, ValueError):
            logger.exception("worker misconfigured")
            return STATUS_FAILED

    try:
        result = await job.run_event(event)
    finally:
        await job.llm.close()

    logger.info(
        "event processed (status=%s, rows=%d, output=%s)",
        result.status,
        len(result.rows),
        result.output.uri if result.output else None,
    )
    return result.status
