"""Disclosure pipeline.

Keep imports lazy so light modules (models, events) can be used without
pulling in provider SDKs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pdrflow.pipeline.factory import create_disclosure_job
    from pdrflow.pipeline.orchestrator import DisclosureJob, JobResult, JobState

__all__ = ["DisclosureJob", "JobResult", "JobState", "create_disclosure_job"]


def __getattr__(name: str) -> Any:
    if name == "DisclosureJob":
        from pdrflow.pipeline.orchestrator import DisclosureJob

        return DisclosureJob
    if name == "JobResult":
        from pdrflow.pipeline.orchestrator import JobResult

        return JobResult
    if name == "JobState":
        from pdrflow.pipeline.orchestrator import JobState

        return JobState
    if name == "create_disclosure_job":
        from pdrflow.pipeline.factory import create_disclosure_job

        return create_disclosure_job
    raise AttributeError(name)
