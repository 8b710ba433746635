"""PDRFlow exception hierarchy."""

from __future__ import annotations

from pdrflow.error_codes import ErrorCode


class PDRFlowError(Exception):
    """Base error for PDRFlow."""


class ConfigurationError(PDRFlowError):
    """Raised when configuration or inputs are invalid."""


class ProviderError(PDRFlowError):
    """Raised when an external provider call fails."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.error_code = error_code


class ObjectNotFoundError(PDRFlowError):
    """Raised when an object is missing from the store."""

    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"object not found: {bucket}/{key}")
        self.bucket = bucket
        self.key = key


class PipelineError(PDRFlowError):
    """Base for errors raised while processing a disclosure request.

    Carries the identifier/bucket/key the failure relates to so callers can
    log and assert on structured fields.
    """

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        contact_id: str | None = None,
        bucket: str | None = None,
        key: str | None = None,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        context = [
            f"{name}={value}"
            for name, value in (("contact_id", contact_id), ("bucket", bucket), ("key", key))
            if value is not None
        ]
        prefix = f"{type(self).__name__}"
        if context:
            prefix = f"{prefix} ({', '.join(context)})"
        super().__init__(f"{prefix}: {message}")
        self.message = message
        self.contact_id = contact_id
        self.bucket = bucket
        self.key = key
        self.error_code = error_code if error_code is not None else self.default_code


class InputParseError(PipelineError):
    """The input manifest (or its location) cannot be read. Fatal to the run."""

    default_code = ErrorCode.INVALID_INPUT


class ResolutionError(PipelineError):
    """A contact could not be mapped to a storage location."""

    default_code = ErrorCode.CONTACT_RESOLUTION_FAILED


class EnumerationError(PipelineError):
    """Listing objects under a contact's prefix failed."""

    default_code = ErrorCode.LISTING_FAILED


class HumanizationError(PipelineError):
    """A raw transcript could not be turned into readable text."""

    default_code = ErrorCode.HUMANIZATION_FAILED


class LinkSigningError(PipelineError):
    """A presigned link could not be generated for an object."""

    default_code = ErrorCode.LINK_SIGNING_FAILED


class OutputWriteError(PipelineError):
    """The output manifest could not be persisted. Fatal to the run."""

    default_code = ErrorCode.OUTPUT_WRITE_FAILED
