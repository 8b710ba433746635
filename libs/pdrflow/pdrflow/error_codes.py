"""Canonical error codes attached to logged failures."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    INVALID_INPUT = "INVALID_INPUT"

    CONTACT_RESOLUTION_FAILED = "CONTACT_RESOLUTION_FAILED"
    STORAGE_NOT_CONFIGURED = "STORAGE_NOT_CONFIGURED"
    LISTING_FAILED = "LISTING_FAILED"
    HUMANIZATION_FAILED = "HUMANIZATION_FAILED"
    LLM_FAILED = "LLM_FAILED"
    LLM_TIMEOUT = "LLM_TIMEOUT"
    LINK_SIGNING_FAILED = "LINK_SIGNING_FAILED"
    OUTPUT_WRITE_FAILED = "OUTPUT_WRITE_FAILED"

    PROVIDER_FAILED = "PROVIDER_FAILED"
