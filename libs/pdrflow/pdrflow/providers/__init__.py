"""Provider abstractions for external services."""

from pdrflow.providers.registry import get_contact_directory, get_llm_provider

__all__ = ["get_contact_directory", "get_llm_provider"]
