"""Contact directory implementations."""

from pdrflow.providers.contact.base import ContactDirectory
from pdrflow.providers.contact.connect import ConnectContactDirectory

__all__ = ["ConnectContactDirectory", "ContactDirectory"]
