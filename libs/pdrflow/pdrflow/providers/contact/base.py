"""Contact directory base class."""

from abc import ABC, abstractmethod

from pdrflow.models.contact import ContactDetails, StorageResourceType


class ContactDirectory(ABC):
    """Resolves contacts and the storage configured for their artifacts."""

    @abstractmethod
    async def describe_contact(self, contact_id: str) -> ContactDetails:
        """Return channel and initiation timestamp of a contact.

        Raises:
            ProviderError: The contact does not exist or the call failed.
        """
        ...

    @abstractmethod
    async def storage_bucket(self, resource_type: StorageResourceType) -> str | None:
        """Return the S3 bucket configured for a resource kind, or None when not configured."""
        ...
