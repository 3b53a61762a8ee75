"""Abstract base class for collection providers.

Defines the interface the sync service uses to read and write collections
on the commerce platform.
"""

from abc import ABC, abstractmethod

from boothcode.domain.entities.collection import Collection


class CollectionProvider(ABC):
    """Abstract base class for commerce platform collection access."""

    @abstractmethod
    async def update_title_and_code(self, collection_id: str, title: str, code: str) -> None:
        """Set a collection's title and store its booth code in the metafield slot.

        Raises:
            RemoteServiceError: If the platform rejects the update.
        """
        pass

    @abstractmethod
    async def get_stored_code(self, collection_id: str) -> str | None:
        """Read the booth code stored on a collection.

        Returns:
            The stored code, or None if the metafield slot is empty.

        Raises:
            RemoteServiceError: If the platform request fails.
        """
        pass

    @abstractmethod
    async def update_title(self, collection_id: str, title: str) -> None:
        """Set a collection's title without touching its metafields.

        Raises:
            RemoteServiceError: If the platform rejects the update.
        """
        pass

    @abstractmethod
    async def find_by_handle(self, handle: str) -> Collection | None:
        """Resolve a collection by its handle.

        Returns:
            The collection (with its stored code, if any), or None.

        Raises:
            RemoteServiceError: If the platform request fails.
        """
        pass

    async def aclose(self) -> None:
        """Release the provider's network resources."""
        return None
