"""Abstract base class for seller directory providers."""

from abc import ABC, abstractmethod

from boothcode.domain.entities.seller import Seller


class SellerDirectoryProvider(ABC):
    """Abstract base class for marketplace seller lookups."""

    @abstractmethod
    async def lookup_by_handle(self, handle: str) -> Seller:
        """Find the seller whose shop handle matches.

        Raises:
            SellerNotFoundError: If no seller matches the handle.
            RemoteServiceError: If the directory request fails.
        """
        pass

    async def aclose(self) -> None:
        """Release the provider's network resources."""
        return None
