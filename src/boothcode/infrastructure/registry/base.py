"""Base abstraction for code registries."""

from abc import ABC, abstractmethod


class CodeRegistry(ABC):
    """Append-only set of every booth code ever issued.

    The registry is the uniqueness source of truth: a code present here is
    never issued again. Codes are kept in issuance order and never removed.
    """

    @abstractmethod
    async def load(self) -> None:
        """Load the registry from its backing store, initializing it if absent."""
        ...

    @abstractmethod
    async def contains(self, code: str) -> bool:
        """Return whether the code has already been issued."""
        ...

    @abstractmethod
    async def add(self, code: str) -> None:
        """Append a code and persist it immediately.

        Raises:
            CodeAlreadyRegisteredError: If the code is already registered.
            RegistryStorageError: If the backing store cannot be written.
        """
        ...

    @abstractmethod
    async def list_codes(self) -> list[str]:
        """Return every issued code in issuance order."""
        ...

    async def count(self) -> int:
        """Return the number of issued codes."""
        return len(await self.list_codes())

    async def close(self) -> None:
        """Release resources held by the registry."""
        return None
