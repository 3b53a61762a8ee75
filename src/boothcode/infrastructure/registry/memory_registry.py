"""In-memory code registry."""

from typing import Iterable

from boothcode.domain.exceptions import CodeAlreadyRegisteredError
from boothcode.infrastructure.registry.base import CodeRegistry


class InMemoryCodeRegistry(CodeRegistry):
    """Registry held in process memory; lost on restart."""

    def __init__(self, codes: Iterable[str] | None = None) -> None:
        self._codes: list[str] = []
        self._index: set[str] = set()
        for code in codes or ():
            if code not in self._index:
                self._codes.append(code)
                self._index.add(code)

    async def load(self) -> None:
        return None

    async def contains(self, code: str) -> bool:
        return code in self._index

    async def add(self, code: str) -> None:
        if code in self._index:
            raise CodeAlreadyRegisteredError(code)
        self._codes.append(code)
        self._index.add(code)

    async def list_codes(self) -> list[str]:
        return list(self._codes)

    async def count(self) -> int:
        return len(self._codes)
