"""JSON file code registry.

The backing file holds a flat JSON array of issued codes in issuance order:

    ["B58", "Q12", "KT4"]

Every add rewrites the whole file. A missing file is treated as an empty
registry; an unreadable or unparsable file is logged and reset to empty so
the service keeps running, at the cost of the lost history.
"""

import asyncio
import json
from pathlib import Path

from boothcode.core.logging import get_logger
from boothcode.domain.exceptions import (
    CodeAlreadyRegisteredError,
    CorruptRegistryError,
    RegistryStorageError,
)
from boothcode.infrastructure.registry.base import CodeRegistry

logger = get_logger(__name__)


def parse_registry_document(raw: str) -> list[str]:
    """Parse the registry file contents into an ordered list of codes.

    Duplicate entries are dropped, keeping the first occurrence.

    Raises:
        CorruptRegistryError: If the contents are not a JSON array of strings.
    """
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptRegistryError(f"Registry file is not valid JSON: {e}") from e

    if not isinstance(document, list):
        raise CorruptRegistryError(
            f"Registry file must contain a JSON array, got {type(document).__name__}"
        )

    codes: list[str] = []
    seen: set[str] = set()
    for entry in document:
        if not isinstance(entry, str):
            raise CorruptRegistryError(f"Registry entry must be a string, got {entry!r}")
        if entry not in seen:
            codes.append(entry)
            seen.add(entry)
    return codes


class JsonFileCodeRegistry(CodeRegistry):
    """Registry persisted as a JSON array in a local file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._codes: list[str] = []
        self._index: set[str] = set()
        self._loaded = False

    async def load(self) -> None:
        """Load the file, initializing an empty registry if it is missing or corrupt."""
        self._codes = await asyncio.to_thread(self._read)
        self._index = set(self._codes)
        self._loaded = True
        logger.info("Code registry loaded", path=str(self.path), codes=len(self._codes))

    def _read(self) -> list[str]:
        if not self.path.exists():
            logger.info("Code registry file not found, starting empty", path=str(self.path))
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
            return parse_registry_document(raw)
        except (OSError, UnicodeDecodeError, CorruptRegistryError) as e:
            logger.warning(
                "Code registry unreadable, resetting to empty",
                path=str(self.path),
                error=str(e),
            )
            return []

    def _write(self, codes: list[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(codes, indent=2), encoding="utf-8")
        except OSError as e:
            raise RegistryStorageError(
                f"Failed to write code registry at '{self.path}': {e}"
            ) from e

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    async def contains(self, code: str) -> bool:
        await self._ensure_loaded()
        return code in self._index

    async def add(self, code: str) -> None:
        await self._ensure_loaded()
        if code in self._index:
            raise CodeAlreadyRegisteredError(code)

        updated = self._codes + [code]
        await asyncio.to_thread(self._write, updated)

        # Only commit to memory once the file holds the code
        self._codes = updated
        self._index.add(code)
        logger.debug("Code registered", code=code, path=str(self.path))

    async def list_codes(self) -> list[str]:
        await self._ensure_loaded()
        return list(self._codes)

    async def count(self) -> int:
        await self._ensure_loaded()
        return len(self._codes)
