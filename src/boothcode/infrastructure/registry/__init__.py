"""Code registry backends.

The registry records every issued booth code. Backends:
- memory: process memory, for tests and dry runs
- file: a JSON array on local disk (default)
- database: the issued_codes table through SQLAlchemy
"""

from boothcode.core.config import Settings
from boothcode.infrastructure.persistence.database import DatabaseManager
from boothcode.infrastructure.registry.base import CodeRegistry
from boothcode.infrastructure.registry.database_registry import DatabaseCodeRegistry
from boothcode.infrastructure.registry.file_registry import (
    JsonFileCodeRegistry,
    parse_registry_document,
)
from boothcode.infrastructure.registry.memory_registry import InMemoryCodeRegistry


def build_code_registry(settings: Settings) -> CodeRegistry:
    """Create the registry selected by ``settings.registry_backend``."""
    if settings.registry_backend == "memory":
        return InMemoryCodeRegistry()
    if settings.registry_backend == "database":
        return DatabaseCodeRegistry(
            DatabaseManager(settings.database_url, echo=settings.db_echo)
        )
    return JsonFileCodeRegistry(settings.registry_path)


__all__ = [
    "CodeRegistry",
    "DatabaseCodeRegistry",
    "InMemoryCodeRegistry",
    "JsonFileCodeRegistry",
    "build_code_registry",
    "parse_registry_document",
]
