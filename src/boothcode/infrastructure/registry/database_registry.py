"""SQLAlchemy-backed code registry.

Stores issued codes in the ``issued_codes`` table. Suitable when the service
runs against a server database; the table's unique constraint rejects a code
issued concurrently by another process.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from boothcode.core.logging import get_logger
from boothcode.domain.exceptions import CodeAlreadyRegisteredError, RegistryStorageError
from boothcode.infrastructure.persistence.database import DatabaseManager
from boothcode.infrastructure.persistence.repositories import IssuedCodeRepository
from boothcode.infrastructure.registry.base import CodeRegistry

logger = get_logger(__name__)


class DatabaseCodeRegistry(CodeRegistry):
    """Registry persisted in a relational database."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    async def load(self) -> None:
        """Create the issued_codes table if it does not exist yet."""
        try:
            await self.db.create_tables()
        except SQLAlchemyError as e:
            raise RegistryStorageError(f"Failed to initialize code registry table: {e}") from e
        logger.info("Code registry table ready", codes=await self.count())

    async def contains(self, code: str) -> bool:
        try:
            async with self.db.session() as session:
                return await IssuedCodeRepository(session).exists(code)
        except SQLAlchemyError as e:
            raise RegistryStorageError(f"Failed to query code registry: {e}") from e

    async def add(self, code: str) -> None:
        try:
            async with self.db.session() as session:
                await IssuedCodeRepository(session).create(code)
        except IntegrityError as e:
            logger.warning("Code registration rejected: already issued", code=code)
            raise CodeAlreadyRegisteredError(code) from e
        except SQLAlchemyError as e:
            raise RegistryStorageError(f"Failed to register code '{code}': {e}") from e
        logger.debug("Code registered", code=code)

    async def list_codes(self) -> list[str]:
        try:
            async with self.db.session() as session:
                return await IssuedCodeRepository(session).list_codes()
        except SQLAlchemyError as e:
            raise RegistryStorageError(f"Failed to list code registry: {e}") from e

    async def count(self) -> int:
        try:
            async with self.db.session() as session:
                return await IssuedCodeRepository(session).count()
        except SQLAlchemyError as e:
            raise RegistryStorageError(f"Failed to count code registry: {e}") from e

    async def close(self) -> None:
        await self.db.disconnect()
