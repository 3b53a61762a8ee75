"""Repository for issued booth codes."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from boothcode.infrastructure.persistence.models.issued_code import IssuedCodeModel


class IssuedCodeRepository:
    """Repository for the issued_codes table."""

    def __init__(self, session: AsyncSession):
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def exists(self, code: str) -> bool:
        """Check whether a code has been issued.

        Args:
            code: Booth code to look up.

        Returns:
            True if a row exists for the code.
        """
        stmt = select(IssuedCodeModel.id).where(IssuedCodeModel.code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(self, code: str) -> IssuedCodeModel:
        """Insert an issued code and commit.

        Raises:
            IntegrityError: If the code is already present.
        """
        issued = IssuedCodeModel(code=code)
        self.session.add(issued)
        await self.session.commit()
        await self.session.refresh(issued)
        return issued

    async def list_codes(self) -> list[str]:
        """List every issued code in issuance order."""
        stmt = select(IssuedCodeModel.code).order_by(IssuedCodeModel.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        stmt = select(func.count()).select_from(IssuedCodeModel)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
