"""SQLAlchemy model for the issued_codes table.

Each row records one booth code handed out by the generator. Rows are only
ever inserted; the unique constraint on ``code`` is what keeps two writers
from issuing the same code.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from boothcode.infrastructure.persistence.database import Base


class IssuedCodeModel(Base):
    """SQLAlchemy model for the issued_codes table.

    Attributes:
        id: Auto-incrementing primary key; also the issuance order.
        code: The issued booth code (unique).
        issued_at: Timestamp when the code was issued.
    """

    __tablename__ = "issued_codes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    code: Mapped[str] = mapped_column(
        String(8),
        unique=True,
        nullable=False,
        index=True,
        comment="Issued booth code",
    )
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<IssuedCode(id={self.id}, code='{self.code}')>"
