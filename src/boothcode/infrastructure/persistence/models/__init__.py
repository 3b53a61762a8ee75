"""SQLAlchemy ORM models for BoothCode."""

from boothcode.infrastructure.persistence.models.issued_code import IssuedCodeModel

__all__ = ["IssuedCodeModel"]
