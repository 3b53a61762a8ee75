"""Repositories for BoothCode persistence."""

from boothcode.infrastructure.persistence.repositories.issued_code_repository import (
    IssuedCodeRepository,
)

__all__ = ["IssuedCodeRepository"]
