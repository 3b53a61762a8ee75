"""Persistence layer for the database-backed code registry."""

from boothcode.infrastructure.persistence.database import Base, DatabaseManager

__all__ = ["Base", "DatabaseManager"]
