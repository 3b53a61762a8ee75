"""Domain entities for BoothCode.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from boothcode.domain.entities.collection import Collection
from boothcode.domain.entities.parsed_title import ParsedTitle
from boothcode.domain.entities.seller import Seller

__all__ = [
    "Collection",
    "ParsedTitle",
    "Seller",
]
