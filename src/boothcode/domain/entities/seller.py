"""Seller entity from the marketplace seller directory."""

from dataclasses import dataclass


@dataclass
class Seller:
    """A marketplace seller.

    Attributes:
        seller_id: Externally assigned, non-negative integer id.
        handle: Slug-style handle, identical to the seller's collection handle.
        name: Shop display name, when the directory returns one.
    """

    seller_id: int
    handle: str
    name: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.seller_id, bool) or not isinstance(self.seller_id, int):
            raise ValueError("Seller id must be an integer")
        if self.seller_id < 0:
            raise ValueError("Seller id must be non-negative")
