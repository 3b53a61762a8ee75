"""Collection entity as seen through the commerce platform."""

from dataclasses import dataclass


@dataclass
class Collection:
    """A seller's collection on the commerce platform.

    Attributes:
        id: Platform identifier (numeric id or global id string).
        title: Display title, expected to carry the "<code> | " prefix.
        handle: Slug-style handle shared with the seller directory.
        code: Booth code stored in the collection's metafield, if any.
    """

    id: str
    title: str
    handle: str | None = None
    code: str | None = None
