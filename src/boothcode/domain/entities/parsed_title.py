"""Structured view of a collection title."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedTitle:
    """A title split into its booth code prefix and the remainder.

    Attributes:
        has_prefix: Whether the title starts with a "<code> |" segment.
        code: The code found in the prefix, or None.
        remainder: The title without the prefix (the whole title if none).
    """

    has_prefix: bool
    code: str | None
    remainder: str
