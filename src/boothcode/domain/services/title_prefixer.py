"""Title prefixer service.

Parses and rebuilds the ``"<code> | <title>"`` convention used on collection
titles.

Prefix grammar (one grammar for every handler):
    optional whitespace, 1-3 uppercase letters, 0-2 digits,
    optional whitespace, "|", at most one space

This accepts current primary codes (``B58``), fallback codes (``KT4``) and
older hand-typed prefixes. Only one leading prefix is removed per strip, and
``build`` always writes exactly one space after the bar, which is what makes
``strip(build(code, strip(title))) == strip(title)`` hold for any title.
"""

import re

from boothcode.domain.entities.parsed_title import ParsedTitle


class TitlePrefixer:
    """Parse, strip and build booth code title prefixes."""

    SEPARATOR = " | "

    PREFIX_PATTERN = re.compile(
        r"^\s*(?P<code>[A-Z]{1,3}[0-9]{0,2})\s*\|[ ]?(?P<remainder>.*)\Z",
        re.DOTALL,
    )

    @classmethod
    def parse(cls, title: str) -> ParsedTitle:
        """Split a title into its prefix code and remainder.

        Examples:
            >>> TitlePrefixer.parse("B58 | Handmade Jewelry")
            ParsedTitle(has_prefix=True, code='B58', remainder='Handmade Jewelry')
            >>> TitlePrefixer.parse("Handmade Jewelry")
            ParsedTitle(has_prefix=False, code=None, remainder='Handmade Jewelry')
        """
        match = cls.PREFIX_PATTERN.match(title)
        if match is None:
            return ParsedTitle(has_prefix=False, code=None, remainder=title)
        return ParsedTitle(
            has_prefix=True,
            code=match.group("code"),
            remainder=match.group("remainder"),
        )

    @classmethod
    def strip(cls, title: str) -> str:
        """Remove a leading code prefix, returning the title unchanged if it has none."""
        return cls.parse(title).remainder

    @classmethod
    def build(cls, code: str, bare_title: str) -> str:
        """Prefix a bare title with a code.

        Examples:
            >>> TitlePrefixer.build("B58", "Handmade Jewelry")
            'B58 | Handmade Jewelry'
        """
        return f"{code}{cls.SEPARATOR}{bare_title}"

    @classmethod
    def has_prefix(cls, title: str, code: str) -> bool:
        """Check whether a title starts exactly with ``"<code> | "``."""
        return title.startswith(f"{code}{cls.SEPARATOR}")

    @classmethod
    def apply(cls, code: str, title: str) -> str:
        """Replace whatever prefix a title has with ``code``."""
        return cls.build(code, cls.strip(title))
