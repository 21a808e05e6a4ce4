"""
Citation Styles
===============

The closed set of output grammars supported by linkcite.

- infobox: MediaWiki {{cite web}} template
- bibliography: BibTeX entry
- in_text: Harvard author-date reference
"""

from enum import Enum
from typing import List, Union

from linkcite.errors import UnsupportedFormatError


class CitationStyle(str, Enum):
    """Supported citation styles."""
    INFOBOX = "infobox"
    BIBLIOGRAPHY = "bibliography"
    IN_TEXT = "in_text"

    @classmethod
    def parse(cls, value: Union[str, "CitationStyle"]) -> "CitationStyle":
        """
        Parse a style from its name or a common alias.

        Raises:
            UnsupportedFormatError: If the style is not supported
        """
        if isinstance(value, CitationStyle):
            return value
        key = str(value).strip().lower().replace("-", "_")
        key = STYLE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedFormatError(str(value), [s.value for s in cls])


class InfoboxLayout(str, Enum):
    """Line layout of the {{cite web}} template."""
    MULTILINE = "multiline"
    SINGLELINE = "singleline"


STYLE_ALIASES = {
    "wiki": "infobox",
    "cite_web": "infobox",
    "bibtex": "bibliography",
    "harvard": "in_text",
    "intext": "in_text",
}


def parse_styles(values: List[str]) -> List[CitationStyle]:
    """Parse a list of style names, expanding ``all`` to every style."""
    styles: List[CitationStyle] = []
    for value in values:
        if str(value).strip().lower() == "all":
            candidates = list(CitationStyle)
        else:
            candidates = [CitationStyle.parse(value)]
        for style in candidates:
            if style not in styles:
                styles.append(style)
    return styles


__all__ = ["CitationStyle", "InfoboxLayout", "STYLE_ALIASES", "parse_styles"]
