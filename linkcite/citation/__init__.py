"""
Citation Module
===============

Renders references as citation text.

Styles:
- infobox: MediaWiki {{cite web}} template
- bibliography: BibTeX entry
- in_text: Harvard author-date reference

Example:
    >>> from linkcite.citation import CitationStyle, render
    >>> print(render(reference, CitationStyle.IN_TEXT))
    Smith, J. (2024) 'Example', Example News. Available at: https://example.com.
"""

from linkcite.citation.styles import CitationStyle, InfoboxLayout, parse_styles
from linkcite.citation.names import (
    escape_latex,
    entry_key,
    harvard_authors,
    harvard_name,
    join_names,
    split_name,
)
from linkcite.citation.formats import format_bibliography, format_in_text, format_infobox
from linkcite.citation.formatter import CitationFormatter, FormattedCitation, render

__all__ = [
    # Styles
    "CitationStyle",
    "InfoboxLayout",
    "parse_styles",
    # Text helpers
    "escape_latex",
    "entry_key",
    "harvard_authors",
    "harvard_name",
    "join_names",
    "split_name",
    # Formatters
    "format_infobox",
    "format_bibliography",
    "format_in_text",
    "render",
    "CitationFormatter",
    "FormattedCitation",
]
