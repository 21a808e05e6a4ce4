"""
Citation Format Generators
==========================

Format generators for the supported citation styles.

Available formats:
- infobox: MediaWiki {{cite web}} template
- bibtex: BibTeX entry for LaTeX documents
- harvard: Harvard author-date reference

Each generator implements the BaseFormat interface:
- format_reference(): Format a single reference
- format_all(): Format multiple references as one document
"""

from linkcite.citation.formats.base import BaseFormat
from linkcite.citation.formats.infobox import InfoboxFormat, format_infobox
from linkcite.citation.formats.bibtex import BibTeXFormat, format_bibliography
from linkcite.citation.formats.harvard import HarvardFormat, format_in_text

__all__ = [
    "BaseFormat",
    "InfoboxFormat",
    "BibTeXFormat",
    "HarvardFormat",
    "format_infobox",
    "format_bibliography",
    "format_in_text",
]
