"""
Infobox Citation Format
=======================

Formats references as the MediaWiki {{cite web}} template.

Output format (multiline):
    {{cite web
    | title = Risolubilità del contratto
    | trans-title = Termination of contract
    | last = Rossi
    | first = Mario
    | date = 2024-01-15
    | website = Example News
    | url = https://example.com/article
    | archive-url = https://web.archive.org/web/20240115123000/https://example.com/article
    | archive-date = 2024-01-15
    }}

Output format (singleline):
    {{cite web |title=Risolubilità del contratto |url=https://example.com/article }}

Author parameters:
- One author: last/first (or author when the name cannot be split)
- Several authors: numbered last1/first1, last2/first2, ... (authorN)
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from linkcite.attributes import Author
from linkcite.citation.formats.base import BaseFormat
from linkcite.citation.styles import CitationStyle, InfoboxLayout
from linkcite.reference.models import Reference

Parameter = Tuple[str, str]


def _author_parameters(authors: Sequence[Author]) -> List[Parameter]:
    params: List[Parameter] = []
    numbered = len(authors) > 1
    for index, author in enumerate(authors, start=1):
        suffix = str(index) if numbered else ""
        given, family = author.split()
        if given:
            params.append((f"last{suffix}", family))
            params.append((f"first{suffix}", given))
        else:
            params.append((f"author{suffix}", family))
    return params


def infobox_parameters(reference: Reference) -> List[Parameter]:
    """
    Collect the template parameters for a reference, in output order.

    Absent fields produce no parameter.
    """
    params: List[Parameter] = []

    if reference.title:
        params.append(("title", reference.title))
    if reference.translated_title:
        params.append(("trans-title", reference.translated_title.text))
    params.extend(_author_parameters(reference.authors))
    if reference.date:
        params.append(("date", reference.date.iso()))
    if reference.language:
        params.append(("language", reference.language))
    if reference.site_name:
        params.append(("website", reference.site_name))
    if reference.publisher:
        params.append(("publisher", reference.publisher))
    if reference.journal:
        params.append(("journal", reference.journal))
    if reference.volume:
        params.append(("volume", reference.volume))
    if reference.doi:
        params.append(("doi", reference.doi))
    if reference.url:
        params.append(("url", reference.url))
    if reference.archive_url:
        params.append(("archive-url", reference.archive_url))
    if reference.archive_date:
        params.append(("archive-date", reference.archive_date.iso()))

    return params


def format_infobox(reference: Reference, layout: InfoboxLayout = InfoboxLayout.MULTILINE) -> str:
    """
    Format a reference as a {{cite web}} template.

    Args:
        reference: Reference to format
        layout: One parameter per line, or everything on one line

    Returns:
        Template text

    Example:
        >>> print(format_infobox(reference))
        {{cite web
        | title = Example
        | url = https://example.com
        }}
    """
    params = infobox_parameters(reference)

    if layout == InfoboxLayout.SINGLELINE:
        body = "".join(f" |{key}={value}" for key, value in params)
        return f"{{{{cite web{body} }}}}"

    lines = ["{{cite web"]
    lines.extend(f"| {key} = {value}" for key, value in params)
    lines.append("}}")
    return "\n".join(lines)


class InfoboxFormat(BaseFormat):
    """
    Formats references as MediaWiki {{cite web}} templates.
    """

    style = CitationStyle.INFOBOX

    def __init__(self, version: Optional[str] = None, layout: InfoboxLayout = InfoboxLayout.MULTILINE):
        super().__init__(version)
        self.layout = layout

    def format_reference(self, reference: Reference) -> str:
        """Format a single reference as a template."""
        return format_infobox(reference, self.layout)

    def attribution(self) -> str:
        """Generator footer as a wikitext comment, invisible once pasted into a page."""
        today = datetime.now().strftime("%Y-%m-%d")
        return f"<!-- Generated by {self.version} on {today} -->"

    def get_file_extension(self) -> str:
        """Return the file extension for this format."""
        return "txt"

    def get_media_type(self) -> str:
        """Return the media type for this format."""
        return "text/plain; charset=utf-8"


__all__ = ["InfoboxFormat", "format_infobox", "infobox_parameters"]
