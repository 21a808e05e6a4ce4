"""
Harvard Citation Format
=======================

Formats references as Harvard author-date references.

Output format:
    Smith, J. and Doe, J. (2024) 'Termination of contract', Example News.
    Available at: https://example.com/article (Accessed: 15 January 2024).

Rules:
- Authors: "Family, I." each; two joined with "and"; three or more as
  "First et al."
- Year from the publication date, "n.d." when missing
- Source: site name, else publisher, else journal
- Access date: archive date in long form ("15 January 2024")

Translated title and archive URL are not part of the Harvard reference.
"""

from typing import List, Optional

from linkcite.citation.formats.base import BaseFormat
from linkcite.citation.names import harvard_authors
from linkcite.citation.styles import CitationStyle
from linkcite.reference.models import Reference

NO_DATE = "n.d."


def _source(reference: Reference) -> Optional[str]:
    return reference.site_name or reference.publisher or reference.journal


def format_in_text(reference: Reference) -> str:
    """
    Format a reference in Harvard style.

    Example:
        >>> format_in_text(reference)
        "Smith, J. (2024) 'Example', Example News. Available at: https://example.com (Accessed: 15 January 2024)."
    """
    year = f"{reference.year:04d}" if reference.year is not None else NO_DATE
    authors = harvard_authors(reference.authors)

    parts: List[str] = [f"{authors} ({year})" if authors else f"({year})"]

    if reference.title:
        parts.append(f" '{reference.title}'")

    source = _source(reference)
    if source:
        parts.append(f", {source}")
    parts.append(".")

    if reference.url:
        parts.append(f" Available at: {reference.url}")
        if reference.archive_date:
            parts.append(f" (Accessed: {reference.archive_date.long_form()}).")
        else:
            parts.append(".")
    elif reference.archive_date:
        parts.append(f" (Accessed: {reference.archive_date.long_form()}).")

    return "".join(parts)


class HarvardFormat(BaseFormat):
    """
    Formats references as Harvard author-date references.

    Batch output lists one reference per paragraph.
    """

    style = CitationStyle.IN_TEXT

    def format_reference(self, reference: Reference) -> str:
        return format_in_text(reference)

    def get_file_extension(self) -> str:
        """Return the file extension for this format."""
        return "txt"

    def get_media_type(self) -> str:
        """Return the media type for this format."""
        return "text/plain; charset=utf-8"


__all__ = ["HarvardFormat", "format_in_text", "NO_DATE"]
