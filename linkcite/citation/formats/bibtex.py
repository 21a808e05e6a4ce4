"""
BibTeX Citation Format
======================

Formats references as BibTeX entries for use in LaTeX documents.

Output format:
    % linkcite Citation Export
    % Version: linkcite 0.1.0
    % Generated: 2026-02-05

    @misc{bbc.com2024,
      title = {C\\&A Report},
      author = {Smith, Jane and Doe, John},
      date = {2024-01-15},
      howpublished = {BBC News},
      url = {https://www.bbc.com/news/article},
      note = {Translated title: Report on C\\&A},
    }

Entry types:
- @article: For scholarly references (DOI or journal present)
- @misc: For news-like and generic references

Dates:
- Full date: date = {YYYY-MM-DD}
- Year and month: year + month
- Year only: year
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set

from linkcite.attributes import DateGranularity
from linkcite.citation.formats.base import BaseFormat
from linkcite.citation.names import bibliography_name, entry_key, escape_latex, join_names
from linkcite.citation.styles import CitationStyle
from linkcite.reference.models import Reference, ReferenceKind


@dataclass
class BibTeXEntry:
    """A BibTeX entry."""
    entry_type: str  # article, misc
    cite_key: str
    fields: Dict[str, str]


def _note(reference: Reference) -> Optional[str]:
    parts: List[str] = []
    if reference.translated_title:
        parts.append(f"Translated title: {escape_latex(reference.translated_title.text)}")
    if reference.archive_url:
        archived = f"Archived at \\url{{{reference.archive_url}}}"
        if reference.archive_date:
            archived += f" on {reference.archive_date.iso()}"
        parts.append(archived)
    return ". ".join(parts) if parts else None


def build_entry(reference: Reference, cite_key: Optional[str] = None) -> BibTeXEntry:
    """
    Build the entry type, key and fields for a reference.

    Free-text fields are escaped one by one; URL and DOI are kept verbatim.

    Args:
        reference: Reference to format
        cite_key: Explicit key; derived from the URL and year when omitted

    Returns:
        BibTeXEntry with type, key, and fields
    """
    entry_type = "article" if reference.kind == ReferenceKind.SCHOLARLY else "misc"
    key = cite_key or entry_key(reference.url, reference.year)
    fields: Dict[str, str] = {}

    if reference.title:
        fields["title"] = escape_latex(reference.title)
    if reference.authors:
        fields["author"] = join_names([bibliography_name(a, escape_latex) for a in reference.authors])

    date = reference.date
    if date:
        if date.granularity == DateGranularity.FULL:
            fields["date"] = date.iso()
        else:
            fields["year"] = f"{date.year:04d}"
            if date.granularity == DateGranularity.YEAR_MONTH:
                fields["month"] = f"{date.month}"

    if reference.site_name:
        fields["howpublished"] = escape_latex(reference.site_name)
    if reference.publisher:
        fields["publisher"] = escape_latex(reference.publisher)
    if reference.journal:
        fields["journal"] = escape_latex(reference.journal)
    if reference.volume:
        fields["volume"] = escape_latex(reference.volume)
    if reference.doi:
        fields["doi"] = reference.doi
    if reference.language:
        fields["language"] = escape_latex(reference.language)
    if reference.url:
        fields["url"] = reference.url

    note = _note(reference)
    if note:
        fields["note"] = note

    return BibTeXEntry(entry_type=entry_type, cite_key=key, fields=fields)


def entry_to_string(entry: BibTeXEntry) -> str:
    """Convert a BibTeXEntry to string format."""
    lines = [f"@{entry.entry_type}{{{entry.cite_key},"]
    for key, value in entry.fields.items():
        lines.append(f"  {key} = {{{value}}},")
    lines.append("}")
    return "\n".join(lines)


def format_bibliography(reference: Reference, cite_key: Optional[str] = None) -> str:
    """
    Format a reference as a single BibTeX entry.

    Example:
        >>> print(format_bibliography(reference))
        @misc{example.com2024,
          title = {Example},
          year = {2024},
          url = {https://example.com},
        }
    """
    return entry_to_string(build_entry(reference, cite_key))


def unique_key(key: str, used: Set[str]) -> str:
    """
    Return ``key``, or ``key_1``, ``key_2``, ... when already in ``used``.

    The returned key is added to ``used``.
    """
    candidate = key
    counter = 1
    while candidate in used:
        candidate = f"{key}_{counter}"
        counter += 1
    used.add(candidate)
    return candidate


class BibTeXFormat(BaseFormat):
    """
    Formats references as BibTeX entries.

    BibTeX is the standard format for bibliographic references
    in LaTeX documents.
    """

    style = CitationStyle.BIBLIOGRAPHY

    def format_reference(self, reference: Reference) -> str:
        """Format a single reference as a BibTeX entry."""
        return format_bibliography(reference)

    def format_all(
        self,
        references: Sequence[Reference],
        include_attribution: bool = True,
    ) -> str:
        """
        Format all references as one BibTeX file.

        Colliding keys are suffixed with ``_1``, ``_2``, ... in input order.

        Args:
            references: References to export
            include_attribution: Whether to include the header comments

        Returns:
            Complete BibTeX file content
        """
        lines: List[str] = []

        if include_attribution:
            lines.append("% linkcite Citation Export")
            lines.append(f"% Version: {self.version}")
            lines.append(f"% Generated: {datetime.now().strftime('%Y-%m-%d')}")

        used: Set[str] = set()
        blocks: List[str] = []
        for reference in references:
            entry = build_entry(reference)
            entry.cite_key = unique_key(entry.cite_key, used)
            blocks.append(entry_to_string(entry))

        if lines:
            return "\n".join(lines) + "\n\n" + "\n\n".join(blocks)
        return "\n\n".join(blocks)

    def get_file_extension(self) -> str:
        """Return the file extension for this format."""
        return "bib"

    def get_media_type(self) -> str:
        """Return the media type for this format."""
        return "application/x-bibtex"


__all__ = [
    "BibTeXFormat",
    "BibTeXEntry",
    "build_entry",
    "entry_to_string",
    "format_bibliography",
    "unique_key",
]
