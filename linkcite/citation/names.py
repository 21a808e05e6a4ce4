"""
Citation Text Helpers
=====================

Name, list and escaping rules shared by the citation formats.

- split_name: "John A. Doe" -> ("John A.", "Doe"); single tokens never split
- harvard_name: "John A. Doe" -> "Doe, J.A."
- bibliography_name: "John A. Doe" -> "Doe, John A."
- join_names: ["A"] -> "A", ["A", "B"] -> "A and B", ["A", "B", "C"] -> "A, B and C"
- harvard_authors: three or more authors collapse to "First et al."
- escape_latex: escapes & % $ # _ { } ~ ^ for BibTeX output
- entry_key: "https://news.bbc.co.uk/x", 2024 -> "bbc.co.uk2024"

Example:
    >>> from linkcite.attributes import Author
    >>> harvard_authors([Author.from_name("Jane Smith")])
    'Smith, J.'
"""

from typing import Callable, Dict, Optional, Sequence
from urllib.parse import urlparse

import tldextract

from linkcite.attributes import Author, split_name


# =============================================================================
# ESCAPING
# =============================================================================

# Characters with special meaning in (La)TeX and their escaped forms
LATEX_ESCAPES: Dict[str, str] = {
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\~{}",
    "^": r"\^{}",
}


def escape_latex(text: str) -> str:
    """
    Escape TeX special characters for BibTeX field values.

    Each character is translated independently in a single pass, so the
    braces introduced by ``\\~{}`` are never escaped again. Text without
    special characters is returned unchanged.

    Example:
        >>> escape_latex("C&A Report")
        'C\\\\&A Report'
    """
    return "".join(LATEX_ESCAPES.get(char, char) for char in text)


def _identity(text: str) -> str:
    return text


# =============================================================================
# AUTHOR NAMES
# =============================================================================


def initials(given_names: str) -> str:
    """
    Reduce given names to initials with trailing periods, no spaces.

    Example:
        >>> initials("John A.")
        'J.A.'
    """
    return "".join(f"{name[0]}." for name in given_names.split() if name)


def harvard_name(author: Author) -> str:
    """Format an author as ``Family, I.`` (unsplit names as-is)."""
    given, family = author.split()
    if given:
        return f"{family}, {initials(given)}"
    return family


def bibliography_name(author: Author, escape: Callable[[str], str] = _identity) -> str:
    """
    Format an author as ``Family, Given`` for BibTeX.

    Names that cannot be split (organizations, single tokens) are wrapped
    in braces so BibTeX does not try to split them itself.
    """
    given, family = author.split()
    if given:
        return f"{escape(family)}, {escape(given)}"
    return f"{{{escape(family)}}}"


def join_names(names: Sequence[str]) -> str:
    """
    Join names: ``A``, ``A and B``, ``A, B and C``.
    """
    names = list(names)
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def harvard_authors(authors: Sequence[Author]) -> str:
    """
    Format an author list for Harvard in-text references.

    One author renders alone, two are joined with "and", three or more
    collapse to the first author followed by "et al.".
    """
    if not authors:
        return ""
    if len(authors) >= 3:
        return f"{harvard_name(authors[0])} et al."
    return join_names([harvard_name(a) for a in authors])


# =============================================================================
# ENTRY KEYS
# =============================================================================

# Bundled public suffix snapshot; no network fetch, no cache directory
_extract_domain = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())


def url_domain(url: Optional[str]) -> Optional[str]:
    """
    Registrable domain of a URL (``news.bbc.co.uk`` -> ``bbc.co.uk``).

    Hosts without a public suffix (``localhost``, IP addresses) are returned
    as they are.

    Example:
        >>> url_domain("https://www.bbc.com/news/article")
        'bbc.com'
    """
    if not url:
        return None
    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"//{candidate}"
    try:
        host = urlparse(candidate).hostname
    except ValueError:
        return None
    if not host:
        return None
    parts = _extract_domain(host)
    if parts.domain and parts.suffix:
        return f"{parts.domain}.{parts.suffix}"
    if host.startswith("www."):
        host = host[len("www."):]
    return host or None


def entry_key(url: Optional[str], year: Optional[int] = None) -> str:
    """
    BibTeX entry key: domain followed by the four-digit year when known.

    Falls back to ``ref`` when the URL has no usable host. Keys are not
    unique across entries; batch exports de-duplicate them.
    """
    base = url_domain(url) or "ref"
    if year is not None:
        return f"{base}{year:04d}"
    return base


__all__ = [
    "LATEX_ESCAPES",
    "escape_latex",
    "split_name",
    "initials",
    "harvard_name",
    "bibliography_name",
    "join_names",
    "harvard_authors",
    "url_domain",
    "entry_key",
]
