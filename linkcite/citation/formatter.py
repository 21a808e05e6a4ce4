"""
Citation Formatter Service
==========================

Central service for rendering references in the supported citation styles.

Coordinates between:
- Reference records (classified and enriched)
- Format generators (for output formatting)

Example:
    >>> from linkcite.citation import CitationFormatter, CitationStyle
    >>>
    >>> formatter = CitationFormatter()
    >>> single = formatter.format_single(reference, "bibliography")
    >>> print(single.text)
    @misc{example.com2024,
    ...

    >>> # Every style at once
    >>> texts = formatter.format_all(reference)
    >>> texts[CitationStyle.IN_TEXT]
    "Smith, J. (2024) 'Example', Example News. Available at: https://example.com."
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from linkcite.citation.formats.base import BaseFormat
from linkcite.citation.formats.bibtex import BibTeXFormat, format_bibliography
from linkcite.citation.formats.harvard import HarvardFormat, format_in_text
from linkcite.citation.formats.infobox import InfoboxFormat, format_infobox
from linkcite.citation.styles import CitationStyle, InfoboxLayout
from linkcite.reference.models import Reference, ReferenceKind


def render(
    reference: Reference,
    style: CitationStyle,
    layout: InfoboxLayout = InfoboxLayout.MULTILINE,
) -> str:
    """
    Render a reference in one citation style.

    Args:
        reference: Classified, optionally enriched reference
        style: Target style
        layout: Line layout, used by the infobox style only

    Returns:
        Citation text
    """
    if style == CitationStyle.INFOBOX:
        return format_infobox(reference, layout)
    if style == CitationStyle.BIBLIOGRAPHY:
        return format_bibliography(reference)
    if style == CitationStyle.IN_TEXT:
        return format_in_text(reference)
    raise ValueError(f"Unhandled citation style: {style!r}")


@dataclass
class FormattedCitation:
    """
    A single formatted citation with metadata.

    Attributes:
        text: Formatted citation text
        style: Style used
        kind: Reference kind chosen by the classifier
        url: Cited URL if available
    """
    text: str
    style: CitationStyle
    kind: ReferenceKind
    url: Optional[str] = None


# Descriptions shown by list_formats()
STYLE_DESCRIPTIONS: Dict[CitationStyle, str] = {
    CitationStyle.INFOBOX: "MediaWiki {{cite web}} template",
    CitationStyle.BIBLIOGRAPHY: "BibTeX entry for LaTeX documents",
    CitationStyle.IN_TEXT: "Harvard author-date reference",
}


class CitationFormatter:
    """
    Service for rendering citations.

    Supports every citation style and provides a unified interface
    for single citations and batch exports.

    Attributes:
        version: Version string written in export headers
        layout: Infobox line layout

    Example:
        >>> formatter = CitationFormatter(layout=InfoboxLayout.SINGLELINE)
        >>> output = formatter.format_entries(references, CitationStyle.BIBLIOGRAPHY)
    """

    def __init__(
        self,
        version: Optional[str] = None,
        layout: InfoboxLayout = InfoboxLayout.MULTILINE,
    ):
        """
        Initialize the citation formatter.

        Args:
            version: Version string for export headers
            layout: Line layout of infobox templates
        """
        self.layout = layout

        # Initialize format handlers
        self._handlers: Dict[CitationStyle, BaseFormat] = {
            CitationStyle.INFOBOX: InfoboxFormat(version, layout=layout),
            CitationStyle.BIBLIOGRAPHY: BibTeXFormat(version),
            CitationStyle.IN_TEXT: HarvardFormat(version),
        }
        self.version = self._handlers[CitationStyle.BIBLIOGRAPHY].version

    def _get_handler(self, style: Union[CitationStyle, str]) -> BaseFormat:
        """
        Get the appropriate format handler.

        Raises:
            UnsupportedFormatError: If the style is not supported
        """
        return self._handlers[CitationStyle.parse(style)]

    def format_single(
        self,
        reference: Reference,
        style: Union[CitationStyle, str] = CitationStyle.INFOBOX,
    ) -> FormattedCitation:
        """
        Format a single reference.

        Args:
            reference: Reference to format
            style: Output style (CitationStyle enum or name)

        Returns:
            FormattedCitation with text and metadata

        Example:
            >>> result = formatter.format_single(reference, "harvard")
            >>> result.style
            <CitationStyle.IN_TEXT: 'in_text'>
        """
        handler = self._get_handler(style)
        return FormattedCitation(
            text=handler.format_reference(reference),
            style=handler.style,
            kind=reference.kind,
            url=reference.url,
        )

    def format_all(
        self,
        reference: Reference,
        styles: Optional[Sequence[Union[CitationStyle, str]]] = None,
    ) -> Dict[CitationStyle, str]:
        """
        Format one reference in several styles.

        Args:
            reference: Reference to format
            styles: Styles to render, every style when omitted

        Returns:
            Mapping of style to citation text, in request order
        """
        if styles is None:
            styles = list(CitationStyle)
        texts: Dict[CitationStyle, str] = {}
        for style in styles:
            handler = self._get_handler(style)
            texts[handler.style] = handler.format_reference(reference)
        return texts

    def format_entries(
        self,
        references: Sequence[Reference],
        style: Union[CitationStyle, str] = CitationStyle.BIBLIOGRAPHY,
        include_attribution: bool = True,
    ) -> str:
        """
        Export several references in one style as a single document.

        Args:
            references: References to export
            style: Output style
            include_attribution: Whether to include the generator header or footer

        Returns:
            Document text; BibTeX keys are unique within the document
        """
        handler = self._get_handler(style)
        return handler.format_all(references, include_attribution=include_attribution)

    def get_file_extension(self, style: Union[CitationStyle, str]) -> str:
        """
        Get the file extension for a style.

        Example:
            >>> formatter.get_file_extension("bibtex")
            'bib'
        """
        return self._get_handler(style).get_file_extension()

    def get_media_type(self, style: Union[CitationStyle, str]) -> str:
        """Get the media type (MIME type) for a style."""
        return self._get_handler(style).get_media_type()

    def list_formats(self) -> List[Dict[str, str]]:
        """
        List all available citation styles.

        Returns:
            List of format info dicts with name, description, extension, media_type
        """
        return [
            {
                "name": style.value,
                "description": STYLE_DESCRIPTIONS[style],
                "extension": handler.get_file_extension(),
                "media_type": handler.get_media_type(),
            }
            for style, handler in self._handlers.items()
        ]


__all__ = [
    "CitationFormatter",
    "FormattedCitation",
    "STYLE_DESCRIPTIONS",
    "render",
]
