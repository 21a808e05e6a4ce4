"""
Base Format Interface
=====================

Abstract base class for all citation format handlers.

All format generators must implement:
- format_reference(): Format a single reference as text
- format_all(): Format several references as one document
- attribution(): Footer naming the generator, appended by format_all()
- get_file_extension(): Return file extension (without dot)
- get_media_type(): Return MIME type string

The handlers hold no per-call state; every method is safe to call
concurrently.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from linkcite import __version__
from linkcite.citation.styles import CitationStyle
from linkcite.reference.models import Reference

DEFAULT_VERSION = f"linkcite {__version__}"


class BaseFormat(ABC):
    """
    Abstract base class for citation format handlers.

    All format generators must inherit from this class and implement
    the abstract methods.
    """

    style: CitationStyle

    def __init__(self, version: Optional[str] = None):
        """
        Initialize the format handler.

        Args:
            version: Version string used in export headers
        """
        self.version = version or DEFAULT_VERSION

    @abstractmethod
    def format_reference(self, reference: Reference) -> str:
        """
        Format a single reference.

        Args:
            reference: Classified, optionally enriched reference

        Returns:
            Formatted citation string
        """
        ...

    def format_all(
        self,
        references: Sequence[Reference],
        include_attribution: bool = True,
    ) -> str:
        """
        Format several references as one document, separated by blank lines.

        Args:
            references: References to format
            include_attribution: Whether to append the generator footer

        Returns:
            Complete formatted document string
        """
        blocks = [self.format_reference(r) for r in references]
        if include_attribution:
            blocks.append(self.attribution())
        return "\n\n".join(blocks)

    def attribution(self) -> str:
        """Footer line naming the generator version and the export day."""
        today = datetime.now().strftime("%Y-%m-%d")
        return f"---\nGenerated by {self.version} on {today}"

    @abstractmethod
    def get_file_extension(self) -> str:
        """Return the file extension for this format (without dot)."""
        ...

    @abstractmethod
    def get_media_type(self) -> str:
        """Return the MIME type string for this format."""
        ...


__all__ = ["BaseFormat"]
