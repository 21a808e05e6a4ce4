"""
Reference Model
===============

The classified citation record consumed by the formatters.

A ``Reference`` wraps the resolved attributes, a ``ReferenceKind`` tag
(news-like, scholarly, generic) and an extras record filled by the
enrichment merge (translated title, archive URL, archive date).

References are immutable. Accessors hide disabled fields, so formatters can
read any field without checking the disabled set themselves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from linkcite.attributes import AttributeType, Author, Date, Translation
from linkcite.resolution.resolver import ResolvedAttributeSet


class ReferenceKind(str, Enum):
    """Shape of the cited content."""
    NEWS = "news"
    SCHOLARLY = "scholarly"
    GENERIC = "generic"


@dataclass(frozen=True)
class ReferenceExtras:
    """
    Values supplied after resolution by external services.

    Attributes:
        translated_title: Title translated by a translation service
        archive_url: Snapshot URL from an archive service
        archive_date: Date of that snapshot
    """
    translated_title: Optional[Translation] = None
    archive_url: Optional[str] = None
    archive_date: Optional[Date] = None


@dataclass(frozen=True)
class Reference:
    """
    A classified, optionally enriched citation record.

    Attributes:
        kind: Reference shape chosen by the classifier
        attributes: Resolved attribute values and provenance
        extras: Enrichment values
    """
    kind: ReferenceKind
    attributes: ResolvedAttributeSet
    extras: ReferenceExtras = field(default_factory=ReferenceExtras)

    def _text(self, attribute_type: AttributeType) -> Optional[str]:
        value = self.attributes.get(attribute_type)
        return value if isinstance(value, str) else None

    @property
    def title(self) -> Optional[str]:
        return self._text(AttributeType.TITLE)

    @property
    def authors(self) -> Tuple[Author, ...]:
        value = self.attributes.get(AttributeType.AUTHORS)
        return value if isinstance(value, tuple) else ()

    @property
    def date(self) -> Optional[Date]:
        value = self.attributes.get(AttributeType.DATE)
        return value if isinstance(value, Date) else None

    @property
    def language(self) -> Optional[str]:
        return self._text(AttributeType.LANGUAGE)

    @property
    def site_name(self) -> Optional[str]:
        return self._text(AttributeType.SITE_NAME)

    @property
    def publisher(self) -> Optional[str]:
        return self._text(AttributeType.PUBLISHER)

    @property
    def url(self) -> Optional[str]:
        return self._text(AttributeType.URL)

    @property
    def doi(self) -> Optional[str]:
        return self._text(AttributeType.DOI)

    @property
    def journal(self) -> Optional[str]:
        return self._text(AttributeType.JOURNAL)

    @property
    def volume(self) -> Optional[str]:
        return self._text(AttributeType.VOLUME)

    @property
    def translated_title(self) -> Optional[Translation]:
        if self.attributes.is_disabled(AttributeType.TRANSLATED_TITLE):
            return None
        if self.extras.translated_title is not None:
            return self.extras.translated_title
        value = self.attributes.get(AttributeType.TRANSLATED_TITLE)
        return value if isinstance(value, Translation) else None

    @property
    def archive_url(self) -> Optional[str]:
        if self.attributes.is_disabled(AttributeType.ARCHIVE_URL):
            return None
        return self.extras.archive_url or self._text(AttributeType.ARCHIVE_URL)

    @property
    def archive_date(self) -> Optional[Date]:
        if self.attributes.is_disabled(AttributeType.ARCHIVE_DATE):
            return None
        if self.extras.archive_date is not None:
            return self.extras.archive_date
        value = self.attributes.get(AttributeType.ARCHIVE_DATE)
        return value if isinstance(value, Date) else None

    @property
    def year(self) -> Optional[int]:
        return self.date.year if self.date else None


__all__ = ["ReferenceKind", "ReferenceExtras", "Reference"]
