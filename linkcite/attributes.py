"""
Citation Attributes
===================

Typed representation of the metadata fields that make up a citation.

Types:
- AttributeType: closed set of citable fields (title, authors, date, ...)
- SourceId: closed set of metadata extractors, plus the reserved ``custom``
- Author: person or organization with optional given/family split
- Date: calendar date with explicit granularity (year, year-month, full)
- Translation: translated title with optional language code
- MultiSourceAttributeSet: per-field, per-source values before resolution

Raw extractor output (strings, dicts, lists) is normalized through
``coerce_value``; values that are empty or cannot be interpreted (e.g. an
unparseable date string) are treated as absent for that source.

Example:
    >>> from linkcite.attributes import MultiSourceAttributeSet, AttributeType, SourceId
    >>> multi = MultiSourceAttributeSet.from_raw({
    ...     "title": {"open_graph": "A", "structured_data": "B"},
    ...     "date": {"html_meta": "January 15, 2024"},
    ... })
    >>> multi.value(AttributeType.DATE, SourceId.HTML_META).iso()
    '2024-01-15'
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date as _date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from linkcite.errors import ConfigurationError, ValidationIssue


# =============================================================================
# ENUMS
# =============================================================================


class AttributeType(str, Enum):
    """Citable fields. Closed set, never extended at runtime."""
    TITLE = "title"
    TRANSLATED_TITLE = "translated_title"
    AUTHORS = "authors"
    DATE = "date"
    LANGUAGE = "language"
    SITE_NAME = "site_name"
    PUBLISHER = "publisher"
    URL = "url"
    DOI = "doi"
    JOURNAL = "journal"
    VOLUME = "volume"
    ARCHIVE_URL = "archive_url"
    ARCHIVE_DATE = "archive_date"


class SourceId(str, Enum):
    """Metadata extractors. ``CUSTOM`` marks user-entered literal values."""
    OPEN_GRAPH = "open_graph"
    STRUCTURED_DATA = "structured_data"
    HTML_META = "html_meta"
    DOI_REGISTRY = "doi_registry"
    CITATION_SERVICE = "citation_service"
    AI_ASSISTED = "ai_assisted"
    CUSTOM = "custom"


# Alternative spellings accepted from the web UI and older payloads
ATTRIBUTE_ALIASES: Dict[str, AttributeType] = {
    "author": AttributeType.AUTHORS,
    "site": AttributeType.SITE_NAME,
    "website": AttributeType.SITE_NAME,
    "trans_title": AttributeType.TRANSLATED_TITLE,
}

SOURCE_ALIASES: Dict[str, SourceId] = {
    "opengraph": SourceId.OPEN_GRAPH,
    "og": SourceId.OPEN_GRAPH,
    "schemaorg": SourceId.STRUCTURED_DATA,
    "schema_org": SourceId.STRUCTURED_DATA,
    "json_ld": SourceId.STRUCTURED_DATA,
    "htmlmeta": SourceId.HTML_META,
    "doi": SourceId.DOI_REGISTRY,
    "zotero": SourceId.CITATION_SERVICE,
    "citoid": SourceId.CITATION_SERVICE,
    "ai": SourceId.AI_ASSISTED,
}

# Fields holding free text that is whitespace-normalized on input
TEXT_ATTRIBUTES = frozenset({
    AttributeType.TITLE,
    AttributeType.LANGUAGE,
    AttributeType.SITE_NAME,
    AttributeType.PUBLISHER,
    AttributeType.JOURNAL,
    AttributeType.VOLUME,
})

# Fields holding identifiers that are only stripped
IDENTIFIER_ATTRIBUTES = frozenset({
    AttributeType.URL,
    AttributeType.DOI,
    AttributeType.ARCHIVE_URL,
})

DATE_ATTRIBUTES = frozenset({AttributeType.DATE, AttributeType.ARCHIVE_DATE})


def _normalize_key(value: str) -> str:
    return value.strip().lower().replace("-", "_").replace(" ", "_")


def parse_attribute_type(value: Union[str, AttributeType], field: str = "attribute") -> AttributeType:
    """
    Parse an attribute type from its name or an accepted alias.

    Raises:
        ConfigurationError: If the name is unknown
    """
    if isinstance(value, AttributeType):
        return value
    key = _normalize_key(str(value))
    if key in ATTRIBUTE_ALIASES:
        return ATTRIBUTE_ALIASES[key]
    try:
        return AttributeType(key)
    except ValueError:
        raise ConfigurationError(
            "Unknown attribute type",
            [ValidationIssue(field, f"'{value}' is not one of {[a.value for a in AttributeType]}")],
        )


def parse_source_id(value: Union[str, SourceId], field: str = "source") -> SourceId:
    """
    Parse a source id from its name or an accepted alias.

    Raises:
        ConfigurationError: If the name is unknown
    """
    if isinstance(value, SourceId):
        return value
    key = _normalize_key(str(value))
    if key in SOURCE_ALIASES:
        return SOURCE_ALIASES[key]
    try:
        return SourceId(key)
    except ValueError:
        raise ConfigurationError(
            "Unknown metadata source",
            [ValidationIssue(field, f"'{value}' is not one of {[s.value for s in SourceId]}")],
        )


# =============================================================================
# AUTHORS
# =============================================================================


def split_name(full_name: str) -> Tuple[Optional[str], str]:
    """
    Split a full name into (given names, family name).

    The last whitespace-separated token is the family name, everything
    before it the given names. Single-token names are never split and are
    returned as (None, name).

    Example:
        >>> split_name("John A. Doe")
        ('John A.', 'Doe')
        >>> split_name("Reuters")
        (None, 'Reuters')
    """
    tokens = full_name.split()
    if len(tokens) > 1:
        return " ".join(tokens[:-1]), tokens[-1]
    return None, " ".join(tokens)


@dataclass(frozen=True)
class Author:
    """
    An author of the cited content.

    Attributes:
        full_name: Name as published, whitespace-normalized
        given_name: Given name(s) when known explicitly
        family_name: Family name when known explicitly
        is_organization: Organizations are never split into name parts
    """
    full_name: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    is_organization: bool = False

    @classmethod
    def from_name(cls, name: str, is_organization: bool = False) -> "Author":
        """Create an author from a free-form name string."""
        return cls(full_name=" ".join(name.split()), is_organization=is_organization)

    def split(self) -> Tuple[Optional[str], str]:
        """
        Return (given names, family name) for this author.

        Explicit given/family names win over splitting the full name.
        """
        if self.family_name:
            given = " ".join(self.given_name.split()) if self.given_name else None
            return given or None, " ".join(self.family_name.split())
        if self.is_organization:
            return None, self.full_name
        return split_name(self.full_name)

    def __str__(self) -> str:
        return self.full_name


def _coerce_author(raw: Any, field: str) -> Optional[Author]:
    if isinstance(raw, Author):
        return raw if raw.full_name.strip() else None
    if isinstance(raw, str):
        name = " ".join(raw.split())
        return Author(full_name=name) if name else None
    if isinstance(raw, Mapping):
        given = raw.get("given_name") or raw.get("given")
        family = raw.get("family_name") or raw.get("family")
        full = raw.get("full_name") or raw.get("name")
        if not full and family:
            full = f"{given} {family}" if given else family
        if not full:
            return None
        return Author(
            full_name=" ".join(str(full).split()),
            given_name=str(given) if given else None,
            family_name=str(family) if family else None,
            is_organization=bool(raw.get("is_organization", raw.get("organization", False))),
        )
    raise ConfigurationError(
        "Invalid author value",
        [ValidationIssue(field, f"expected a name string or mapping, got {type(raw).__name__}")],
    )


def coerce_authors(raw: Any, field: str = "authors") -> Optional[Tuple[Author, ...]]:
    """
    Normalize an author value into a tuple of ``Author``.

    Accepts a single name, a ``;``-separated list of names, a mapping with
    name parts, or a list of any of those. Returns None when no author
    remains after normalization.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        items: List[Any] = [part for part in raw.split(";")]
    elif isinstance(raw, (Author, Mapping)):
        items = [raw]
    elif isinstance(raw, (list, tuple)):
        items = list(raw)
    else:
        raise ConfigurationError(
            "Invalid author value",
            [ValidationIssue(field, f"expected a string, mapping or list, got {type(raw).__name__}")],
        )

    authors = []
    for index, item in enumerate(items):
        author = _coerce_author(item, f"{field}[{index}]")
        if author is not None:
            authors.append(author)
    return tuple(authors) if authors else None


# =============================================================================
# DATES
# =============================================================================


MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class DateGranularity(str, Enum):
    """Precision of a ``Date``."""
    YEAR = "year"
    YEAR_MONTH = "year_month"
    FULL = "full"


@dataclass(frozen=True)
class Date:
    """
    A calendar date with explicit granularity.

    Year-only and year-month dates are kept as such instead of being padded
    to a fixed precision.

    Example:
        >>> Date(2024, 1, 15).iso()
        '2024-01-15'
        >>> Date(2024, 1).long_form()
        'January 2024'
    """
    year: int
    month: Optional[int] = None
    day: Optional[int] = None

    def __post_init__(self):
        if self.day is not None and self.month is None:
            raise ValueError("A date with a day must also have a month")
        if self.month is not None and not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month: {self.month}")
        if self.day is not None:
            # Raises ValueError for impossible days (e.g. 2023-02-30)
            _date(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, value: _date) -> "Date":
        return cls(value.year, value.month, value.day)

    @property
    def granularity(self) -> DateGranularity:
        if self.day is not None:
            return DateGranularity.FULL
        if self.month is not None:
            return DateGranularity.YEAR_MONTH
        return DateGranularity.YEAR

    @property
    def month_name(self) -> Optional[str]:
        return MONTH_NAMES[self.month - 1] if self.month else None

    def iso(self) -> str:
        """Render as ``YYYY-MM-DD``, ``YYYY-MM`` or ``YYYY``."""
        if self.day is not None:
            return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
        if self.month is not None:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}"

    def long_form(self) -> str:
        """Render as ``D Month YYYY``, ``Month YYYY`` or ``YYYY``."""
        if self.day is not None:
            return f"{self.day} {self.month_name} {self.year}"
        if self.month is not None:
            return f"{self.month_name} {self.year}"
        return str(self.year)

    def __str__(self) -> str:
        return self.iso()


MIN_YEAR = 1000
MAX_YEAR = 2100

_WAYBACK_TIMESTAMP = re.compile(r"^\d{14}$")
_ISO_DAY = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_ISO_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR = re.compile(r"^\d{4}$")

# Free-form formats seen in citation services and HTML meta tags
_TEXT_DATE_FORMATS = [
    "%B %d, %Y",  # January 15, 2024
    "%b %d, %Y",  # Jan 15, 2024
    "%d %B %Y",   # 15 January 2024
    "%d %b %Y",   # 15 Jan 2024
    "%Y/%m/%d",   # 2024/01/15
    "%m/%d/%Y",   # 01/15/2024
]


def _from_datetime(value: datetime) -> Date:
    # Calendar day in the offset the value was written in
    return Date(value.year, value.month, value.day)


def parse_date(value: Any) -> Optional[Date]:
    """
    Parse a date value into a ``Date`` of the matching granularity.

    Supports ``date``/``datetime`` objects and strings in ISO
    (``YYYY-MM-DD``, ``YYYY-MM``, ``YYYY``), RFC 3339, 14-digit Wayback
    timestamps and common English long forms.

    Returns:
        The parsed date, or None when the value cannot be interpreted

    Example:
        >>> parse_date("20240115123000")
        Date(year=2024, month=1, day=15)
        >>> parse_date("sometime last week") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, Date):
        return value
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, _date):
        return Date.from_date(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return Date(value) if MIN_YEAR <= value <= MAX_YEAR else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        if _WAYBACK_TIMESTAMP.match(text):
            return _from_datetime(datetime.strptime(text, "%Y%m%d%H%M%S"))

        match = _ISO_DAY.match(text)
        if match:
            year, month, day = (int(g) for g in match.groups())
            return Date(year, month, day)

        match = _ISO_MONTH.match(text)
        if match:
            year, month = (int(g) for g in match.groups())
            return Date(year, month)
    except ValueError:
        return None

    if _YEAR.match(text):
        year = int(text)
        return Date(year) if MIN_YEAR <= year <= MAX_YEAR else None

    try:
        return _from_datetime(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in _TEXT_DATE_FORMATS:
        try:
            return Date.from_date(datetime.strptime(text, fmt).date())
        except ValueError:
            continue

    return None


# =============================================================================
# TRANSLATIONS
# =============================================================================


@dataclass(frozen=True)
class Translation:
    """
    A translated title.

    Attributes:
        text: Translated text
        language: Target language code (e.g. "EN"), if known
    """
    text: str
    language: Optional[str] = None

    def __str__(self) -> str:
        return self.text


def coerce_translation(raw: Any, field: str = "translated_title") -> Optional[Translation]:
    """Normalize a translated title given as text, mapping or ``Translation``."""
    if raw is None:
        return None
    if isinstance(raw, Translation):
        return raw if raw.text.strip() else None
    if isinstance(raw, str):
        text = " ".join(raw.split())
        return Translation(text) if text else None
    if isinstance(raw, Mapping):
        text = " ".join(str(raw.get("text") or "").split())
        language = raw.get("language")
        return Translation(text, str(language) if language else None) if text else None
    raise ConfigurationError(
        "Invalid translated title",
        [ValidationIssue(field, f"expected text or mapping, got {type(raw).__name__}")],
    )


# =============================================================================
# VALUE COERCION
# =============================================================================


AttributeValue = Union[str, Tuple[Author, ...], Date, Translation]


def coerce_value(attribute_type: AttributeType, raw: Any, field: Optional[str] = None) -> Optional[AttributeValue]:
    """
    Normalize a raw value into the typed value for ``attribute_type``.

    Returns None for empty values and for dates that cannot be parsed.

    Raises:
        ConfigurationError: If the value has a shape that can never be valid
            for this attribute (e.g. a number as an author list)
    """
    field = field or attribute_type.value
    if raw is None:
        return None

    if attribute_type == AttributeType.AUTHORS:
        return coerce_authors(raw, field)
    if attribute_type in DATE_ATTRIBUTES:
        return parse_date(raw)
    if attribute_type == AttributeType.TRANSLATED_TITLE:
        return coerce_translation(raw, field)

    if isinstance(raw, (Mapping, list, tuple)):
        raise ConfigurationError(
            "Invalid attribute value",
            [ValidationIssue(field, f"expected text, got {type(raw).__name__}")],
        )
    if attribute_type in IDENTIFIER_ATTRIBUTES:
        text = str(raw).strip()
    else:
        text = " ".join(str(raw).split())
    return text or None


def is_empty(value: Any) -> bool:
    """True for None, empty strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, (str, tuple, list)):
        return len(value) == 0
    return False


# =============================================================================
# MULTI-SOURCE SET
# =============================================================================


class MultiSourceAttributeSet(Mapping):
    """
    Read-only mapping ``AttributeType -> {SourceId: value}``.

    A (type, source) key is present only when that source produced a
    non-empty value. The set is built once per request and never mutated.

    Attributes:
        malformed: (type, source) pairs whose raw value was dropped because
            it could not be interpreted (e.g. an unparseable date)
    """

    def __init__(
        self,
        values: Optional[Mapping[AttributeType, Mapping[SourceId, AttributeValue]]] = None,
        malformed: Tuple[Tuple[AttributeType, SourceId], ...] = (),
    ):
        data: Dict[AttributeType, Mapping[SourceId, AttributeValue]] = {}
        for attribute_type, per_source in (values or {}).items():
            kept = {
                source: (tuple(value) if isinstance(value, list) else value)
                for source, value in per_source.items()
                if not is_empty(value)
            }
            if kept:
                data[attribute_type] = MappingProxyType(kept)
        self._data = MappingProxyType(data)
        self.malformed = tuple(malformed)

    @classmethod
    def from_raw(cls, raw: Optional[Mapping[str, Mapping[str, Any]]]) -> "MultiSourceAttributeSet":
        """
        Build a set from plain extractor output.

        Args:
            raw: ``{attribute: {source: value}}`` with string or enum keys

        Raises:
            ConfigurationError: If an attribute or source key is unknown, or
                a value has an impossible shape
        """
        issues: List[ValidationIssue] = []
        values: Dict[AttributeType, Dict[SourceId, AttributeValue]] = {}
        malformed: List[Tuple[AttributeType, SourceId]] = []

        for raw_type, per_source in (raw or {}).items():
            try:
                attribute_type = parse_attribute_type(raw_type, field=f"multi_source.{raw_type}")
            except ConfigurationError as e:
                issues.extend(e.issues)
                continue
            if not isinstance(per_source, Mapping):
                issues.append(ValidationIssue(
                    f"multi_source.{raw_type}", "expected a mapping of source to value"
                ))
                continue

            for raw_source, raw_value in per_source.items():
                field = f"multi_source.{raw_type}.{raw_source}"
                try:
                    source = parse_source_id(raw_source, field=field)
                    if source == SourceId.CUSTOM:
                        issues.append(ValidationIssue(
                            field, "'custom' is reserved for selection overrides"
                        ))
                        continue
                    value = coerce_value(attribute_type, raw_value, field=field)
                except ConfigurationError as e:
                    issues.extend(e.issues)
                    continue

                if value is None:
                    if attribute_type in DATE_ATTRIBUTES and not is_empty(raw_value):
                        malformed.append((attribute_type, source))
                    continue
                values.setdefault(attribute_type, {})[source] = value

        if issues:
            raise ConfigurationError("Invalid multi-source metadata", issues)
        return cls(values, tuple(malformed))

    def __getitem__(self, key: AttributeType) -> Mapping[SourceId, AttributeValue]:
        return self._data[key]

    def __iter__(self) -> Iterator[AttributeType]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def sources_for(self, attribute_type: AttributeType) -> Mapping[SourceId, AttributeValue]:
        """Values per source for a type; empty mapping when none."""
        return self._data.get(attribute_type, MappingProxyType({}))

    def value(self, attribute_type: AttributeType, source: SourceId) -> Optional[AttributeValue]:
        return self.sources_for(attribute_type).get(source)

    def __repr__(self) -> str:
        fields = {t.value: sorted(s.value for s in sources) for t, sources in self._data.items()}
        return f"MultiSourceAttributeSet({fields})"


__all__ = [
    "AttributeType",
    "SourceId",
    "parse_attribute_type",
    "parse_source_id",
    "split_name",
    "Author",
    "coerce_authors",
    "MONTH_NAMES",
    "DateGranularity",
    "Date",
    "parse_date",
    "Translation",
    "coerce_translation",
    "AttributeValue",
    "coerce_value",
    "is_empty",
    "MultiSourceAttributeSet",
]
