"""
Generation Pipeline
===================

Runs the full citation generation for one request:

    resolve -> (requested URL fallback) -> classify -> enrich -> format

Every step is a pure function of the request, so an interactive client
(toggle a field, pick another source, type a custom value) simply builds a
new request and runs the pipeline again.

Non-fatal problems (missing title or URL, unparseable dates, a selected
source without a value) are collected as ``GenerationWarning`` objects on
the result instead of being raised.

Example:
    >>> from linkcite.attributes import MultiSourceAttributeSet
    >>> from linkcite.citation import CitationStyle
    >>> from linkcite.pipeline import GenerationRequest, generate
    >>>
    >>> request = GenerationRequest(
    ...     multi_source=MultiSourceAttributeSet.from_raw({
    ...         "title": {"open_graph": "Example"},
    ...         "site_name": {"open_graph": "Example News"},
    ...     }),
    ...     requested_url="https://example.com/article",
    ... )
    >>> result = generate(request)
    >>> result.citations[CitationStyle.IN_TEXT]
    "(n.d.) 'Example', Example News. Available at: https://example.com/article."
"""

from dataclasses import dataclass, field
from datetime import date as _date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import structlog

from linkcite.attributes import (
    DATE_ATTRIBUTES,
    AttributeType,
    Date,
    MultiSourceAttributeSet,
    Translation,
    coerce_translation,
    parse_date,
)
from linkcite.citation.formatter import render
from linkcite.citation.styles import CitationStyle, InfoboxLayout
from linkcite.errors import ConfigurationError, GenerationWarning, ValidationIssue, WarningCode
from linkcite.reference.classifier import classify
from linkcite.reference.enrichment import enrich
from linkcite.reference.models import Reference
from linkcite.resolution.priority import (
    CustomValue,
    DisabledFields,
    PriorityConfig,
    SelectionOverrides,
    parse_disabled,
)
from linkcite.resolution.resolver import ResolvedAttributeSet, resolve

log = structlog.get_logger()

# Fields every citation should carry
MANDATORY_ATTRIBUTES = (AttributeType.TITLE, AttributeType.URL)


@dataclass(frozen=True)
class Enrichments:
    """
    Values produced after resolution by external services.

    Attributes:
        translated_title: Title translation (text or ``Translation``)
        archive_url: Web archive snapshot URL
        archive_date: Snapshot date, any format ``parse_date`` accepts
    """
    translated_title: Optional[Union[str, Translation]] = None
    archive_url: Optional[str] = None
    archive_date: Optional[Any] = None

    @classmethod
    def from_raw(cls, raw: Optional[Union["Enrichments", Mapping[str, Any]]]) -> "Enrichments":
        """
        Build enrichments from plain JSON-like values.

        ``translated_title`` may be text or ``{"text": ..., "language": ...}``;
        ``archive_url`` and ``archive_date`` must be text.

        Raises:
            ConfigurationError: If a value has the wrong shape or a key is unknown
        """
        if raw is None:
            return cls()
        if isinstance(raw, Enrichments):
            values = {
                "translated_title": raw.translated_title,
                "archive_url": raw.archive_url,
                "archive_date": raw.archive_date,
            }
        elif isinstance(raw, Mapping):
            values = dict(raw)
        else:
            raise ConfigurationError(
                "Invalid enrichments",
                [ValidationIssue("enrichments", f"expected a mapping, got {type(raw).__name__}")],
            )

        issues: List[ValidationIssue] = []
        for key in values:
            if key not in ENRICHMENT_KEYS:
                issues.append(ValidationIssue(
                    f"enrichments.{key}", f"unknown key, expected one of {list(ENRICHMENT_KEYS)}"
                ))

        translated_title = values.get("translated_title")
        if translated_title is not None:
            try:
                translated_title = coerce_translation(translated_title, field="enrichments.translated_title")
            except ConfigurationError as e:
                issues.extend(e.issues)

        language = values.get("translated_language")
        if language is not None and not isinstance(language, str):
            issues.append(ValidationIssue(
                "enrichments.translated_language", f"expected text, got {type(language).__name__}"
            ))
        elif language and isinstance(translated_title, Translation) and translated_title.language is None:
            translated_title = Translation(translated_title.text, language)

        archive_url = values.get("archive_url")
        if archive_url is not None and not isinstance(archive_url, str):
            issues.append(ValidationIssue(
                "enrichments.archive_url", f"expected text, got {type(archive_url).__name__}"
            ))

        # date objects come from library callers
        archive_date = values.get("archive_date")
        if archive_date is not None and not isinstance(archive_date, (str, Date, _date)):
            issues.append(ValidationIssue(
                "enrichments.archive_date", f"expected text, got {type(archive_date).__name__}"
            ))

        if issues:
            raise ConfigurationError("Invalid enrichments", issues)
        return cls(translated_title=translated_title, archive_url=archive_url, archive_date=archive_date)


ENRICHMENT_KEYS = ("translated_title", "translated_language", "archive_url", "archive_date")


@dataclass(frozen=True)
class GenerationRequest:
    """
    Everything one citation generation needs.

    Attributes:
        multi_source: Per-field, per-source extractor output
        priority: Source fallback order
        overrides: Explicit source selections and custom literals
        disabled: Fields omitted from every output
        enrichments: Translation and archive values
        requested_url: URL the user asked for, used when no source has one
        styles: Styles to render
        layout: Infobox line layout
    """
    multi_source: MultiSourceAttributeSet = field(default_factory=MultiSourceAttributeSet)
    priority: PriorityConfig = field(default_factory=PriorityConfig)
    overrides: SelectionOverrides = field(default_factory=SelectionOverrides)
    disabled: DisabledFields = frozenset()
    enrichments: Enrichments = field(default_factory=Enrichments)
    requested_url: Optional[str] = None
    styles: Sequence[CitationStyle] = tuple(CitationStyle)
    layout: InfoboxLayout = InfoboxLayout.MULTILINE

    @classmethod
    def from_raw(
        cls,
        multi_source: Optional[Mapping[str, Mapping[str, Any]]] = None,
        priority: Optional[Union[PriorityConfig, Mapping]] = None,
        overrides: Optional[Mapping] = None,
        disabled: Optional[Iterable[str]] = None,
        enrichments: Optional[Union[Enrichments, Mapping[str, Any]]] = None,
        requested_url: Optional[str] = None,
        styles: Sequence[CitationStyle] = tuple(CitationStyle),
        layout: InfoboxLayout = InfoboxLayout.MULTILINE,
    ) -> "GenerationRequest":
        """
        Build a request from plain JSON-like values.

        Every part is validated; problems from all parts are reported together.

        Raises:
            ConfigurationError: If any part has an invalid shape
        """
        issues: List[ValidationIssue] = []
        parts: Dict[str, Any] = {}
        builders = (
            ("multi_source", lambda: MultiSourceAttributeSet.from_raw(multi_source)),
            ("priority", lambda: (
                priority if isinstance(priority, PriorityConfig) else PriorityConfig.from_raw(priority)
            )),
            ("overrides", lambda: SelectionOverrides.from_raw(overrides)),
            ("disabled", lambda: parse_disabled(disabled)),
            ("enrichments", lambda: Enrichments.from_raw(enrichments)),
        )
        for name, build in builders:
            try:
                parts[name] = build()
            except ConfigurationError as e:
                issues.extend(e.issues)

        if issues:
            raise ConfigurationError("Invalid generation request", issues)

        return cls(
            requested_url=requested_url,
            styles=tuple(styles),
            layout=layout,
            **parts,
        )


@dataclass
class GenerationResult:
    """
    Output of one pipeline run.

    Attributes:
        resolved: Resolved attributes with provenance
        reference: Classified and enriched reference
        citations: Citation text per requested style, in request order
        warnings: Non-fatal problems found along the way
    """
    resolved: ResolvedAttributeSet
    reference: Reference
    citations: Dict[CitationStyle, str] = field(default_factory=dict)
    warnings: List[GenerationWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self.resolved.to_dict()
        return {
            "resolved": data["values"],
            "provenance": data["provenance"],
            "kind": self.reference.kind.value,
            "citations": {style.value: text for style, text in self.citations.items()},
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _with_url_fallback(request: GenerationRequest, resolved: ResolvedAttributeSet) -> ResolvedAttributeSet:
    """Re-resolve with the requested URL as a literal when no source supplied one."""
    url = (request.requested_url or "").strip()
    if (
        not url
        or resolved.has(AttributeType.URL)
        or AttributeType.URL in request.disabled
        or AttributeType.URL in request.overrides
    ):
        return resolved

    log.debug("Using requested URL as fallback", url=url)
    overrides = request.overrides.with_selection(AttributeType.URL, CustomValue(url))
    return resolve(request.multi_source, request.priority, overrides, request.disabled)


def _selection_warnings(request: GenerationRequest, resolved: ResolvedAttributeSet) -> List[GenerationWarning]:
    warnings: List[GenerationWarning] = []
    for attribute_type, selection in request.overrides.items():
        if attribute_type in request.disabled or resolved.has(attribute_type):
            continue
        if isinstance(selection, CustomValue):
            code = (
                WarningCode.MALFORMED_DATE_INPUT
                if attribute_type in DATE_ATTRIBUTES
                else WarningCode.UNAVAILABLE_FIELD
            )
            message = f"Custom value for {attribute_type.value} could not be used"
        else:
            code = WarningCode.UNAVAILABLE_FIELD
            message = f"Selected source {selection.value} has no value for {attribute_type.value}"
        warnings.append(GenerationWarning(code, message, attribute_type.value))
    return warnings


def _malformed_source_warnings(request: GenerationRequest) -> List[GenerationWarning]:
    return [
        GenerationWarning(
            WarningCode.MALFORMED_DATE_INPUT,
            f"Unparseable {attribute_type.value} from {source.value} was ignored",
            attribute_type.value,
        )
        for attribute_type, source in request.multi_source.malformed
        if attribute_type not in request.disabled
    ]


def generate(request: GenerationRequest) -> GenerationResult:
    """
    Run resolve, classify, enrich and format for one request.

    Args:
        request: Generation inputs

    Returns:
        GenerationResult with resolved attributes, the reference, one
        citation per requested style, and warnings. Never raises for a
        well-formed request.
    """
    resolved = resolve(request.multi_source, request.priority, request.overrides, request.disabled)
    resolved = _with_url_fallback(request, resolved)

    warnings = _malformed_source_warnings(request)
    warnings.extend(_selection_warnings(request, resolved))

    reference = classify(resolved)

    extras = request.enrichments
    archive_date = extras.archive_date
    if archive_date is not None and parse_date(archive_date) is None:
        if AttributeType.ARCHIVE_DATE not in request.disabled:
            warnings.append(GenerationWarning(
                WarningCode.MALFORMED_DATE_INPUT,
                f"Unparseable archive date {archive_date!r} was ignored",
                AttributeType.ARCHIVE_DATE.value,
            ))
        archive_date = None

    reference = enrich(
        reference,
        translated_title=extras.translated_title,
        archive_url=extras.archive_url,
        archive_date=archive_date,
    )

    for attribute_type in MANDATORY_ATTRIBUTES:
        if not resolved.has(attribute_type):
            warnings.append(GenerationWarning(
                WarningCode.MISSING_MANDATORY_ATTRIBUTE,
                f"No value for mandatory attribute {attribute_type.value}",
                attribute_type.value,
            ))

    citations = {style: render(reference, style, request.layout) for style in request.styles}

    log.info(
        "Citation generated",
        kind=reference.kind.value,
        styles=[s.value for s in citations],
        warnings=len(warnings),
    )
    for warning in warnings:
        log.warning(warning.message, code=warning.code.value, attribute=warning.attribute)

    return GenerationResult(
        resolved=resolved,
        reference=reference,
        citations=citations,
        warnings=warnings,
    )


__all__ = [
    "MANDATORY_ATTRIBUTES",
    "Enrichments",
    "GenerationRequest",
    "GenerationResult",
    "generate",
]
