"""
Citation API Models
===================

Pydantic models for the citation endpoints.

Models:
- CitationEnrichments: Translation and archive values
- CitationItem: Metadata and resolution options for one page
- CitationGenerateRequest: Generate citations for one page
- CitationGenerateResponse: Resolved fields, provenance and citations
- CitationFormatRequest: Export several pages in one style
- CitationFormatResponse: Exported document text
- CitationErrorResponse: Error body for 400/422 responses

Example:
    >>> from linkcite.api.models.citation_models import CitationGenerateRequest
    >>>
    >>> request = CitationGenerateRequest(
    ...     multi_source={"title": {"open_graph": "A", "structured_data": "B"}},
    ...     priority={"default": ["structured_data", "open_graph"]},
    ...     formats=["in_text"],
    ... )
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from linkcite.citation.styles import InfoboxLayout


# =============================================================================
# INPUT MODELS
# =============================================================================


class CitationEnrichments(BaseModel):
    """
    Values from external services, merged after resolution.

    Attributes:
        translated_title: Translated page title
        translated_language: Language of the translation
        archive_url: Web archive snapshot URL
        archive_date: Snapshot date (ISO date or Wayback timestamp)
    """
    translated_title: Optional[str] = Field(None, description="Translated page title")
    translated_language: Optional[str] = Field(None, description="Language of the translation")
    archive_url: Optional[str] = Field(None, description="Web archive snapshot URL")
    archive_date: Optional[str] = Field(
        None,
        description="Snapshot date, ISO (2024-01-15) or Wayback timestamp (20240115123000)",
    )


class CitationItem(BaseModel):
    """
    Metadata and resolution options for one page.

    Attributes:
        multi_source: ``{attribute: {source: value}}`` extractor output
        priority: ``{"default": [...], "overrides": {attribute: [...]}}``
        overrides: ``{attribute: source}`` or ``{attribute: {"custom": value}}``
        disabled: Attributes omitted from every citation
        enrichments: Translation and archive values
        url: Requested URL, used when no source supplies one

    Example:
        >>> item = CitationItem(
        ...     multi_source={"title": {"open_graph": "Example"}},
        ...     overrides={"title": {"custom": "Manual Title"}},
        ...     url="https://example.com",
        ... )
    """
    multi_source: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Per-attribute, per-source metadata values",
    )
    priority: Optional[Dict[str, Any]] = Field(
        None,
        description="Source priority; server default when omitted",
    )
    overrides: Dict[str, Any] = Field(
        default_factory=dict,
        description="Explicit source selection or custom literal per attribute",
    )
    disabled: List[str] = Field(default_factory=list, description="Disabled attributes")
    enrichments: CitationEnrichments = Field(default_factory=CitationEnrichments)
    url: Optional[str] = Field(None, description="Requested URL")


class CitationGenerateRequest(CitationItem):
    """
    Request to generate citations for one page.

    Attributes:
        formats: Styles to render (``all`` for every style); server
            default when omitted
        layout: Infobox line layout; server default when omitted
    """
    formats: Optional[List[str]] = Field(
        None,
        description="Styles: infobox, bibliography, in_text or all",
    )
    layout: Optional[InfoboxLayout] = Field(None, description="Infobox layout")


class CitationFormatRequest(BaseModel):
    """
    Request to export several pages in one style.

    Attributes:
        items: Pages to cite
        format: Output style
        include_attribution: Include the generator header or footer

    Example:
        >>> request = CitationFormatRequest(
        ...     items=[CitationItem(multi_source={"title": {"open_graph": "A"}})],
        ...     format="bibliography",
        ... )
    """
    items: List[CitationItem] = Field(..., min_length=1, description="Pages to cite")
    format: str = Field("bibliography", description="Output style")
    include_attribution: bool = Field(True, description="Include the generator header or footer")


# =============================================================================
# RESPONSE MODELS
# =============================================================================


class CitationWarning(BaseModel):
    """A non-fatal problem found during generation."""
    code: str
    attribute: Optional[str] = None
    message: str


class CitationGenerateResponse(BaseModel):
    """
    Response from the generate endpoint.

    Attributes:
        success: Whether generation was successful
        resolved: Resolved attribute values (dates as ISO strings)
        provenance: Winning source per attribute
        kind: Reference kind (news, scholarly, generic)
        citations: Citation text per style
        warnings: Non-fatal problems
        version: linkcite version
    """
    success: bool = True
    resolved: Dict[str, Any]
    provenance: Dict[str, str]
    kind: str
    citations: Dict[str, str]
    warnings: List[CitationWarning] = Field(default_factory=list)
    version: str


class CitationFormatResponse(BaseModel):
    """
    Response from the inline format endpoint.

    Attributes:
        success: Whether formatting was successful
        format: Style used
        content: Exported document text
        citations_count: Number of citations
        extension: File extension for the style
        media_type: MIME type for the style
        warnings: Non-fatal problems, one list per item
    """
    success: bool = True
    format: str
    content: str
    citations_count: int
    extension: str
    media_type: str
    warnings: List[List[CitationWarning]] = Field(default_factory=list)


class CitationFormatInfo(BaseModel):
    """
    Information about a citation style.

    Attributes:
        name: Style name
        description: Human-readable description
        extension: File extension
        media_type: MIME type
    """
    name: str
    description: str
    extension: str
    media_type: str


class CitationFormatsListResponse(BaseModel):
    """
    Response listing available citation styles.

    Attributes:
        formats: List of available styles
        default_format: The default style name
    """
    formats: List[CitationFormatInfo]
    default_format: str = "infobox"


# =============================================================================
# ERROR MODELS
# =============================================================================


class CitationIssue(BaseModel):
    """One invalid input field."""
    field: str
    message: str


class CitationErrorResponse(BaseModel):
    """
    Error response for citation endpoints.

    Attributes:
        success: Always False for errors
        error: Error type (configuration_error, unsupported_format)
        message: Error description
        issues: Invalid fields, for configuration errors
    """
    success: bool = False
    error: str
    message: str
    issues: List[CitationIssue] = Field(default_factory=list)


# =============================================================================
# EXPORTS
# =============================================================================


__all__ = [
    # Input models
    "CitationEnrichments",
    "CitationItem",
    "CitationGenerateRequest",
    "CitationFormatRequest",
    # Response models
    "CitationWarning",
    "CitationGenerateResponse",
    "CitationFormatResponse",
    "CitationFormatInfo",
    "CitationFormatsListResponse",
    # Error models
    "CitationIssue",
    "CitationErrorResponse",
]
