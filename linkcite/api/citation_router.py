"""
Citation Router
===============

FastAPI endpoints for generating citations from multi-source metadata.

Endpoints:
- POST /citations/generate: Resolve one page and render its citations
- POST /citations/format: Export several pages in one style
- GET /citations/formats: List available styles

Errors:
- 422: Invalid metadata, priority, overrides or disabled fields
- 400: Unknown citation style

Example:
    >>> import httpx
    >>> response = httpx.post(
    ...     "http://localhost:8000/citations/generate",
    ...     json={
    ...         "multi_source": {"title": {"open_graph": "Example"}},
    ...         "url": "https://example.com",
    ...         "formats": ["infobox"],
    ...     },
    ... )
    >>> print(response.json()["citations"]["infobox"])
"""

from functools import lru_cache
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from linkcite.api.models.citation_models import (
    CitationErrorResponse,
    CitationFormatInfo,
    CitationFormatRequest,
    CitationFormatResponse,
    CitationFormatsListResponse,
    CitationGenerateRequest,
    CitationGenerateResponse,
    CitationIssue,
    CitationItem,
    CitationWarning,
)
from linkcite.attributes import Translation
from linkcite.citation.formatter import CitationFormatter
from linkcite.citation.styles import CitationStyle, InfoboxLayout, parse_styles
from linkcite.config import Settings, load_settings
from linkcite.errors import ConfigurationError, GenerationWarning, UnsupportedFormatError
from linkcite.pipeline import Enrichments, GenerationRequest, generate

log = structlog.get_logger()

router = APIRouter(prefix="/citations", tags=["citations"])


# =============================================================================
# DEPENDENCIES
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    return load_settings()


def get_formatter(settings: Settings = Depends(get_settings)) -> CitationFormatter:
    """Get the citation formatter instance."""
    return CitationFormatter(
        version=f"linkcite {settings.version}",
        layout=settings.infobox_layout,
    )


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def configuration_error_response(error: ConfigurationError) -> JSONResponse:
    """422 response listing every invalid field."""
    body = CitationErrorResponse(
        error="configuration_error",
        message=error.message,
        issues=[CitationIssue(field=i.field, message=i.message) for i in error.issues],
    )
    return JSONResponse(status_code=422, content=body.model_dump())


def unsupported_format_response(error: UnsupportedFormatError) -> JSONResponse:
    """400 response for an unknown style."""
    body = CitationErrorResponse(error="unsupported_format", message=str(error))
    return JSONResponse(status_code=400, content=body.model_dump())


def build_generation_request(
    item: CitationItem,
    settings: Settings,
    styles: Optional[List[CitationStyle]] = None,
    layout: Optional[InfoboxLayout] = None,
) -> GenerationRequest:
    """
    Convert an API item into a pipeline request.

    Missing priority, styles and layout fall back to the server settings.

    Raises:
        ConfigurationError: If the item has an invalid shape
    """
    enrichments = item.enrichments
    translated_title = None
    if enrichments.translated_title:
        translated_title = Translation(
            enrichments.translated_title,
            enrichments.translated_language,
        )

    return GenerationRequest.from_raw(
        multi_source=item.multi_source,
        priority=item.priority if item.priority is not None else settings.priority_config(),
        overrides=item.overrides,
        disabled=item.disabled,
        enrichments=Enrichments(
            translated_title=translated_title,
            archive_url=enrichments.archive_url,
            archive_date=enrichments.archive_date,
        ),
        requested_url=item.url,
        styles=styles if styles is not None else settings.default_styles,
        layout=layout or settings.infobox_layout,
    )


def to_api_warnings(warnings: List[GenerationWarning]) -> List[CitationWarning]:
    return [CitationWarning(**w.to_dict()) for w in warnings]


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.post(
    "/generate",
    response_model=CitationGenerateResponse,
    responses={400: {"model": CitationErrorResponse}, 422: {"model": CitationErrorResponse}},
)
async def generate_citation(
    request: CitationGenerateRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Resolve one page's metadata and render its citations.

    Args:
        request: Metadata, resolution options and requested styles

    Returns:
        CitationGenerateResponse with resolved fields, provenance and citations

    Example:
        >>> POST /citations/generate
        >>> {
        ...   "multi_source": {"title": {"open_graph": "A", "structured_data": "B"}},
        ...   "priority": {"default": ["structured_data", "open_graph"]},
        ...   "formats": ["in_text"]
        ... }
        {
          "success": true,
          "resolved": {"title": "B"},
          "provenance": {"title": "structured_data"},
          "kind": "generic",
          "citations": {"in_text": "(n.d.) 'B'."},
          ...
        }
    """
    try:
        styles = parse_styles(request.formats) if request.formats else None
        generation_request = build_generation_request(request, settings, styles, request.layout)
    except UnsupportedFormatError as e:
        log.info("Unsupported citation format requested", requested=e.requested)
        return unsupported_format_response(e)
    except ConfigurationError as e:
        log.info("Invalid citation request", error=str(e))
        return configuration_error_response(e)

    result = generate(generation_request)
    data = result.to_dict()

    return CitationGenerateResponse(
        resolved=data["resolved"],
        provenance=data["provenance"],
        kind=data["kind"],
        citations=data["citations"],
        warnings=to_api_warnings(result.warnings),
        version=settings.version,
    )


@router.post(
    "/format",
    response_model=CitationFormatResponse,
    responses={400: {"model": CitationErrorResponse}, 422: {"model": CitationErrorResponse}},
)
async def format_citations_inline(
    request: CitationFormatRequest,
    settings: Settings = Depends(get_settings),
    formatter: CitationFormatter = Depends(get_formatter),
):
    """
    Export several pages in one style as a single document.

    BibTeX exports keep entry keys unique by suffixing ``_1``, ``_2``, ...

    Args:
        request: Pages to cite and output style

    Returns:
        CitationFormatResponse with the document text

    Example:
        >>> POST /citations/format
        >>> {
        ...   "items": [{"multi_source": {"title": {"open_graph": "A"}}, "url": "https://bbc.com/a"}],
        ...   "format": "bibliography"
        ... }
        {
          "success": true,
          "format": "bibliography",
          "content": "% linkcite Citation Export\\n...",
          "citations_count": 1,
          ...
        }
    """
    try:
        style = CitationStyle.parse(request.format)
        generation_requests = [
            build_generation_request(item, settings, styles=[]) for item in request.items
        ]
    except UnsupportedFormatError as e:
        log.info("Unsupported citation format requested", requested=e.requested)
        return unsupported_format_response(e)
    except ConfigurationError as e:
        log.info("Invalid citation request", error=str(e))
        return configuration_error_response(e)

    log.info("Citation inline format requested", format=style.value, items=len(request.items))

    results = [generate(r) for r in generation_requests]
    content = formatter.format_entries(
        [r.reference for r in results],
        style,
        include_attribution=request.include_attribution,
    )

    return CitationFormatResponse(
        format=style.value,
        content=content,
        citations_count=len(results),
        extension=formatter.get_file_extension(style),
        media_type=formatter.get_media_type(style),
        warnings=[to_api_warnings(r.warnings) for r in results],
    )


@router.get("/formats", response_model=CitationFormatsListResponse)
async def list_citation_formats(
    settings: Settings = Depends(get_settings),
    formatter: CitationFormatter = Depends(get_formatter),
) -> CitationFormatsListResponse:
    """
    List all available citation styles.

    Example:
        >>> GET /citations/formats
        {
          "formats": [
            {
              "name": "infobox",
              "description": "MediaWiki {{cite web}} template",
              "extension": "txt",
              "media_type": "text/plain; charset=utf-8"
            },
            ...
          ],
          "default_format": "infobox"
        }
    """
    formats = [CitationFormatInfo(**info) for info in formatter.list_formats()]
    default = settings.default_styles[0] if settings.default_styles else CitationStyle.INFOBOX

    return CitationFormatsListResponse(
        formats=formats,
        default_format=default.value,
    )


# =============================================================================
# EXPORTS
# =============================================================================


__all__ = ["router", "get_settings", "get_formatter", "build_generation_request"]
