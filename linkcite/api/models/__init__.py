"""
API Models
==========

Pydantic request and response models for the HTTP API.
"""

from linkcite.api.models.citation_models import (
    CitationEnrichments,
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

__all__ = [
    "CitationEnrichments",
    "CitationItem",
    "CitationGenerateRequest",
    "CitationFormatRequest",
    "CitationWarning",
    "CitationGenerateResponse",
    "CitationFormatResponse",
    "CitationFormatInfo",
    "CitationFormatsListResponse",
    "CitationIssue",
    "CitationErrorResponse",
]
