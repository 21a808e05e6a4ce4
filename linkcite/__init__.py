"""
linkcite
========

Turns multi-source page metadata into citations.

Metadata extracted from a web page by several sources (OpenGraph,
schema.org structured data, HTML meta tags, DOI registry, citation
services, AI extraction) is merged into one reference, then rendered as a
MediaWiki {{cite web}} template, a BibTeX entry or a Harvard reference.

Example:
    >>> from linkcite import GenerationRequest, MultiSourceAttributeSet, generate
    >>> result = generate(GenerationRequest(
    ...     multi_source=MultiSourceAttributeSet.from_raw({"title": {"open_graph": "Example"}}),
    ...     requested_url="https://example.com",
    ... ))
"""

__version__ = "0.1.0"

from linkcite.attributes import AttributeType, MultiSourceAttributeSet, SourceId
from linkcite.citation import CitationFormatter, CitationStyle, InfoboxLayout, render
from linkcite.errors import ConfigurationError, LinkciteError, UnsupportedFormatError
from linkcite.pipeline import Enrichments, GenerationRequest, GenerationResult, generate
from linkcite.reference import Reference, classify, enrich
from linkcite.resolution import PriorityConfig, SelectionOverrides, resolve

__all__ = [
    "__version__",
    "AttributeType",
    "SourceId",
    "MultiSourceAttributeSet",
    "PriorityConfig",
    "SelectionOverrides",
    "resolve",
    "Reference",
    "classify",
    "enrich",
    "CitationStyle",
    "InfoboxLayout",
    "CitationFormatter",
    "render",
    "Enrichments",
    "GenerationRequest",
    "GenerationResult",
    "generate",
    "LinkciteError",
    "ConfigurationError",
    "UnsupportedFormatError",
]
