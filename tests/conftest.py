"""
Pytest configuration and shared fixtures for linkcite tests.
"""

import pytest
import structlog

from linkcite.attributes import AttributeType, MultiSourceAttributeSet, SourceId, coerce_value
from linkcite.reference import classify, enrich
from linkcite.resolution import ResolvedAttributeSet


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def news_metadata():
    """Extractor output for a typical news article."""
    return {
        "title": {
            "open_graph": "Risolubilità del contratto",
            "html_meta": "Risolubilità del contratto | Example News",
        },
        "authors": {"structured_data": ["Mario Rossi"]},
        "date": {"structured_data": "2024-01-15", "html_meta": "January 14, 2024"},
        "site_name": {"open_graph": "Example News"},
        "url": {"open_graph": "https://www.example.com/article"},
        "language": {"html_meta": "it"},
    }


@pytest.fixture
def news_multi_source(news_metadata):
    return MultiSourceAttributeSet.from_raw(news_metadata)


@pytest.fixture
def make_reference():
    """
    Build a classified reference straight from attribute values.

    Usage:
        make_reference({"title": "A", "url": "https://a.com"}, disabled=["date"],
                       archive_url="https://web.archive.org/...")
    """
    def _make(values=None, disabled=(), **extras):
        coerced = {}
        for name, raw in (values or {}).items():
            attribute_type = AttributeType(name)
            value = coerce_value(attribute_type, raw)
            if value is not None:
                coerced[attribute_type] = value
        resolved = ResolvedAttributeSet(
            values=coerced,
            provenance={t: SourceId.CUSTOM for t in coerced},
            disabled=frozenset(AttributeType(d) for d in disabled),
        )
        reference = classify(resolved)
        if extras:
            reference = enrich(reference, **extras)
        return reference

    return _make
