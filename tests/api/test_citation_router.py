"""
Tests for Citation Router
=========================

Tests for the citation API endpoints.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from linkcite.api.citation_router import build_generation_request, get_settings, router
from linkcite.api.models.citation_models import CitationEnrichments, CitationItem
from linkcite.attributes import SourceId
from linkcite.citation.styles import CitationStyle, InfoboxLayout
from linkcite.config import TEST_SETTINGS, Settings


# =============================================================================
# TEST FIXTURES
# =============================================================================


@pytest.fixture
def settings():
    return TEST_SETTINGS


@pytest.fixture
def app(settings):
    """Create a FastAPI app with the citation router."""
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    app.dependency_overrides[get_settings] = lambda: settings
    return app


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def sample_items(news_metadata):
    """Two pages from the same site and year."""
    return [
        {"multi_source": news_metadata},
        {
            "multi_source": {
                "title": {"open_graph": "Second article"},
                "date": {"open_graph": "2024-06-01"},
            },
            "url": "https://example.com/second",
        },
    ]


# =============================================================================
# HELPER FUNCTION TESTS
# =============================================================================


class TestBuildGenerationRequest:
    """Tests for converting API items into pipeline requests."""

    def test_settings_fallbacks(self):
        settings = Settings(
            default_priority=(SourceId.HTML_META,),
            default_styles=(CitationStyle.IN_TEXT,),
            infobox_layout=InfoboxLayout.SINGLELINE,
        )

        request = build_generation_request(CitationItem(), settings)

        assert request.priority.default == (SourceId.HTML_META,)
        assert request.styles == (CitationStyle.IN_TEXT,)
        assert request.layout == InfoboxLayout.SINGLELINE

    def test_item_values_win(self, settings):
        item = CitationItem(
            priority={"default": ["structured_data"]},
            enrichments=CitationEnrichments(translated_title="The future", translated_language="en"),
            url="https://example.com",
        )

        request = build_generation_request(item, settings, styles=[CitationStyle.INFOBOX])

        assert request.priority.default == (SourceId.STRUCTURED_DATA,)
        assert request.styles == (CitationStyle.INFOBOX,)
        assert request.enrichments.translated_title.language == "en"
        assert request.requested_url == "https://example.com"


# =============================================================================
# GENERATE ENDPOINT TESTS
# =============================================================================


class TestGenerateEndpoint:
    """Tests for POST /citations/generate."""

    def test_generate_all_styles(self, client, news_metadata):
        response = client.post("/api/v1/citations/generate", json={"multi_source": news_metadata})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["kind"] == "news"
        assert data["resolved"]["title"] == "Risolubilità del contratto"
        assert data["provenance"]["date"] == "structured_data"
        assert set(data["citations"]) == {"infobox", "bibliography", "in_text"}
        assert data["warnings"] == []

    def test_generate_selected_formats(self, client, news_metadata):
        response = client.post(
            "/api/v1/citations/generate",
            json={"multi_source": news_metadata, "formats": ["harvard"]},
        )

        citations = response.json()["citations"]
        assert list(citations) == ["in_text"]
        assert citations["in_text"].startswith("Rossi, M. (2024)")

    def test_priority_and_overrides(self, client):
        response = client.post(
            "/api/v1/citations/generate",
            json={
                "multi_source": {"title": {"open_graph": "A", "structured_data": "B"}},
                "priority": {"default": ["structured_data", "open_graph"]},
                "overrides": {"language": {"custom": "en"}},
                "formats": ["in_text"],
            },
        )

        data = response.json()
        assert data["resolved"] == {"title": "B", "language": "en"}
        assert data["provenance"] == {"title": "structured_data", "language": "custom"}
        assert data["citations"]["in_text"] == "(n.d.) 'B'."

    def test_requested_url_and_enrichments(self, client):
        response = client.post(
            "/api/v1/citations/generate",
            json={
                "multi_source": {"title": {"open_graph": "Il futuro"}},
                "url": "https://example.com/a",
                "enrichments": {
                    "translated_title": "The future",
                    "translated_language": "en",
                    "archive_url": "https://web.archive.org/web/20240115123000/https://example.com/a",
                    "archive_date": "20240115123000",
                },
                "formats": ["infobox"],
                "layout": "singleline",
            },
        )

        text = response.json()["citations"]["infobox"]
        assert "|url=https://example.com/a " in text
        assert "|trans-title=The future " in text
        assert "|archive-date=2024-01-15 " in text

    def test_warnings(self, client):
        response = client.post(
            "/api/v1/citations/generate",
            json={"multi_source": {"site_name": {"open_graph": "Example"}}, "formats": ["in_text"]},
        )

        assert response.status_code == 200
        warnings = response.json()["warnings"]
        assert [w["attribute"] for w in warnings] == ["title", "url"]
        assert {w["code"] for w in warnings} == {"missing_mandatory_attribute"}

    def test_disabled_fields(self, client, news_metadata):
        response = client.post(
            "/api/v1/citations/generate",
            json={"multi_source": news_metadata, "disabled": ["date"], "formats": ["in_text"]},
        )

        data = response.json()
        assert "date" not in data["resolved"]
        assert "(n.d.)" in data["citations"]["in_text"]

    def test_invalid_input_returns_422(self, client):
        response = client.post(
            "/api/v1/citations/generate",
            json={
                "multi_source": {"subtitle": {"open_graph": "x"}},
                "disabled": ["colour"],
            },
        )

        assert response.status_code == 422
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "configuration_error"
        assert {i["field"] for i in data["issues"]} == {"multi_source.subtitle", "disabled[0]"}

    def test_unknown_format_returns_400(self, client, news_metadata):
        response = client.post(
            "/api/v1/citations/generate",
            json={"multi_source": news_metadata, "formats": ["apa"]},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "unsupported_format"


# =============================================================================
# FORMAT ENDPOINT TESTS
# =============================================================================


class TestFormatEndpoint:
    """Tests for POST /citations/format."""

    def test_bibtex_export(self, client, sample_items):
        response = client.post("/api/v1/citations/format", json={"items": sample_items})

        assert response.status_code == 200
        data = response.json()
        assert data["format"] == "bibliography"
        assert data["citations_count"] == 2
        assert data["extension"] == "bib"
        assert data["media_type"] == "application/x-bibtex"
        assert data["content"].startswith("% linkcite Citation Export\n")
        assert "@misc{example.com2024,\n" in data["content"]
        assert "@misc{example.com2024_1,\n" in data["content"]
        assert data["warnings"] == [[], []]

    def test_without_attribution(self, client, sample_items):
        response = client.post(
            "/api/v1/citations/format",
            json={"items": sample_items, "format": "bibtex", "include_attribution": False},
        )

        assert response.json()["content"].startswith("@misc{example.com2024,\n")

    def test_harvard_export(self, client, sample_items):
        response = client.post(
            "/api/v1/citations/format",
            json={"items": sample_items, "format": "in_text"},
        )

        data = response.json()
        assert data["extension"] == "txt"
        assert data["content"].split("\n\n")[1] == (
            "(2024) 'Second article'. Available at: https://example.com/second."
        )
        assert data["content"].split("\n\n")[2].startswith("---\nGenerated by linkcite ")

    def test_empty_items_rejected(self, client):
        response = client.post("/api/v1/citations/format", json={"items": []})
        assert response.status_code == 422

    def test_unknown_format_returns_400(self, client, sample_items):
        response = client.post(
            "/api/v1/citations/format",
            json={"items": sample_items, "format": "chicago"},
        )

        assert response.status_code == 400

    def test_invalid_item_returns_422(self, client):
        response = client.post(
            "/api/v1/citations/format",
            json={"items": [{"overrides": {"title": "custom"}}]},
        )

        assert response.status_code == 422
        assert response.json()["issues"][0]["field"] == "overrides.title"


# =============================================================================
# FORMATS LIST TESTS
# =============================================================================


class TestFormatsEndpoint:
    """Tests for GET /citations/formats."""

    def test_list_formats(self, client):
        response = client.get("/api/v1/citations/formats")

        assert response.status_code == 200
        data = response.json()
        assert [f["name"] for f in data["formats"]] == ["infobox", "bibliography", "in_text"]
        assert data["default_format"] == "infobox"

    def test_default_from_settings(self, app, client):
        app.dependency_overrides[get_settings] = lambda: Settings(default_styles=(CitationStyle.IN_TEXT,))

        assert client.get("/api/v1/citations/formats").json()["default_format"] == "in_text"
