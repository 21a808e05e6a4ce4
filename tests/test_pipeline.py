"""
Tests for Generation Pipeline
=============================

Tests for resolve -> classify -> enrich -> format in one call.
"""

import pytest

from linkcite.attributes import AttributeType, MultiSourceAttributeSet, SourceId
from linkcite.citation.styles import CitationStyle, InfoboxLayout
from linkcite.errors import ConfigurationError, WarningCode
from linkcite.pipeline import Enrichments, GenerationRequest, generate
from linkcite.reference import ReferenceKind
from linkcite.resolution import PriorityConfig, SelectionOverrides, parse_disabled


def codes(result):
    return [(w.code, w.attribute) for w in result.warnings]


# =============================================================================
# BASIC GENERATION TESTS
# =============================================================================


class TestGenerate:
    """Tests for a complete pipeline run."""

    def test_news_article(self, news_multi_source):
        result = generate(GenerationRequest(multi_source=news_multi_source))

        assert result.reference.kind == ReferenceKind.NEWS
        assert result.warnings == []
        assert list(result.citations) == list(CitationStyle)
        assert result.citations[CitationStyle.INFOBOX] == (
            "{{cite web\n"
            "| title = Risolubilità del contratto\n"
            "| last = Rossi\n"
            "| first = Mario\n"
            "| date = 2024-01-15\n"
            "| language = it\n"
            "| website = Example News\n"
            "| url = https://www.example.com/article\n"
            "}}"
        )
        assert result.citations[CitationStyle.BIBLIOGRAPHY].startswith("@misc{example.com2024,\n")
        assert result.citations[CitationStyle.IN_TEXT] == (
            "Rossi, M. (2024) 'Risolubilità del contratto', Example News. "
            "Available at: https://www.example.com/article."
        )

    def test_requested_styles_only(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            styles=(CitationStyle.IN_TEXT,),
        )

        assert list(generate(request).citations) == [CitationStyle.IN_TEXT]

    def test_singleline_layout(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            styles=(CitationStyle.INFOBOX,),
            layout=InfoboxLayout.SINGLELINE,
        )

        assert "\n" not in generate(request).citations[CitationStyle.INFOBOX]

    def test_regeneration_is_deterministic(self, news_multi_source):
        request = GenerationRequest(multi_source=news_multi_source)
        assert generate(request).citations == generate(request).citations

    def test_empty_input(self):
        result = generate(GenerationRequest())

        assert result.citations[CitationStyle.INFOBOX] == "{{cite web\n}}"
        assert result.citations[CitationStyle.IN_TEXT] == "(n.d.)."
        assert result.reference.kind == ReferenceKind.GENERIC


# =============================================================================
# INTERACTIVE EDITING TESTS
# =============================================================================


class TestInteractiveEditing:
    """Toggling fields and changing selections, then regenerating."""

    def test_disable_date(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            disabled=parse_disabled(["date"]),
        )

        result = generate(request)

        assert "(n.d.)" in result.citations[CitationStyle.IN_TEXT]
        assert "date" not in result.citations[CitationStyle.INFOBOX]
        assert "@misc{example.com,\n" in result.citations[CitationStyle.BIBLIOGRAPHY]
        assert result.warnings == []

    def test_select_other_title_source(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            overrides=SelectionOverrides.from_raw({"title": "html_meta"}),
        )

        result = generate(request)

        assert "Risolubilità del contratto | Example News" in result.citations[CitationStyle.INFOBOX]
        assert result.resolved.source_of(AttributeType.TITLE) == SourceId.HTML_META

    def test_custom_title(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            overrides=SelectionOverrides.from_raw({"title": {"custom": "C&A Report"}}),
        )

        result = generate(request)

        assert r"title = {C\&A Report}" in result.citations[CitationStyle.BIBLIOGRAPHY]
        assert "| title = C&A Report" in result.citations[CitationStyle.INFOBOX]

    def test_priority_change(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            priority=PriorityConfig.single("html_meta"),
        )

        result = generate(request)

        assert result.resolved.get(AttributeType.DATE).iso() == "2024-01-14"


# =============================================================================
# URL FALLBACK TESTS
# =============================================================================


class TestUrlFallback:
    """Tests for the requested URL fallback."""

    def test_used_when_no_source_has_url(self):
        multi = MultiSourceAttributeSet.from_raw({"title": {"open_graph": "Example"}})

        result = generate(GenerationRequest(multi_source=multi, requested_url=" https://example.com/a "))

        assert result.reference.url == "https://example.com/a"
        assert result.resolved.source_of(AttributeType.URL) == SourceId.CUSTOM
        assert result.warnings == []

    def test_source_url_preferred(self, news_multi_source):
        request = GenerationRequest(multi_source=news_multi_source, requested_url="https://other.com")
        assert generate(request).reference.url == "https://www.example.com/article"

    def test_not_used_when_disabled(self):
        request = GenerationRequest(
            requested_url="https://example.com/a",
            disabled=frozenset({AttributeType.URL}),
        )

        result = generate(request)

        assert result.reference.url is None
        assert (WarningCode.MISSING_MANDATORY_ATTRIBUTE, "url") in codes(result)


# =============================================================================
# WARNING TESTS
# =============================================================================


class TestWarnings:
    """Tests for non-fatal warnings."""

    def test_missing_mandatory(self):
        result = generate(GenerationRequest())

        assert codes(result) == [
            (WarningCode.MISSING_MANDATORY_ATTRIBUTE, "title"),
            (WarningCode.MISSING_MANDATORY_ATTRIBUTE, "url"),
        ]

    def test_malformed_source_date(self):
        multi = MultiSourceAttributeSet.from_raw({
            "title": {"open_graph": "A"},
            "url": {"open_graph": "https://a.com"},
            "date": {"open_graph": "sometime last week", "html_meta": "2024-01-15"},
        })

        result = generate(GenerationRequest(multi_source=multi))

        assert codes(result) == [(WarningCode.MALFORMED_DATE_INPUT, "date")]
        assert result.reference.date.iso() == "2024-01-15"

    def test_malformed_source_date_disabled_is_silent(self):
        multi = MultiSourceAttributeSet.from_raw({
            "title": {"open_graph": "A"},
            "url": {"open_graph": "https://a.com"},
            "date": {"open_graph": "sometime"},
        })

        result = generate(GenerationRequest(multi_source=multi, disabled=frozenset({AttributeType.DATE})))

        assert result.warnings == []

    def test_malformed_custom_date(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            overrides=SelectionOverrides.from_raw({"date": {"custom": "someday"}}),
        )

        result = generate(request)

        assert codes(result) == [(WarningCode.MALFORMED_DATE_INPUT, "date")]
        assert result.reference.date is None

    def test_selected_source_without_value(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            overrides=SelectionOverrides.from_raw({"publisher": "doi_registry"}),
        )

        assert codes(generate(request)) == [(WarningCode.UNAVAILABLE_FIELD, "publisher")]

    def test_malformed_archive_date(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            enrichments=Enrichments(archive_date="yesterday"),
        )

        result = generate(request)

        assert codes(result) == [(WarningCode.MALFORMED_DATE_INPUT, "archive_date")]
        assert result.reference.archive_date is None


# =============================================================================
# ENRICHMENT TESTS
# =============================================================================


class TestEnrichments:
    """Tests for translation and archive values."""

    def test_enrichments_rendered(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            enrichments=Enrichments(
                translated_title="Termination of contract",
                archive_url="https://web.archive.org/web/20240115123000/https://www.example.com/article",
                archive_date="20240115123000",
            ),
        )

        result = generate(request)

        infobox = result.citations[CitationStyle.INFOBOX]
        assert "| trans-title = Termination of contract\n" in infobox
        assert "| archive-date = 2024-01-15\n" in infobox
        assert result.citations[CitationStyle.IN_TEXT].endswith("(Accessed: 15 January 2024).")
        assert "note = {Translated title: Termination of contract." in result.citations[CitationStyle.BIBLIOGRAPHY]

    def test_disabled_enrichment_dropped(self, news_multi_source):
        request = GenerationRequest(
            multi_source=news_multi_source,
            disabled=frozenset({AttributeType.ARCHIVE_URL}),
            enrichments=Enrichments(archive_url="https://web.archive.org/x"),
        )

        result = generate(request)

        for text in result.citations.values():
            assert "web.archive.org" not in text


# =============================================================================
# REQUEST CONSTRUCTION TESTS
# =============================================================================


class TestFromRaw:
    """Tests for GenerationRequest.from_raw."""

    def test_builds_request(self, news_metadata):
        request = GenerationRequest.from_raw(
            news_metadata,
            priority={"default": ["structured_data", "open_graph", "html_meta"]},
            overrides={"title": {"custom": "Manual"}},
            disabled=["language"],
            styles=[CitationStyle.BIBLIOGRAPHY],
        )

        assert request.priority.default[0] == SourceId.STRUCTURED_DATA
        assert request.disabled == frozenset({AttributeType.LANGUAGE})
        assert request.styles == (CitationStyle.BIBLIOGRAPHY,)

    def test_enrichments_from_mapping(self):
        request = GenerationRequest.from_raw(enrichments={
            "translated_title": "The future",
            "translated_language": "en",
            "archive_url": "https://web.archive.org/x",
            "archive_date": "2024-01-15",
        })

        assert request.enrichments.translated_title.text == "The future"
        assert request.enrichments.translated_title.language == "en"
        assert request.enrichments.archive_url == "https://web.archive.org/x"

    def test_enrichment_shapes_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GenerationRequest.from_raw(enrichments=Enrichments(archive_url=123, translated_title=5))

        assert {i.field for i in exc_info.value.issues} == {
            "enrichments.archive_url",
            "enrichments.translated_title",
        }

    def test_accepts_priority_config(self):
        priority = PriorityConfig.single("html_meta")
        assert GenerationRequest.from_raw(priority=priority).priority is priority

    def test_all_issues_collected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GenerationRequest.from_raw(
                {"subtitle": {"open_graph": "x"}},
                priority={"default": ["nowhere"]},
                overrides={"title": "custom"},
                disabled=["colour"],
            )

        fields = [i.field for i in exc_info.value.issues]
        assert len(fields) == 4
        assert "disabled[0]" in fields
        assert "priority.default[0]" in fields


# =============================================================================
# SERIALIZATION TESTS
# =============================================================================


class TestResultToDict:
    """Tests for GenerationResult.to_dict."""

    def test_to_dict(self, news_multi_source):
        data = generate(GenerationRequest(multi_source=news_multi_source)).to_dict()

        assert data["kind"] == "news"
        assert data["resolved"]["date"] == "2024-01-15"
        assert data["provenance"]["authors"] == "structured_data"
        assert set(data["citations"]) == {"infobox", "bibliography", "in_text"}
        assert data["warnings"] == []

    def test_warnings_serialized(self):
        data = generate(GenerationRequest()).to_dict()

        assert data["warnings"][0] == {
            "code": "missing_mandatory_attribute",
            "attribute": "title",
            "message": "No value for mandatory attribute title",
        }
