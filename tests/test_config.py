"""
Tests for Settings and Logging Configuration
============================================
"""

import pytest
import structlog

from linkcite.attributes import AttributeType, SourceId
from linkcite.citation.styles import CitationStyle, InfoboxLayout
from linkcite.config import DEV_SETTINGS, PRESETS, TEST_SETTINGS, Settings, load_settings
from linkcite.errors import ConfigurationError
from linkcite.log_config import configure_logging
from linkcite.resolution.priority import DEFAULT_SOURCE_ORDER


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config file and return its path."""
    def _write(text):
        path = tmp_path / "linkcite.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# =============================================================================
# DEFAULTS
# =============================================================================


class TestDefaults:
    """Tests for default settings."""

    def test_defaults(self):
        settings = load_settings(environ={})

        assert settings.default_priority == DEFAULT_SOURCE_ORDER
        assert settings.default_styles == tuple(CitationStyle)
        assert settings.infobox_layout == InfoboxLayout.MULTILINE
        assert settings.log_level == "INFO"
        assert settings.log_json is False

    def test_presets(self):
        assert PRESETS["dev"] is DEV_SETTINGS
        assert PRESETS["test"] is TEST_SETTINGS
        assert PRESETS["default"] == Settings()

    def test_env_selects_dev_preset(self):
        settings = load_settings(environ={"LINKCITE_ENV": "dev"})

        assert settings.name == "dev"
        assert settings.log_level == "DEBUG"

    def test_env_preset_overridden_by_variables(self):
        settings = load_settings(environ={"LINKCITE_ENV": " Dev ", "LINKCITE_LOG_LEVEL": "ERROR"})

        assert settings.name == "dev"
        assert settings.log_level == "ERROR"

    def test_explicit_base_wins_over_env(self):
        assert load_settings(environ={"LINKCITE_ENV": "dev"}, base=TEST_SETTINGS).name == "test"

    def test_unknown_env_preset(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(environ={"LINKCITE_ENV": "staging"})

        assert exc_info.value.issues[0].field == "env.env"

    def test_base_settings_kept(self):
        assert load_settings(environ={}, base=TEST_SETTINGS).name == "test"

    def test_priority_config(self):
        config = Settings(priority_overrides={"date": ["html_meta"]}).priority_config()
        assert config.order_for(AttributeType.DATE) == (SourceId.HTML_META,)


# =============================================================================
# ENVIRONMENT
# =============================================================================


class TestEnvironment:
    """Tests for LINKCITE_* variables."""

    def test_env_values(self):
        settings = load_settings(environ={
            "LINKCITE_PRIORITY": "structured_data, og",
            "LINKCITE_STYLES": "bibtex,harvard",
            "LINKCITE_INFOBOX_LAYOUT": "SingleLine",
            "LINKCITE_LOG_LEVEL": "debug",
            "LINKCITE_LOG_JSON": "yes",
            "LINKCITE_CORS_ORIGINS": "https://a.example, https://b.example",
        })

        assert settings.default_priority == (SourceId.STRUCTURED_DATA, SourceId.OPEN_GRAPH)
        assert settings.default_styles == (CitationStyle.BIBLIOGRAPHY, CitationStyle.IN_TEXT)
        assert settings.infobox_layout == InfoboxLayout.SINGLELINE
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True
        assert settings.cors_origins == ("https://a.example", "https://b.example")

    def test_blank_values_ignored(self):
        settings = load_settings(environ={"LINKCITE_LOG_LEVEL": "  "})
        assert settings.log_level == "INFO"

    def test_env_file_under_environ(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LINKCITE_LOG_LEVEL=ERROR\nLINKCITE_STYLES=infobox\n", encoding="utf-8")

        settings = load_settings(env_file=env_file, environ={"LINKCITE_LOG_LEVEL": "DEBUG"})

        assert settings.log_level == "DEBUG"
        assert settings.default_styles == (CitationStyle.INFOBOX,)

    def test_all_issues_reported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(environ={
                "LINKCITE_STYLES": "apa",
                "LINKCITE_INFOBOX_LAYOUT": "wide",
                "LINKCITE_LOG_LEVEL": "LOUD",
                "LINKCITE_LOG_JSON": "maybe",
            })

        assert [i.field for i in exc_info.value.issues] == [
            "env.styles",
            "env.infobox_layout",
            "env.log_level",
            "env.log_json",
        ]

    def test_unknown_source_rejected(self):
        with pytest.raises(ConfigurationError):
            load_settings(environ={"LINKCITE_PRIORITY": "open_graph,bing"})


# =============================================================================
# YAML FILE
# =============================================================================


class TestConfigFile:
    """Tests for the YAML config file."""

    def test_yaml_values(self, config_file):
        path = config_file(
            "priority:\n"
            "  default: [html_meta, open_graph]\n"
            "  overrides:\n"
            "    date: [doi_registry]\n"
            "styles: [infobox]\n"
            "infobox_layout: singleline\n"
        )

        settings = load_settings(config_file=path, environ={})

        assert settings.default_priority == (SourceId.HTML_META, SourceId.OPEN_GRAPH)
        assert settings.priority_config().order_for(AttributeType.DATE) == (SourceId.DOI_REGISTRY,)
        assert settings.default_styles == (CitationStyle.INFOBOX,)
        assert settings.infobox_layout == InfoboxLayout.SINGLELINE

    def test_env_overrides_yaml(self, config_file):
        path = config_file("log_level: ERROR\n")

        settings = load_settings(config_file=path, environ={"LINKCITE_LOG_LEVEL": "DEBUG"})

        assert settings.log_level == "DEBUG"

    def test_config_path_from_env(self, config_file):
        path = config_file("styles: all\n")

        settings = load_settings(environ={"LINKCITE_CONFIG": str(path)})

        assert settings.default_styles == tuple(CitationStyle)

    def test_empty_file(self, config_file):
        assert load_settings(config_file=config_file(""), environ={}) == load_settings(environ={})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_file=tmp_path / "missing.yaml", environ={})

        assert exc_info.value.message == "Cannot read config file"

    def test_not_a_mapping(self, config_file):
        with pytest.raises(ConfigurationError):
            load_settings(config_file=config_file("- infobox\n- bibliography\n"), environ={})

    def test_invalid_yaml(self, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_file=config_file("styles: [infobox\n"), environ={})

        assert exc_info.value.message == "Invalid config file"

    def test_issue_field_uses_origin(self, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_file=config_file("infobox_layout: wide\n"), environ={})

        assert exc_info.value.issues[0].field == "config.infobox_layout"


# =============================================================================
# LOGGING
# =============================================================================


class TestLogging:
    """Tests for structlog configuration."""

    def test_logs_to_stderr(self, capsys):
        configure_logging("INFO")

        structlog.get_logger().info("Citation generated", kind="news")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Citation generated" in captured.err
        assert "kind=news" in captured.err

    def test_level_filters(self, capsys):
        configure_logging("WARNING")

        structlog.get_logger().info("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_json_output(self, capsys):
        configure_logging("INFO", json_output=True)

        structlog.get_logger().info("Citation generated")

        assert '"event": "Citation generated"' in capsys.readouterr().err

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("LOUD")
