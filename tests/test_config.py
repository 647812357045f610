"""Tests for configuration module."""

import os
from pathlib import Path
from unittest.mock import patch

from helpdesk_bow.config import (
    AnalysisConfig,
    AppConfig,
    LexiconConfig,
    OutputConfig,
    get_config,
)


class TestLexiconConfig:
    """Tests for LexiconConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            config = LexiconConfig()
            assert config.source == "./lexicons.yaml"
            assert config.request_timeout == 30
            assert config.max_retries == 3
            assert config.emotional_tag == "emocional"
            assert config.technical_tag == "tecnico"

    def test_env_override(self):
        """Test environment variable override."""
        with patch.dict(os.environ, {"LEXICON_SOURCE": "/tmp/lex.json"}):
            config = LexiconConfig()
            assert config.source == "/tmp/lex.json"

    def test_is_remote(self):
        """Test URL detection."""
        assert LexiconConfig(source="https://example.com/lex.yaml").is_remote is True
        assert LexiconConfig(source="HTTP://example.com/lex.yaml").is_remote is True
        assert LexiconConfig(source="./lexicons.yaml").is_remote is False


class TestAnalysisConfig:
    """Tests for AnalysisConfig."""

    def test_default_labels(self):
        """Test default labels for unmatched descriptions."""
        with patch.dict(os.environ, {}, clear=True):
            config = AnalysisConfig()
            assert config.default_mood == "Neutralidad"
            assert config.default_technical_category == "General"
            assert config.progress_batch_size == 10


class TestOutputConfig:
    """Tests for OutputConfig."""

    def test_report_path(self):
        """Test report path property."""
        with patch.dict(os.environ, {}, clear=True):
            config = OutputConfig()
            assert config.report_path.name == "ticket_analysis_report.xlsx"

    def test_custom_path(self):
        """Test report path from explicit values."""
        config = OutputConfig(output_dir=Path("/tmp/out"), report_filename="r.xlsx")
        assert config.report_path == Path("/tmp/out/r.xlsx")


class TestAppConfig:
    """Tests for AppConfig."""

    def test_validate_all_valid(self, tmp_path):
        """Test validation passes with an existing lexicon file."""
        lexicon_file = tmp_path / "lexicons.yaml"
        lexicon_file.write_text("lexicons: []\n", encoding="utf-8")

        config = AppConfig(
            lexicon=LexiconConfig(source=str(lexicon_file)),
            analysis=AnalysisConfig(),
            log_level="INFO",
        )
        assert config.validate() == []

    def test_validate_missing_lexicon_file(self, tmp_path):
        """Test validation catches a missing lexicon file."""
        config = AppConfig(
            lexicon=LexiconConfig(source=str(tmp_path / "missing.yaml")),
            log_level="INFO",
        )
        errors = config.validate()
        assert any("LEXICON_SOURCE" in e for e in errors)

    def test_validate_remote_source_not_checked_on_disk(self):
        """Test URLs are not checked for existence."""
        config = AppConfig(
            lexicon=LexiconConfig(source="https://example.com/lexicons.yaml"),
            log_level="INFO",
        )
        assert not any("LEXICON_SOURCE" in e for e in config.validate())

    def test_validate_empty_source(self):
        """Test validation catches an empty source."""
        config = AppConfig(lexicon=LexiconConfig(source=""), log_level="INFO")
        assert "LEXICON_SOURCE is required" in config.validate()

    def test_validate_empty_default_labels(self):
        """Test validation catches empty default labels."""
        config = AppConfig(
            lexicon=LexiconConfig(source="https://example.com/lexicons.yaml"),
            analysis=AnalysisConfig(default_mood="", default_technical_category=""),
            log_level="INFO",
        )
        errors = config.validate()
        assert any("DEFAULT_MOOD" in e for e in errors)
        assert any("DEFAULT_TECHNICAL_CATEGORY" in e for e in errors)

    def test_validate_bad_log_level(self):
        """Test validation catches an unknown log level."""
        config = AppConfig(
            lexicon=LexiconConfig(source="https://example.com/lexicons.yaml"),
            log_level="VERBOSE",
        )
        assert any("LOG_LEVEL" in e for e in config.validate())


class TestGetConfig:
    """Tests for get_config function."""

    def test_returns_app_config(self):
        """Test get_config returns AppConfig instance."""
        config = get_config()
        assert isinstance(config, AppConfig)
