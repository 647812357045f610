"""
Configuration module for the Helpdesk BoW Analyzer.

Handles all configuration through environment variables with sensible defaults.
Values can also be provided through a local .env file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()


@dataclass(frozen=True)
class LexiconConfig:
    """Configuration for the lexicon source (file path or HTTP URL)."""

    # Path to a YAML/JSON lexicon document, or an http(s) URL serving one
    source: str = field(
        default_factory=lambda: os.getenv("LEXICON_SOURCE", "./lexicons.yaml")
    )

    # Request timeout in seconds (remote sources only)
    request_timeout: int = field(
        default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "30"))
    )
    max_retries: int = field(
        default_factory=lambda: int(os.getenv("LEXICON_MAX_RETRIES", "3"))
    )

    # Type tags identifying each lexicon in the source document
    emotional_tag: str = field(
        default_factory=lambda: os.getenv("EMOTIONAL_LEXICON_TAG", "emocional")
    )
    technical_tag: str = field(
        default_factory=lambda: os.getenv("TECHNICAL_LEXICON_TAG", "tecnico")
    )

    @property
    def is_remote(self) -> bool:
        """Check if the source is an HTTP(S) URL."""
        return self.source.lower().startswith(("http://", "https://"))


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for the Bag-of-Words analysis."""

    default_mood: str = field(
        default_factory=lambda: os.getenv("DEFAULT_MOOD", "Neutralidad")
    )
    default_technical_category: str = field(
        default_factory=lambda: os.getenv("DEFAULT_TECHNICAL_CATEGORY", "General")
    )

    # Number of tickets to process between progress log lines
    progress_batch_size: int = field(
        default_factory=lambda: int(os.getenv("PROGRESS_BATCH_SIZE", "10"))
    )


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for output files."""

    output_dir: Path = field(
        default_factory=lambda: Path(os.getenv("OUTPUT_DIR", "./output"))
    )
    report_filename: str = field(
        default_factory=lambda: os.getenv(
            "REPORT_FILENAME",
            "ticket_analysis_report.xlsx"
        )
    )

    @property
    def report_path(self) -> Path:
        """Get full path to the report file."""
        return self.output_dir / self.report_filename


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration aggregating all config sections."""

    lexicon: LexiconConfig = field(default_factory=LexiconConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Logging level
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO")
    )

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors = []

        if not self.lexicon.source:
            errors.append("LEXICON_SOURCE is required")
        elif not self.lexicon.is_remote and not Path(self.lexicon.source).is_file():
            errors.append(f"LEXICON_SOURCE file not found: {self.lexicon.source}")

        if self.lexicon.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")
        if self.lexicon.max_retries < 1:
            errors.append("LEXICON_MAX_RETRIES must be at least 1")

        if not self.lexicon.emotional_tag:
            errors.append("EMOTIONAL_LEXICON_TAG is required")
        if not self.lexicon.technical_tag:
            errors.append("TECHNICAL_LEXICON_TAG is required")

        if not self.analysis.default_mood:
            errors.append("DEFAULT_MOOD must not be empty")
        if not self.analysis.default_technical_category:
            errors.append("DEFAULT_TECHNICAL_CATEGORY must not be empty")
        if self.analysis.progress_batch_size < 1:
            errors.append("PROGRESS_BATCH_SIZE must be at least 1")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"LOG_LEVEL is invalid: {self.log_level}")

        return errors


def get_config() -> AppConfig:
    """
    Get application configuration.

    Returns:
        AppConfig instance with all settings loaded from environment.
    """
    return AppConfig()
