"""
Main entry point for the Helpdesk BoW Analyzer.

Commands:
- analyze: classify a single description (mood + technical category)
- report: analyze a tickets file and write an Excel report
- validate: check the configuration

The report pipeline:
1. Load emotional and technical lexicons
2. Load tickets
3. Analyze tickets with the Bag-of-Words classifier
4. Generate Excel report
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, TextIO

import click

from .config import get_config, AppConfig
from .data_sources import load_lexicons, load_tickets, DataSourceError
from .classifier import BowClassifier
from .excel_generator import generate_report, ExcelGeneratorError


def setup_logging(level: str, stream: Optional[TextIO] = None) -> None:
    """
    Configure application logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
            Unknown levels fall back to INFO.
        stream: Stream for log records (defaults to stdout).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(stream or sys.stdout),
        ],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Error during pipeline execution."""
    pass


def validate_config(config: AppConfig) -> None:
    """
    Validate configuration before running.

    Args:
        config: Application configuration.

    Raises:
        PipelineError: If configuration is invalid.
    """
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        raise PipelineError(
            f"Configuration validation failed with {len(errors)} error(s)"
        )


def build_classifier(config: AppConfig) -> BowClassifier:
    """
    Load lexicons and build the classifier.

    Args:
        config: Application configuration.

    Returns:
        BowClassifier ready to analyze descriptions.

    Raises:
        PipelineError: If lexicons cannot be loaded.
    """
    try:
        lexicons = load_lexicons(config.lexicon)
    except DataSourceError as e:
        raise PipelineError(f"Lexicon loading failed: {e}") from e

    if lexicons.is_empty():
        logger.warning("Both lexicons are empty, every ticket will get default labels")

    return BowClassifier(
        lexicons,
        default_mood=config.analysis.default_mood,
        default_technical_category=config.analysis.default_technical_category,
    )


def run_pipeline(
    tickets_path: Path,
    config: Optional[AppConfig] = None,
    output_path: Optional[Path] = None,
    force: bool = False,
) -> Path:
    """
    Execute the complete ticket analysis pipeline.

    Args:
        tickets_path: YAML/JSON file with the tickets to analyze.
        config: Optional configuration override.
        output_path: Optional custom output path for the report.
        force: Re-analyze tickets that already carry labels.

    Returns:
        Path to the generated report.

    Raises:
        PipelineError: If any step fails.
    """
    if config is None:
        config = get_config()

    if output_path:
        config = replace(
            config,
            output=config.output.__class__(
                output_dir=output_path.parent,
                report_filename=output_path.name,
            ),
        )

    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Starting Ticket Analysis Pipeline")
    logger.info("=" * 60)

    validate_config(config)

    # Step 1: Load lexicons
    logger.info("-" * 40)
    logger.info("Step 1: Loading lexicons")
    logger.info("-" * 40)

    classifier = build_classifier(config)

    # Step 2: Load tickets
    logger.info("-" * 40)
    logger.info("Step 2: Loading tickets")
    logger.info("-" * 40)

    try:
        tickets = load_tickets(tickets_path)
    except DataSourceError as e:
        raise PipelineError(f"Ticket loading failed: {e}") from e

    # Step 3: Analyze tickets
    logger.info("-" * 40)
    logger.info("Step 3: Analyzing tickets")
    logger.info("-" * 40)

    analyzed = classifier.analyze_batch(
        tickets,
        batch_size=config.analysis.progress_batch_size,
        force=force,
    )

    # Step 4: Generate Excel report
    logger.info("-" * 40)
    logger.info("Step 4: Generating Excel report")
    logger.info("-" * 40)

    try:
        report_path = generate_report(analyzed, config.output)
    except ExcelGeneratorError as e:
        raise PipelineError(f"Report generation failed: {e}") from e

    logger.info("=" * 60)
    logger.info("Pipeline completed successfully!")
    logger.info(f"Report saved to: {report_path}")
    logger.info("=" * 60)

    return report_path


def _run_command(debug: bool, action: Callable[[], None]) -> None:
    """Run a CLI action, mapping failures to exit codes."""
    try:
        action()
    except PipelineError as e:
        click.echo(f"Pipeline failed: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        if debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)
@click.option(
    "--lexicons",
    "lexicon_source",
    default=None,
    help="Lexicon file path or URL (overrides LEXICON_SOURCE)",
)
@click.pass_context
def main(ctx: click.Context, debug: bool, lexicon_source: Optional[str]) -> None:
    """
    Helpdesk BoW Analyzer.

    Infers the mood and technical category of helpdesk tickets from
    their descriptions using emotional and technical lexicons.
    """
    config = get_config()

    if debug:
        config = replace(config, log_level="DEBUG")
    if lexicon_source:
        config = replace(config, lexicon=replace(config.lexicon, source=lexicon_source))

    ctx.obj = {"config": config, "debug": debug}


@main.command()
@click.argument("text")
@click.option(
    "--detailed",
    is_flag=True,
    default=False,
    help="Also print the term frequencies and detected terms",
)
@click.pass_context
def analyze(ctx: click.Context, text: str, detailed: bool) -> None:
    """Analyze a single ticket description."""
    config: AppConfig = ctx.obj["config"]

    def action() -> None:
        # Results go to stdout, so keep log records off it
        setup_logging(config.log_level, stream=sys.stderr)
        validate_config(config)
        classifier = build_classifier(config)

        result = classifier.analyze_detailed(text)
        click.echo(f"Mood: {result.mood}")
        click.echo(f"Technical category: {result.technical_category}")
        if detailed:
            click.echo(f"Term frequency: {result.term_frequency_text}")
            click.echo(f"Detected terms: {result.detected_terms_text}")
            click.echo(f"Matched terms: {', '.join(result.matched_terms)}")

    _run_command(ctx.obj["debug"], action)


@main.command()
@click.argument(
    "tickets_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Custom output path for the report",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Re-analyze tickets that already have a mood and category",
)
@click.pass_context
def report(
    ctx: click.Context,
    tickets_file: Path,
    output: Optional[Path],
    force: bool,
) -> None:
    """Analyze a tickets file and write an Excel report."""
    config: AppConfig = ctx.obj["config"]

    def action() -> None:
        report_path = run_pipeline(tickets_file, config, output_path=output, force=force)
        click.echo(f"Report saved to: {report_path}")

    _run_command(ctx.obj["debug"], action)


@main.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Only validate configuration without running anything."""
    config: AppConfig = ctx.obj["config"]

    def action() -> None:
        setup_logging(config.log_level)
        logger.info("Validating configuration...")
        validate_config(config)
        click.echo("Configuration is valid!")

    _run_command(ctx.obj["debug"], action)


if __name__ == "__main__":
    main()
