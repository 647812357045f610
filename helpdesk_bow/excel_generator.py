"""
Excel report generator for the Helpdesk BoW Analyzer.

Generates formatted Microsoft Excel reports with:
- Bold headers
- Fixed column widths
- Hierarchical sorting
- A summary sheet with ticket counts per technical category and mood
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .config import OutputConfig
from .models import Ticket
from .text_processing import join_terms, render_term_frequency


logger = logging.getLogger(__name__)


class ExcelGeneratorError(Exception):
    """Error during Excel generation."""
    pass


COLUMN_CONFIG = [
    {"key": "id", "header": "Ticket ID", "width": 12},
    {"key": "subject", "header": "Subject", "width": 35},
    {"key": "description", "header": "Description", "width": 60},
    {"key": "requester_email", "header": "Requester Email", "width": 30},
    {"key": "department", "header": "Department", "width": 22},
    {"key": "status", "header": "Status", "width": 14},
    {"key": "mood", "header": "Mood", "width": 18},
    {"key": "technical_category", "header": "Technical Category", "width": 24},
    {"key": "term_frequency", "header": "Term Frequency", "width": 50},
    {"key": "detected_terms", "header": "Detected Terms", "width": 40},
]

SUMMARY_COLUMN_CONFIG = [
    {"header": "Technical Category", "width": 28},
    {"header": "Mood", "width": 20},
    {"header": "Tickets", "width": 12},
]


def sort_tickets(tickets: list[Ticket]) -> list[Ticket]:
    """
    Sort tickets hierarchically by category, mood, and subject.

    Sorting order (all ascending, standard lexicographic):
    1. technical_category
    2. mood
    3. subject

    Args:
        tickets: List of tickets to sort.

    Returns:
        Sorted list of tickets.
    """
    return sorted(
        tickets,
        key=lambda t: (
            t.technical_category,
            t.mood,
            t.subject,
        )
    )


def ticket_to_row(ticket: Ticket) -> list[Any]:
    """
    Convert a Ticket to a row of values.

    Args:
        ticket: The ticket to convert.

    Returns:
        List of cell values matching COLUMN_CONFIG order.
    """
    return [
        ticket.id,
        ticket.subject,
        ticket.description,
        ticket.requester_email,
        ticket.department,
        ticket.status,
        ticket.mood,
        ticket.technical_category,
        render_term_frequency(ticket.term_frequency),
        join_terms(ticket.term_frequency),
    ]


def summarize_tickets(tickets: list[Ticket]) -> list[tuple[str, str, int]]:
    """Count tickets per (technical category, mood), sorted by category then mood."""
    counts = Counter((t.technical_category, t.mood) for t in tickets)
    return [
        (category, mood, count)
        for (category, mood), count in sorted(counts.items())
    ]


class ExcelReportGenerator:
    """
    Generator for formatted Excel reports.

    Produces reports with:
    - Styled headers (bold, colored background)
    - Fixed column widths
    - Text wrapping for long content
    - Proper borders
    """

    # Style configuration
    HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
    HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)

    CELL_ALIGNMENT = Alignment(vertical="top", wrap_text=True)
    CELL_BORDER = Border(
        left=Side(style="thin", color="D0D0D0"),
        right=Side(style="thin", color="D0D0D0"),
        top=Side(style="thin", color="D0D0D0"),
        bottom=Side(style="thin", color="D0D0D0"),
    )

    # Alternating row colors for readability
    ROW_FILL_ODD = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
    ROW_FILL_EVEN = PatternFill(start_color="FFFFFF", end_color="FFFFFF", fill_type="solid")

    def __init__(self, config: OutputConfig):
        """
        Initialize the generator.

        Args:
            config: Output configuration with file paths.
        """
        self._config = config

    def generate(self, tickets: list[Ticket]) -> Path:
        """
        Generate an Excel report from analyzed tickets.

        Args:
            tickets: List of analyzed tickets.

        Returns:
            Path to the generated Excel file.

        Raises:
            ExcelGeneratorError: If report generation fails.
        """
        try:
            sorted_tickets = sort_tickets(tickets)
            logger.info(f"Sorted {len(sorted_tickets)} tickets for report")

            wb = Workbook()
            ws = wb.active
            ws.title = "Analyzed Tickets"

            self._write_headers(ws, COLUMN_CONFIG)
            self._write_rows(ws, [ticket_to_row(t) for t in sorted_tickets])
            self._apply_column_widths(ws, COLUMN_CONFIG)
            ws.freeze_panes = "A2"

            summary = wb.create_sheet("Summary")
            self._write_headers(summary, SUMMARY_COLUMN_CONFIG)
            self._write_rows(summary, [list(row) for row in summarize_tickets(tickets)])
            self._apply_column_widths(summary, SUMMARY_COLUMN_CONFIG)
            summary.freeze_panes = "A2"

            self._config.output_dir.mkdir(parents=True, exist_ok=True)

            output_path = self._config.report_path
            wb.save(output_path)

            logger.info(f"Excel report saved to: {output_path}")
            return output_path

        except Exception as e:
            logger.error(f"Failed to generate Excel report: {e}")
            raise ExcelGeneratorError(f"Report generation failed: {e}") from e

    def _write_headers(self, ws: Worksheet, columns: list[dict]) -> None:
        """Write and style header row."""
        for col_idx, col_config in enumerate(columns, 1):
            cell = ws.cell(row=1, column=col_idx, value=col_config["header"])
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.CELL_BORDER

        ws.row_dimensions[1].height = 30

    def _write_rows(self, ws: Worksheet, rows: list[list[Any]]) -> None:
        """Write data rows with styling."""
        for row_idx, row_data in enumerate(rows, 2):
            fill = self.ROW_FILL_ODD if row_idx % 2 == 0 else self.ROW_FILL_EVEN

            for col_idx, value in enumerate(row_data, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.alignment = self.CELL_ALIGNMENT
                cell.border = self.CELL_BORDER
                cell.fill = fill

    def _apply_column_widths(self, ws: Worksheet, columns: list[dict]) -> None:
        """Apply column widths from configuration."""
        for col_idx, col_config in enumerate(columns, 1):
            column_letter = get_column_letter(col_idx)
            ws.column_dimensions[column_letter].width = col_config["width"]


def generate_report(
    tickets: list[Ticket],
    config: OutputConfig
) -> Path:
    """
    Convenience function to generate an Excel report.

    Args:
        tickets: List of analyzed tickets.
        config: Output configuration.

    Returns:
        Path to generated report.
    """
    generator = ExcelReportGenerator(config)
    return generator.generate(tickets)
