"""Tests for Excel report generator."""

import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from openpyxl import load_workbook

from helpdesk_bow.config import OutputConfig
from helpdesk_bow.excel_generator import (
    COLUMN_CONFIG,
    ExcelGeneratorError,
    ExcelReportGenerator,
    generate_report,
    sort_tickets,
    summarize_tickets,
    ticket_to_row,
)
from helpdesk_bow.models import Ticket


@pytest.fixture
def analyzed_tickets() -> list[Ticket]:
    """Create analyzed tickets for testing."""
    return [
        Ticket(
            id="1",
            subject="Wifi caido",
            description="El wifi esta lento",
            requester_email="ana@example.com",
            department="Redes",
            status="Abierto",
            mood="Frustracion",
            technical_category="Redes",
            term_frequency={"wifi": 1, "lento": 1},
        ),
        Ticket(
            id="2",
            subject="Impresora",
            description="La impresora no imprime",
            mood="Neutralidad",
            technical_category="Hardware",
            term_frequency={"impresora": 1, "imprime": 1},
        ),
        Ticket(
            id="3",
            subject="Acceso VPN",
            description="Sin VPN, urgente",
            mood="Urgencia",
            technical_category="Redes",
            term_frequency={"vpn": 1, "urgente": 1},
        ),
    ]


class TestSortTickets:
    """Tests for ticket sorting."""

    def test_sort_by_category(self, analyzed_tickets):
        """Test sorting by technical category first."""
        sorted_tickets = sort_tickets(analyzed_tickets)
        assert sorted_tickets[0].technical_category == "Hardware"
        assert sorted_tickets[1].technical_category == "Redes"

    def test_sort_hierarchical(self, analyzed_tickets):
        """Test mood then subject order within a category."""
        sorted_tickets = sort_tickets(analyzed_tickets)
        assert [t.id for t in sorted_tickets] == ["2", "1", "3"]

    def test_sort_does_not_mutate_input(self, analyzed_tickets):
        """Test the input list keeps its order."""
        sort_tickets(analyzed_tickets)
        assert [t.id for t in analyzed_tickets] == ["1", "2", "3"]


class TestTicketToRow:
    """Tests for row conversion."""

    def test_ticket_to_row(self, analyzed_tickets):
        """Test converting a ticket to a row."""
        row = ticket_to_row(analyzed_tickets[0])

        assert len(row) == len(COLUMN_CONFIG)
        assert row[0] == "1"
        assert row[6] == "Frustracion"
        assert row[7] == "Redes"
        assert row[8] == "wifi:1, lento:1"
        assert row[9] == "wifi, lento"

    def test_row_without_term_frequency(self):
        """Test tickets without diagnostics render empty cells."""
        row = ticket_to_row(Ticket(id="9"))
        assert row[8] == ""
        assert row[9] == ""


class TestSummarizeTickets:
    """Tests for the summary counts."""

    def test_counts_by_category_and_mood(self, analyzed_tickets):
        """Test counts per (category, mood)."""
        summary = summarize_tickets(analyzed_tickets + [analyzed_tickets[0]])
        assert summary == [
            ("Hardware", "Neutralidad", 1),
            ("Redes", "Frustracion", 2),
            ("Redes", "Urgencia", 1),
        ]

    def test_empty(self):
        """Test empty input gives an empty summary."""
        assert summarize_tickets([]) == []


class TestExcelReportGenerator:
    """Tests for workbook generation."""

    def test_generate_report(self, analyzed_tickets):
        """Test the report is written with both sheets."""
        with TemporaryDirectory() as tmp_dir:
            config = OutputConfig(
                output_dir=Path(tmp_dir) / "reports",
                report_filename="report.xlsx",
            )

            path = generate_report(analyzed_tickets, config)

            assert path == config.report_path
            assert path.exists()

            wb = load_workbook(path)
            assert wb.sheetnames == ["Analyzed Tickets", "Summary"]

            ws = wb["Analyzed Tickets"]
            assert ws.cell(row=1, column=1).value == "Ticket ID"
            assert ws.cell(row=1, column=7).value == "Mood"
            assert ws.cell(row=2, column=1).value == "2"
            assert ws.max_row == 4
            assert ws.freeze_panes == "A2"

            summary = wb["Summary"]
            assert summary.cell(row=2, column=1).value == "Hardware"
            assert summary.cell(row=2, column=3).value == 1

    def test_generate_empty_report(self):
        """Test an empty ticket list still produces a workbook."""
        with TemporaryDirectory() as tmp_dir:
            config = OutputConfig(output_dir=Path(tmp_dir), report_filename="empty.xlsx")
            path = ExcelReportGenerator(config).generate([])

            wb = load_workbook(path)
            assert wb["Analyzed Tickets"].max_row == 1

    def test_generate_failure_raises(self, tmp_path):
        """Test write failures raise ExcelGeneratorError."""
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x", encoding="utf-8")
        config = OutputConfig(output_dir=blocker, report_filename="report.xlsx")

        with pytest.raises(ExcelGeneratorError):
            generate_report([], config)
