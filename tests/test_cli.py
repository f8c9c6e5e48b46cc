"""
Tests for the trout-loader command-line interface.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from tests.conftest import build_pdf
from trout_loader.cli import app
from trout_loader.config import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("trout_loader.cli.setup_logging") as mock_setup:
        yield mock_setup


class TestRunCommand:
    """Test the run command's exit codes."""

    def test_missing_configuration_exits_1(self):
        with patch("trout_loader.cli.create_run") as mock_create:
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "PdfUrl" in result.output
        mock_create.assert_not_called()

    def test_success_exit_code(self, monkeypatch):
        monkeypatch.setenv("PDF_URL", "http://example.test/report.pdf")
        monkeypatch.setenv("DATABASE_URL", "postgresql://loader@db/trout")
        mock_run = MagicMock()
        mock_run.execute = AsyncMock(return_value=0)

        with patch("trout_loader.cli.create_run", return_value=mock_run) as mock_create:
            result = runner.invoke(app, ["run", "--log-level", "debug"])

        assert result.exit_code == 0
        settings = mock_create.call_args.args[0]
        assert settings.pdf_url == "http://example.test/report.pdf"
        assert settings.log_level == "DEBUG"
        mock_run.execute.assert_awaited_once()

    def test_failed_run_exit_code(self, monkeypatch):
        monkeypatch.setenv("PDF_URL", "http://example.test/report.pdf")
        monkeypatch.setenv("DATABASE_URL", "postgresql://loader@db/trout")
        mock_run = MagicMock()
        mock_run.execute = AsyncMock(return_value=1)

        with patch("trout_loader.cli.create_run", return_value=mock_run):
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 1

    def test_config_file_option(self, temp_dir):
        config = temp_dir / "loader.json"
        config.write_text(
            '{"PdfUrl": "http://example.test/r.pdf", "ConnectionStrings": {"Sql": "postgresql://x"}}',
            encoding="utf-8",
        )
        mock_run = MagicMock()
        mock_run.execute = AsyncMock(return_value=0)

        with patch("trout_loader.cli.create_run", return_value=mock_run) as mock_create:
            result = runner.invoke(app, ["run", "--config", str(config)])

        assert result.exit_code == 0
        assert mock_create.call_args.args[0].database_url == "postgresql://x"

    def test_run_uses_shared_settings(self, monkeypatch):
        monkeypatch.setenv("PDF_URL", "http://example.test/report.pdf")
        monkeypatch.setenv("DATABASE_URL", "postgresql://loader@db/trout")
        mock_run = MagicMock()
        mock_run.execute = AsyncMock(return_value=0)

        with patch("trout_loader.cli.create_run", return_value=mock_run) as mock_create:
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert mock_create.call_args.args[0] is get_settings()

    def test_missing_config_file(self, temp_dir):
        result = runner.invoke(app, ["run", "--config", str(temp_dir / "missing.json")])

        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestExtractCommand:
    """Test the read-only preview command."""

    def test_extract_local_pdf(self, temp_dir, report_pdf_bytes):
        pdf_path = temp_dir / "report.pdf"
        pdf_path.write_bytes(report_pdf_bytes)

        result = runner.invoke(app, ["extract", str(pdf_path)])

        assert result.exit_code == 0
        assert "12/15/2025 - 12/19/2025" in result.output
        assert "Lanier Tailwater" in result.output
        assert "Rows: 3" in result.output

    def test_extract_without_header(self, temp_dir):
        pdf_path = temp_dir / "other.pdf"
        pdf_path.write_bytes(build_pdf("Some other document"))

        result = runner.invoke(app, ["extract", str(pdf_path)])

        assert result.exit_code == 1
        assert "Could not find 'Weekly Trout Stocking Report: ...' header" in result.output

    def test_extract_missing_file(self, temp_dir):
        result = runner.invoke(app, ["extract", str(temp_dir / "missing.pdf")])

        assert result.exit_code == 1
        assert "PDF not found" in result.output
