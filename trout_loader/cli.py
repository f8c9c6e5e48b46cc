"""
Command-line interface for the weekly trout stocking loader.

``trout-loader run`` performs a full ingestion run against the configured
store; ``trout-loader extract`` previews what a report would yield without
writing anything.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from trout_loader.config import Settings, get_settings
from trout_loader.pdf_processor.downloader import PDFDownloader
from trout_loader.pdf_processor.report_parser import ReportParser
from trout_loader.pdf_processor.text_layer import PDFTextReader
from trout_loader.pipeline import EXIT_FAILURE, MISSING_HEADER_MESSAGE, create_run
from trout_loader.utils.errors import ConfigurationError, TroutLoaderException
from trout_loader.utils.logging import setup_logging

app = typer.Typer(
    name="trout-loader",
    help="Load the Georgia Weekly Trout Stocking Report into a PostgreSQL table",
    add_completion=False,
)
console = Console()
error_console = Console(stderr=True)


def _load_settings(config_file: Optional[Path]) -> Settings:
    try:
        return get_settings(config_file)
    except ConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)


@app.command()
def run(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to an appsettings.json file (environment variables take precedence)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Download the report and insert rows not already stored."""
    settings = _load_settings(config_file)
    if log_level:
        settings.log_level = log_level.upper()

    setup_logging(
        log_level=settings.log_level,
        log_file_path=settings.get_log_file_path(),
        dev_mode=settings.dev_mode,
    )

    try:
        settings.validate()
    except ConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)

    exit_code = asyncio.run(create_run(settings, console=console, error_console=error_console).execute())
    raise typer.Exit(exit_code)


@app.command()
def extract(
    source: str = typer.Argument(..., help="Local PDF path or http(s) URL of a report"),
    save_pdf: Optional[Path] = typer.Option(
        None,
        "--save-pdf",
        help="When SOURCE is a URL, also save the downloaded PDF here",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
):
    """Preview the rows a report would produce, without touching the store."""
    setup_logging(log_level=log_level)

    reader = PDFTextReader()
    try:
        if source.lower().startswith(("http://", "https://")):
            downloader = PDFDownloader()
            if save_pdf:
                saved = asyncio.run(downloader.download_to_file(source, save_pdf))
                lines = reader.read_lines_from_file(saved)
            else:
                lines = reader.read_lines(asyncio.run(downloader.download(source)))
        else:
            lines = reader.read_lines_from_file(source)
    except TroutLoaderException as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)

    result = ReportParser().extract(lines)

    if not result.found_report_dates:
        error_console.print(MISSING_HEADER_MESSAGE, markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(EXIT_FAILURE)

    console.print(f"Report dates: {result.report_dates}", markup=False, highlight=False)

    table = Table(title="Weekly Trout Stocking Report")
    table.add_column("Date", style="cyan")
    table.add_column("County")
    table.add_column("Waterbody")

    for row in result.rows:
        table.add_row(row.stocking_date, row.county, row.waterbody)

    console.print(table)
    console.print(f"Rows: {len(result.rows)}", markup=False, highlight=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
