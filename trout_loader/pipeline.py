"""
Run command for the weekly trout stocking loader.

Downloads the configured report, extracts its rows and inserts the ones not
already stored. The command owns the operator-facing output and the process
exit status; the individual capabilities are injected so they can be swapped
out in tests.
"""

import traceback
import uuid
from typing import Optional

from rich.console import Console

from trout_loader.config import Settings
from trout_loader.database.connection_manager import DatabaseConnectionManager
from trout_loader.database.writer import WeeklyTroutStockingWriter
from trout_loader.interfaces import PDFFetcher, RowExtractor, RowWriter
from trout_loader.pdf_processor.downloader import PDFDownloader
from trout_loader.pdf_processor.report_parser import ReportParser
from trout_loader.pdf_processor.text_layer import PDFTextReader
from trout_loader.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

MISSING_HEADER_MESSAGE = "Could not find 'Weekly Trout Stocking Report: ...' header in extracted text."


class TroutStockingRun:
    """One start-to-finish ingestion of the weekly report."""

    def __init__(
        self,
        settings: Settings,
        fetcher: PDFFetcher,
        text_reader: PDFTextReader,
        extractor: RowExtractor,
        writer: RowWriter,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ) -> None:
        self.settings = settings
        self.fetcher = fetcher
        self.text_reader = text_reader
        self.extractor = extractor
        self.writer = writer
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    async def execute(self) -> int:
        """
        Run the pipeline.

        Returns:
            0 on success, 1 when the report header is missing or any step fails
        """
        with LogContext(run_id=uuid.uuid4().hex[:12]):
            logger.info("Application starting")
            try:
                return await self._run()
            except Exception as e:
                logger.critical("Application failed", exc_info=True)
                self.error_console.print(
                    "".join(traceback.format_exception(type(e), e, e.__traceback__)).rstrip(),
                    markup=False,
                    highlight=False,
                    emoji=False,
                    soft_wrap=True,
                )
                return EXIT_FAILURE

    async def _run(self) -> int:
        logger.info("Configuration loaded", extra={"pdf_url": self.settings.pdf_url})

        logger.info("Downloading PDF")
        pdf_bytes = await self.fetcher.download(self.settings.pdf_url)

        logger.info("Extracting PDF rows")
        lines = await self.text_reader.aread_lines(pdf_bytes)
        result = self.extractor.extract(lines)

        if not result.found_report_dates:
            logger.error("Could not find report header date range")
            self.error_console.print(MISSING_HEADER_MESSAGE, markup=False, highlight=False, soft_wrap=True)
            return EXIT_FAILURE

        logger.info(
            "Extraction complete",
            extra={"report_dates": result.report_dates, "row_count": len(result.rows)},
        )

        inserted = await self.writer.insert_new_rows(result.report_dates, result.rows)

        self.console.print(f"Inserted new rows: {inserted}", markup=False, highlight=False)
        logger.info("Application completed successfully", extra={"inserted": inserted})
        return EXIT_OK


def create_run(
    settings: Settings,
    console: Optional[Console] = None,
    error_console: Optional[Console] = None,
) -> TroutStockingRun:
    """Wire the production capabilities from settings."""
    connection_manager = DatabaseConnectionManager(settings.database_url)
    return TroutStockingRun(
        settings=settings,
        fetcher=PDFDownloader(
            user_agent=settings.user_agent,
            timeout_seconds=settings.http_timeout_seconds,
        ),
        text_reader=PDFTextReader(),
        extractor=ReportParser(),
        writer=WeeklyTroutStockingWriter(connection_manager, table=settings.stocking_table),
        console=console,
        error_console=error_console,
    )
