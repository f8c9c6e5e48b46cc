"""
PDF text layer extraction using PyMuPDF.

This module turns a stocking report PDF (raw bytes or a file on disk) into
the ordered list of text lines the report parser consumes.
"""

import asyncio
from pathlib import Path
from typing import List, Union

import fitz  # PyMuPDF

from trout_loader.utils.errors import PDFCorruptedError, PDFExtractionError
from trout_loader.utils.logging import get_logger, log_performance

logger = get_logger(__name__)


def split_lines(text: str) -> List[str]:
    """Split page text on any newline convention, dropping trailing whitespace."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line.rstrip() for line in normalized.split("\n")]


class PDFTextReader:
    """Read the text layer of a PDF as lines, page by page."""

    @log_performance
    def read_lines(self, pdf_bytes: bytes) -> List[str]:
        """
        Extract all text lines from an in-memory PDF.

        Args:
            pdf_bytes: Raw PDF document

        Returns:
            Lines of every page, in page order

        Raises:
            PDFCorruptedError: If the bytes cannot be opened as a PDF
            PDFExtractionError: For other extraction errors
        """
        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except (fitz.FileDataError, RuntimeError, ValueError) as e:
            logger.error("Corrupted PDF stream")
            raise PDFCorruptedError(f"PDF stream is corrupted: {str(e)}")

        with doc:
            return self._read_document(doc)

    def read_lines_from_file(self, file_path: Union[str, Path]) -> List[str]:
        """
        Extract all text lines from a PDF file.

        Raises:
            PDFExtractionError: If the file does not exist or cannot be read
            PDFCorruptedError: If the file is not a valid PDF
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            raise PDFExtractionError(f"PDF not found: {file_path}", {"path": str(file_path)})

        logger.info(f"Reading PDF: {file_path.name}")
        try:
            pdf_bytes = file_path.read_bytes()
        except OSError as e:
            raise PDFExtractionError(f"Failed to read PDF: {str(e)}", {"path": str(file_path)})

        return self.read_lines(pdf_bytes)

    async def aread_lines(self, pdf_bytes: bytes) -> List[str]:
        """Run :meth:`read_lines` in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.read_lines, pdf_bytes)

    def _read_document(self, doc: "fitz.Document") -> List[str]:
        lines: List[str] = []
        try:
            for page in doc:
                lines.extend(split_lines(page.get_text()))
        except RuntimeError as e:
            logger.error(f"Failed to extract PDF text: {str(e)}")
            raise PDFExtractionError(f"Failed to extract PDF text: {str(e)}")

        logger.info(
            f"Extracted {len(lines)} lines from {doc.page_count} pages",
            extra={"page_count": doc.page_count, "line_count": len(lines)},
        )
        return lines

