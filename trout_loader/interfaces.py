"""
Abstract capability interfaces for the stocking report pipeline.

The run command depends only on these contracts, so each capability can be
replaced independently in tests or alternative deployments.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from trout_loader.models import ExtractionResult, StockingRow


class PDFFetcher(ABC):
    """Retrieves the raw report document."""

    @abstractmethod
    async def download(self, url: str) -> bytes:
        """
        Download the report and return its bytes.

        Implementations must reject content that does not begin with the
        ``%PDF`` signature.

        Raises:
            InvalidPDFError: If the content is not a PDF
            PDFDownloadError: If the request fails
        """
        pass


class RowExtractor(ABC):
    """Turns decoded report lines into the report identity and its rows."""

    @abstractmethod
    def extract(self, lines: Iterable[str]) -> ExtractionResult:
        """
        Parse report lines.

        Never raises for string input; an empty ``report_dates`` signals that
        the report header could not be located.
        """
        pass


class RowWriter(ABC):
    """Persists stocking rows exactly once across repeated runs."""

    @abstractmethod
    async def insert_new_rows(self, report_dates: str, rows: Sequence[StockingRow]) -> int:
        """
        Insert rows not already present in the store.

        Returns:
            Number of rows newly inserted
        """
        pass
