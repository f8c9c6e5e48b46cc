"""
HTTP retrieval of the stocking report PDF.

The downloader fetches the report with aiohttp and only hands back content
that starts with the %PDF signature; anything else (an HTML error page, an
empty body) is rejected before it reaches the text layer.
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

import aiohttp

from trout_loader.interfaces import PDFFetcher
from trout_loader.utils.errors import InvalidPDFError, PDFDownloadError
from trout_loader.utils.logging import get_logger, log_performance

logger = get_logger(__name__)

PDF_SIGNATURE = b"%PDF"
DEFAULT_USER_AGENT = "GaTroutStockingLoader/1.0"


def looks_like_pdf(content: bytes) -> bool:
    return len(content) >= len(PDF_SIGNATURE) and content[: len(PDF_SIGNATURE)] == PDF_SIGNATURE


class PDFDownloader(PDFFetcher):
    """Download report PDFs over HTTP."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = 60.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """
        Initialize the downloader.

        Args:
            user_agent: User-Agent header sent with every request
            timeout_seconds: Total timeout for one download
            session: Optional externally managed session; when omitted a
                session is opened and closed per download
        """
        self.user_agent = user_agent
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session

    @log_performance
    async def download(self, url: str) -> bytes:
        """
        Download the report at ``url``.

        Returns:
            The PDF bytes

        Raises:
            InvalidPDFError: If the response body is not a PDF
            PDFDownloadError: If the request fails or returns an error status
        """
        try:
            if self._session is not None:
                content = await self._fetch(self._session, url)
            else:
                async with aiohttp.ClientSession(
                    headers={"User-Agent": self.user_agent},
                    timeout=self.timeout,
                ) as session:
                    content = await self._fetch(session, url)

            if not looks_like_pdf(content):
                raise InvalidPDFError()

        except InvalidPDFError:
            logger.error("Failed to download PDF", extra={"url": url}, exc_info=True)
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Failed to download PDF", extra={"url": url}, exc_info=True)
            raise PDFDownloadError(url, str(e) or type(e).__name__) from e

        logger.info("PDF downloaded", extra={"url": url, "size_bytes": len(content)})
        return content

    async def download_to_file(self, url: str, path: Union[str, Path]) -> Path:
        """Download the report and write the validated bytes to ``path``."""
        content = await self.download(url)
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        logger.debug("PDF saved", extra={"path": str(path)})
        return path

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> bytes:
        async with session.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        ) as response:
            response.raise_for_status()
            return await response.read()
