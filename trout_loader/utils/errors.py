"""
Custom exceptions for the trout stocking loader.

This module defines the exceptions raised by the fetch, extraction, storage
and configuration layers so the run boundary can report them uniformly.
"""

from typing import Any, Optional


class TroutLoaderException(Exception):
    """Base exception for all loader-specific errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# PDF Processing Exceptions
# =============================================================================


class PDFProcessingError(TroutLoaderException):
    """Base exception for PDF processing errors."""

    pass


class PDFDownloadError(PDFProcessingError):
    """The report could not be downloaded."""

    def __init__(self, url: str, reason: str) -> None:
        """Initialize with the failing URL."""
        message = f"Failed to download PDF from '{url}': {reason}"
        super().__init__(message, {"url": url})


class InvalidPDFError(PDFProcessingError):
    """Downloaded content is missing the %PDF signature."""

    def __init__(self, message: str = "Downloaded content does not appear to be a PDF.") -> None:
        super().__init__(message)


class PDFExtractionError(PDFProcessingError):
    """Error during PDF text extraction."""

    pass


class PDFCorruptedError(PDFProcessingError):
    """PDF file is corrupted or invalid."""

    pass


# =============================================================================
# Database Exceptions
# =============================================================================


class DatabaseError(TroutLoaderException):
    """Base exception for stocking store operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Failed to connect to the stocking store."""

    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(TroutLoaderException):
    """Configuration error."""

    pass


class MissingConfigurationError(ConfigurationError):
    """Required configuration missing."""

    def __init__(self, config_names: list[str]) -> None:
        """Initialize with the names of the missing settings."""
        message = "appsettings.json is missing PdfUrl or ConnectionStrings:Sql"
        super().__init__(message, {"config_names": config_names})
