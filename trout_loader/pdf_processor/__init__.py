"""
PDF processing package: report download, text layer decoding and table parsing.
"""

from .downloader import PDFDownloader
from .report_parser import ReportParser, extract_report
from .text_layer import PDFTextReader

__all__ = [
    'PDFDownloader',
    'PDFTextReader',
    'ReportParser',
    'extract_report',
]
