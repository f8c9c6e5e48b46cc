"""
Parser for the Weekly Trout Stocking Report table.

The report's text layer has no delimiters: columns are only separated by
whitespace, and depending on how the PDF was produced that whitespace is
either preserved as wide gaps or collapsed to single spaces. Parsing is
line oriented:

1. The report date range is searched for in the whole text.
2. The table starts after the DATE / COUNTY / WATERBODY header line (or at
   the first line when the header is missing).
3. Each line that starts with a valid date becomes a row; everything else
   (letterhead, footers, notes) is silently dropped.
"""

import re
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from trout_loader.interfaces import RowExtractor
from trout_loader.models import ExtractionResult, StockingRow
from trout_loader.utils.logging import get_logger

logger = get_logger(__name__)

# "Weekly Trout Stocking Report: 12/15/2025 - 12/19/2025"
REPORT_DATES_RX = re.compile(
    r"Weekly\s+Trout\s+Stocking\s+Report:\s*"
    r"(?P<range>\d{1,2}/\d{1,2}/\d{4}\s*-\s*\d{1,2}/\d{1,2}/\d{4})",
    re.IGNORECASE,
)

# "12/15/2025 Forsyth/Gwinnett Lanier Tailwater"
ROW_RX = re.compile(r"^(?P<date>\d{1,2}/\d{1,2}/\d{4})\s+(?P<rest>.+)$")

WIDE_GAP_RX = re.compile(r"\s{2,}")
WHITESPACE_RX = re.compile(r"\s+")

HEADER_TOKENS = ("DATE", "COUNTY", "WATERBODY")
BOILERPLATE_PREFIXES = ("GEORGIA DEPARTMENT", "WILDLIFE RESOURCES")

DATE_FORMAT = "%m/%d/%Y"


def extract_report_dates(full_text: str) -> str:
    """Return the report date range, or an empty string if the title is absent."""
    match = REPORT_DATES_RX.search(full_text or "")
    return match.group("range").strip() if match else ""


def find_header_index(lines: Sequence[str]) -> int:
    """Index of the table header line, -1 when there is none."""
    for index, line in enumerate(lines):
        upper = line.upper()
        if all(token in upper for token in HEADER_TOKENS):
            return index
    return -1


def normalize_whitespace(text: Optional[str]) -> str:
    return WHITESPACE_RX.sub(" ", text or "").strip()


def normalize_date(text: str) -> Optional[str]:
    """
    Validate a M/D/YYYY or MM/DD/YYYY token and return it as MM/DD/YYYY.

    ``strptime``'s ``%m`` and ``%d`` accept both one and two digit values, so
    a single format covers both widths. Returns None for impossible dates
    such as 2/30/2026.
    """
    try:
        parsed = datetime.strptime(text.strip(), DATE_FORMAT)
    except ValueError:
        return None
    # strftime("%Y") does not zero-pad years below 1000 on every platform
    return f"{parsed.month:02d}/{parsed.day:02d}/{parsed.year:04d}"


def split_county_and_waterbody(rest: str) -> Tuple[str, str]:
    """
    Split the text after the date into county and waterbody.

    Wide gaps (2+ whitespace characters) are taken as column boundaries when
    the text layer kept them. Otherwise the county is the first word and the
    waterbody is everything after it.
    """
    parts = [p.strip() for p in WIDE_GAP_RX.split(rest) if p.strip()]
    if len(parts) >= 2:
        return parts[0], " ".join(parts[1:])

    rest = rest.strip()
    county, sep, waterbody = rest.partition(" ")
    if not sep:
        return rest, ""
    return county.strip(), waterbody.strip()


def is_boilerplate(line: str) -> bool:
    upper = line.upper()
    return any(upper.startswith(prefix) for prefix in BOILERPLATE_PREFIXES)


def parse_row(raw_line: str) -> Optional[StockingRow]:
    """Parse a single table line, returning None for anything that is not a row."""
    line = normalize_whitespace(raw_line)
    if not line or is_boilerplate(line):
        return None

    match = ROW_RX.match(line)
    if not match:
        return None

    stocking_date = normalize_date(match.group("date"))
    if stocking_date is None:
        return None

    county, waterbody = split_county_and_waterbody(match.group("rest"))
    return StockingRow(stocking_date=stocking_date, county=county, waterbody=waterbody)


def extract_rows(lines: Sequence[str]) -> List[StockingRow]:
    """Parse every table row that follows the header line."""
    header_index = find_header_index(lines)
    if header_index < 0:
        logger.debug("Table header not found, scanning all lines")

    rows = []
    for raw_line in lines[header_index + 1:]:
        row = parse_row(raw_line)
        if row is not None:
            rows.append(row)
    return rows


def extract_report(lines: Iterable[str]) -> ExtractionResult:
    """Extract the report date range and stocking rows from report lines."""
    lines = list(lines)
    report_dates = extract_report_dates("\n".join(lines))
    rows = extract_rows(lines)
    return ExtractionResult(report_dates=report_dates, rows=rows)


class ReportParser(RowExtractor):
    """Row extractor for the Weekly Trout Stocking Report layout."""

    def extract(self, lines: Iterable[str]) -> ExtractionResult:
        lines = list(lines)
        result = extract_report(lines)
        logger.info(
            "Parsed report lines",
            extra={
                "line_count": len(lines),
                "report_dates": result.report_dates,
                "row_count": len(result.rows),
            },
        )
        return result
