"""
Shared fixtures for the trout stocking loader tests.
"""

import io
from pathlib import Path
from typing import List

import fitz  # PyMuPDF
import pytest
from rich.console import Console

from trout_loader.config import reset_settings

CONFIG_ENV_VARS = [
    "PDF_URL",
    "DATABASE_URL",
    "STOCKING_TABLE",
    "HTTP_USER_AGENT",
    "HTTP_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "LOG_FILE",
    "DEV_MODE",
    "TROUT_CONFIG_FILE",
]

REPORT_LINES = [
    "GEORGIA DEPARTMENT OF NATURAL RESOURCES",
    "WILDLIFE RESOURCES DIVISION",
    "Weekly Trout Stocking Report: 12/15/2025 - 12/19/2025",
    "DATE      COUNTY             WATERBODY",
    "12/15/2025 Forsyth  Lanier Tailwater",
    "12/15/2025   Forsyth/Gwinnett   Chattahoochee River",
    "GEORGIA DEPARTMENT OF NATURAL RESOURCES",
    "12/16/2025 Hall  Chattahoochee",
    "Stocking is subject to weather and water conditions.",
    "",
    "12/17/2025 Rabun Tallulah River",
]


class FakeConnection:
    """
    In-memory stand-in for an asyncpg connection.

    Evaluates the writer's conditional insert: a row is stored unless one with
    the same (stocking_date, county, waterbody) already exists.
    """

    def __init__(self, existing=None, fail_on_call: int = 0) -> None:
        self.records: List[tuple] = list(existing or [])
        self.statements: List[str] = []
        self.fail_on_call = fail_on_call
        self.closed = False

    async def execute(self, query: str, *args) -> str:
        self.statements.append(query)
        if self.fail_on_call and len(self.statements) == self.fail_on_call:
            raise ConnectionResetError("connection lost")

        report_dates, stocking_date, county, waterbody = args
        if any(r[1:] == (stocking_date, county, waterbody) for r in self.records):
            return "INSERT 0 0"
        self.records.append((report_dates, stocking_date, county, waterbody))
        return "INSERT 0 1"

    async def close(self) -> None:
        self.closed = True


def build_pdf(*pages: str) -> bytes:
    """Create a PDF with one page of plain text per argument."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((36, 72), text, fontsize=9)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch, tmp_path):
    """Isolate every test from the host environment and any appsettings.json."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary directory for test files."""
    return tmp_path


@pytest.fixture
def report_lines() -> List[str]:
    return list(REPORT_LINES)


@pytest.fixture
def report_pdf_bytes() -> bytes:
    return build_pdf(
        "Weekly Trout Stocking Report: 12/15/2025 - 12/19/2025\n"
        "DATE COUNTY WATERBODY\n"
        "12/15/2025 Forsyth Lanier Tailwater\n"
        "12/16/2025 Hall Chattahoochee",
        "GEORGIA DEPARTMENT OF NATURAL RESOURCES\n"
        "12/17/2025 Rabun Tallulah River",
    )


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def console_pair():
    """Rich consoles writing to in-memory buffers (stdout, stderr)."""
    out = Console(file=io.StringIO(), width=200)
    err = Console(file=io.StringIO(), width=200)
    return out, err
