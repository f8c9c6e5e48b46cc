"""
Core data models for the trout stocking loader.

This module defines the Pydantic models passed between the extractor and the
writer.
"""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class StockingRow(BaseModel):
    """One stocking event recovered from the report table."""

    model_config = ConfigDict(frozen=True)

    stocking_date: str = Field(..., description="Stocking date as MM/DD/YYYY")
    county: str = Field(..., description="County label, may hold several counties joined by '/'")
    waterbody: str = Field("", description="Water body label")

    @property
    def key(self) -> Tuple[str, str, str]:
        """Natural identity used to deduplicate rows in the store."""
        return (self.stocking_date, self.county, self.waterbody)


class ExtractionResult(BaseModel):
    """Report identity plus the rows parsed from one document."""

    model_config = ConfigDict(frozen=True)

    report_dates: str = Field("", description="Report date range, empty when not found")
    rows: List[StockingRow] = Field(default_factory=list)

    @property
    def found_report_dates(self) -> bool:
        return bool(self.report_dates.strip())
