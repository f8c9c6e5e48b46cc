"""
Idempotent writer for weekly trout stocking rows.

Every row is written with a single INSERT ... SELECT ... WHERE NOT EXISTS
statement keyed on (stocking_date, county, waterbody). The report date range
is stored with the row but is not part of the key, so an event repeated in
overlapping weekly reports is inserted only once. Statements autocommit one
by one; a failure part-way leaves earlier rows in place and re-running is
safe.
"""

from typing import Optional, Sequence

from trout_loader.database.connection_manager import DatabaseConnectionManager
from trout_loader.interfaces import RowWriter
from trout_loader.models import StockingRow
from trout_loader.utils.logging import get_logger, log_performance

logger = get_logger(__name__)

DEFAULT_TABLE = "weekly_trout_stocking"

INSERT_SQL_TEMPLATE = """
INSERT INTO {table} (report_dates, stocking_date, county, waterbody)
SELECT $1::text, $2::text, $3::text, $4::text
WHERE NOT EXISTS
(
    SELECT 1
    FROM {table}
    WHERE stocking_date = $2
      AND county        = $3
      AND waterbody     = $4
)
"""


def build_insert_sql(table: str = DEFAULT_TABLE) -> str:
    # Table name is validated by Settings.validate(); values are always bound parameters
    return INSERT_SQL_TEMPLATE.format(table=table)


def affected_rows(status: Optional[str]) -> int:
    """Row count from an asyncpg command tag such as ``"INSERT 0 1"``."""
    if not status:
        return 0
    try:
        return int(status.rsplit(" ", 1)[-1])
    except ValueError:
        return 0


class WeeklyTroutStockingWriter(RowWriter):
    """Write stocking rows that are not already in the store."""

    def __init__(self, connection_manager: DatabaseConnectionManager, table: str = DEFAULT_TABLE) -> None:
        self.connection_manager = connection_manager
        self.table = table
        self.insert_sql = build_insert_sql(table)

    @log_performance
    async def insert_new_rows(self, report_dates: str, rows: Sequence[StockingRow]) -> int:
        """
        Conditionally insert each row, in order.

        Args:
            report_dates: Report date range stored alongside each row
            rows: Rows parsed from the report

        Returns:
            Number of rows newly inserted

        Raises:
            DatabaseConnectionError: If the store cannot be reached
            asyncpg.PostgresError: If a statement fails; earlier rows stay committed
        """
        async with self.connection_manager.get_connection() as conn:
            inserted = await self.insert_with_connection(conn, report_dates, rows)

        logger.info("Insert complete", extra={"inserted": inserted, "row_count": len(rows)})
        return inserted

    async def insert_with_connection(self, conn, report_dates: str, rows: Sequence[StockingRow]) -> int:
        """Insert using an already open connection."""
        inserted = 0
        for row in rows:
            logger.debug(
                "Inserting row",
                extra={
                    "stocking_date": row.stocking_date,
                    "county": row.county,
                    "waterbody": row.waterbody,
                },
            )
            status = await conn.execute(
                self.insert_sql,
                report_dates,
                row.stocking_date,
                row.county,
                row.waterbody,
            )
            inserted += affected_rows(status)
        return inserted
