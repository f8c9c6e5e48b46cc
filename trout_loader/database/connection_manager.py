"""
Database connection management for the stocking store.

Each loader run opens a single dedicated asyncpg connection, uses it
exclusively and closes it on every exit path. There is no pool and no retry:
a failed run is expected to be re-invoked by its scheduler.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from trout_loader.utils.errors import DatabaseConnectionError
from trout_loader.utils.logging import get_logger

logger = get_logger(__name__)


class DatabaseConnectionManager:
    """Open scoped connections to the stocking store."""

    def __init__(
        self,
        connection_string: str,
        connection_timeout: float = 30,
        command_timeout: Optional[float] = 60,
        application_name: str = "trout_stocking_loader",
    ) -> None:
        """
        Initialize connection manager.

        Args:
            connection_string: PostgreSQL DSN
            connection_timeout: Seconds to wait for the connection to open
            command_timeout: Default per-statement timeout in seconds
            application_name: Reported to the server in pg_stat_activity
        """
        self.connection_string = connection_string
        self.connection_timeout = connection_timeout
        self.command_timeout = command_timeout
        self.application_name = application_name

    async def connect(self) -> asyncpg.Connection:
        """
        Open a new connection.

        Raises:
            DatabaseConnectionError: If the server is unreachable or rejects the login
        """
        try:
            conn = await asyncpg.connect(
                self.connection_string,
                timeout=self.connection_timeout,
                command_timeout=self.command_timeout,
                server_settings={"application_name": self.application_name},
            )
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error(f"Failed to open database connection: {e}")
            raise DatabaseConnectionError(f"Failed to open database connection: {e}") from e

        logger.info("Database connection opened")
        return conn

    @asynccontextmanager
    async def get_connection(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Open a connection for the duration of the block.

        Usage:
            async with manager.get_connection() as conn:
                await conn.execute(...)
        """
        conn = await self.connect()
        try:
            yield conn
        finally:
            await conn.close()
            logger.debug("Database connection closed")
