"""
Database package for the stocking store.

This package provides scoped connection management and the idempotent row
writer.
"""

from .connection_manager import DatabaseConnectionManager
from .writer import WeeklyTroutStockingWriter

__all__ = [
    'DatabaseConnectionManager',
    'WeeklyTroutStockingWriter',
]
