"""
Weekly trout stocking loader.

Extracts the stocking table from the Georgia Weekly Trout Stocking Report PDF
and loads new rows into a PostgreSQL table.
"""

__version__ = "1.0.0"
