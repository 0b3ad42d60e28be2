"""
Database module initialization.
Exports database components for use throughout the application.
"""

from wagerboard.database.base import Base
from wagerboard.database.connection import Database

__all__ = [
    "Base",
    "Database",
]
