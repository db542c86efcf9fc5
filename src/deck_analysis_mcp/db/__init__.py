"""Database module for cached analyses and analysis history."""

from .cache import AnalysisCache, InMemoryAnalysisCache
from .database import Database, connect, get_database, get_db_connection

__all__ = [
    "AnalysisCache",
    "Database",
    "InMemoryAnalysisCache",
    "connect",
    "get_database",
    "get_db_connection",
]
