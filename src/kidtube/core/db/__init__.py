"""Database module for bookmark storage."""

from .connection import DatabaseConnection
from .exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateRecordError,
    MigrationError,
    QueryError,
)
from .migrator import Migrator
from .models import BookmarkRecord, ChildProfile
from .repository import BookmarkRepository

__all__ = [
    "BookmarkRepository",
    "BookmarkRecord",
    "ChildProfile",
    "DatabaseConnection",
    "Migrator",
    "DatabaseError",
    "DatabaseConnectionError",
    "MigrationError",
    "DuplicateRecordError",
    "QueryError",
]
