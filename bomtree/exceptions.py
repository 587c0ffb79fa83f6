"""
Custom exceptions for bomtree.
Provides specific error types for ingestion and explosion failures.
"""

from typing import List, Optional


class BomTreeError(Exception):
    """Base exception for all bomtree errors."""
    pass


class IngestionError(BomTreeError, ValueError):
    """Raised when raw rows cannot be turned into records."""
    pass


class MissingColumnError(IngestionError):
    """Raised when a required column is absent from an ingested table."""
    def __init__(self, message: str, columns: Optional[List[str]] = None, table: str = None):
        super().__init__(message)
        self.columns = list(columns or [])
        self.table = table


class UnsupportedFileError(IngestionError):
    """Raised when no adapter or export format matches a file."""
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class NoRootFoundError(BomTreeError, ValueError):
    """Raised when every parent id also appears as a child id."""
    def __init__(self, message: str, parent_count: int = 0):
        super().__init__(message)
        self.parent_count = parent_count
