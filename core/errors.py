"""
Error types for Sheets Map Creator.

A failed refresh never takes the map down: callers catch these, log them and keep
whatever layer was displayed before.

Classes:
    SheetsMapError: Base class for all application errors
    GeometryParseError: Geometry cell is not valid JSON or not a geometry
    CoordinateParseError: Latitude/longitude cell is not a number
    SheetFetchError: Remote sheet could not be downloaded
"""

from typing import Optional


class SheetsMapError(Exception):
    """Base class for errors raised by Sheets Map Creator."""


class GeometryParseError(SheetsMapError, ValueError):
    """
    Raised when a geometry value cannot be parsed.

    ``row_number`` is 1-based over the data rows (the header is not counted) and is
    None when the error comes from normalizing a value outside of a table.
    """

    def __init__(self, message: str, row_number: Optional[int] = None,
                 column: Optional[str] = None):
        self.row_number = row_number
        self.column = column
        if row_number is not None:
            message = f"Row {row_number}, column '{column}': {message}"
        super().__init__(message)


class CoordinateParseError(SheetsMapError, ValueError):
    """Raised when a point row has a latitude or longitude that is not a number."""

    def __init__(self, message: str, row_number: Optional[int] = None,
                 column: Optional[str] = None):
        self.row_number = row_number
        self.column = column
        if row_number is not None:
            message = f"Row {row_number}, column '{column}': {message}"
        super().__init__(message)


class SheetFetchError(SheetsMapError):
    """Raised when a published sheet cannot be downloaded."""

    def __init__(self, message: str, url: str):
        self.url = url
        super().__init__(f"{message} ({url})")
