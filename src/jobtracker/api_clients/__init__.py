"""API clients package for the remote spreadsheet backend."""

from .base import (
    BaseSheetClient,
    Credentials,
    RemoteErrorKind,
    RemoteUnavailableError
)

from .rows import (
    HEADER_ROW,
    record_to_row,
    records_to_values,
    row_to_fields,
    rows_to_records
)

from .google_sheets import GoogleSheetsClient

__all__ = [
    # Base classes and exceptions
    "BaseSheetClient",
    "Credentials",
    "RemoteErrorKind",
    "RemoteUnavailableError",

    # Row mapping
    "HEADER_ROW",
    "record_to_row",
    "records_to_values",
    "row_to_fields",
    "rows_to_records",

    # Client implementations
    "GoogleSheetsClient"
]
