"""Core sync engine package."""

from .sync_coordinator import (
    SyncCoordinator,
    SyncContext,
    SyncOutcome,
    SyncResult,
    SyncError,
    NotConfiguredError,
    OfflineError
)
from .identifiers import IdGenerator
from .messages import MessageBoard
from .queries import filter_applications
from .transfer import ImportFormatError, export_json, parse_import
from .validation import RecordValidationError, validate_application

__all__ = [
    "SyncCoordinator",
    "SyncContext",
    "SyncOutcome",
    "SyncResult",
    "SyncError",
    "NotConfiguredError",
    "OfflineError",
    "IdGenerator",
    "MessageBoard",
    "filter_applications",
    "ImportFormatError",
    "export_json",
    "parse_import",
    "RecordValidationError",
    "validate_application"
]
