"""Local-first job application tracker synced with Google Sheets."""

__version__ = "1.0.0"
