"""Validation for records entering the store through the add flow."""

import re
from datetime import date
from typing import List

from pydantic import ValidationError

from ..database.models import ApplicationCreate


ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


class RecordValidationError(Exception):
    """Raised when a new record is missing required fields."""

    def __init__(self, errors: List[str]):
        super().__init__(", ".join(errors))
        self.errors = errors


def validate_application(application: ApplicationCreate) -> List[str]:
    """Return human-readable problems with ``application``; empty when valid."""
    errors = []
    if not (application.company or "").strip():
        errors.append("Company name is required")
    if not (application.position or "").strip():
        errors.append("Position is required")
    if not application.date:
        errors.append("Date is required")
    elif not _is_calendar_date(application.date):
        errors.append("Date must be in YYYY-MM-DD format")
    return errors


def _is_calendar_date(value: str) -> bool:
    if not ISO_DATE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def ensure_valid(application: ApplicationCreate) -> None:
    errors = validate_application(application)
    if errors:
        raise RecordValidationError(errors)


def messages_from_validation_error(error: ValidationError) -> List[str]:
    """Flatten a pydantic error into the same kind of messages the add flow reports."""
    messages = []
    for item in error.errors():
        cause = (item.get("ctx") or {}).get("error")
        if item["type"] == "value_error" and cause is not None:
            messages.append(str(cause))
        else:
            field = ".".join(str(part) for part in item["loc"]) or "value"
            messages.append(f"Invalid {field}: {item['msg']}")
    return messages

