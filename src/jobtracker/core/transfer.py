"""JSON import and export of the record collection."""

import json
from typing import Any, Callable, List, Sequence

from pydantic import ValidationError

from ..database.models import ApplicationRecord


class ImportFormatError(Exception):
    """Raised when an import payload is not a usable record collection."""
    pass


def export_json(records: Sequence[ApplicationRecord]) -> str:
    """Serialize records in the same row shape used for local storage."""
    return json.dumps([record.to_dict() for record in records], indent=2)


def parse_import(payload: str, next_id: Callable[[], int]) -> List[ApplicationRecord]:
    """Parse an exported collection.

    Every element must carry a non-empty company and position. Elements
    without a usable integer id, or whose id repeats an earlier one, get a
    fresh id from ``next_id``.
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError) as e:
        raise ImportFormatError("Error parsing JSON file.") from e

    if not isinstance(data, list) or not all(_has_required_fields(item) for item in data):
        raise ImportFormatError("Invalid JSON file format.")

    records = []
    seen_ids = set()
    for item in data:
        fields = dict(item)
        record_id = fields.get("id")
        if not isinstance(record_id, int) or isinstance(record_id, bool) or record_id in seen_ids:
            fields["id"] = next_id()
        try:
            record = ApplicationRecord.model_validate(fields)
        except ValidationError as e:
            raise ImportFormatError("Invalid JSON file format.") from e
        seen_ids.add(record.id)
        records.append(record)

    return records


def _has_required_fields(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    company = item.get("company")
    position = item.get("position")
    return isinstance(company, str) and bool(company.strip()) and isinstance(position, str) and bool(position.strip())
