"""Mapping between spreadsheet rows and application records."""

from typing import Callable, Iterable, List, Sequence

from ..database.models import ApplicationRecord, ApplicationStatus


HEADER_ROW = ["Company", "Position", "Date", "Status", "Source", "Notes", "Salary"]

FIELD_ORDER = ["company", "position", "date", "status", "source", "notes", "salary"]


def record_to_row(record: ApplicationRecord) -> List[str]:
    """Seven cells in header order, empty fields included."""
    return [
        record.company,
        record.position,
        record.date,
        record.status.value,
        record.source,
        record.notes,
        record.salary or "",
    ]


def records_to_values(records: Iterable[ApplicationRecord]) -> List[List[str]]:
    """Full value matrix for an overwrite: header first, then one row per record."""
    return [list(HEADER_ROW)] + [record_to_row(record) for record in records]


def _cell(row: Sequence, index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    value = row[index]
    return value if isinstance(value, str) else str(value)


def row_to_fields(row: Sequence) -> dict:
    """Positional cells to record fields; missing trailing cells become ''."""
    fields = {name: _cell(row, index) for index, name in enumerate(FIELD_ORDER)}
    fields["status"] = ApplicationStatus.parse(fields["status"])
    return fields


def rows_to_records(
    rows: Sequence[Sequence],
    next_id: Callable[[], int]
) -> List[ApplicationRecord]:
    """Map a raw value matrix to records.

    The first row is always treated as the header. Rows whose company cell is
    blank are dropped. Each kept row receives a fresh id from ``next_id``.
    """
    records = []
    for row in list(rows)[1:]:
        fields = row_to_fields(row or [])
        if not fields["company"].strip():
            continue
        records.append(ApplicationRecord(id=next_id(), **fields))
    return records
