"""Read-only views over the record collection."""

from typing import List, Optional, Sequence, Union

from ..database.models import ApplicationRecord, ApplicationStatus


ALL_STATUSES = "All"


def filter_applications(
    records: Sequence[ApplicationRecord],
    search_term: str = "",
    status: Union[ApplicationStatus, str, None] = ALL_STATUSES
) -> List[ApplicationRecord]:
    """Case-insensitive search over company, position, source and notes, plus a status filter."""
    results = list(records)

    term = (search_term or "").strip().lower()
    if term:
        results = [
            record for record in results
            if term in record.company.lower()
            or term in record.position.lower()
            or term in record.source.lower()
            or term in record.notes.lower()
        ]

    wanted = _status_filter(status)
    if wanted is not None:
        results = [record for record in results if record.status == wanted]

    return results


def _status_filter(status: Union[ApplicationStatus, str, None]) -> Optional[ApplicationStatus]:
    if status is None or status == ALL_STATUSES:
        return None
    if isinstance(status, ApplicationStatus):
        return status
    for candidate in ApplicationStatus:
        if candidate.value == status:
            return candidate
    raise ValueError(f"Unknown status filter: {status}")
