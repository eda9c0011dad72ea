"""Record store: the in-memory application collection mirrored to local storage."""

from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from .models import ApplicationRecord, ApplicationUpdate
from .service import LocalStorageService
from ..utils.logging import get_logger


Patch = Union[ApplicationUpdate, Dict[str, Any]]


class RecordStore:
    """Ordered collection of application records.

    Every mutation serializes the whole collection and writes it in a single
    transaction before the in-memory list is swapped, so memory never runs
    ahead of what is on disk. Callers only ever receive copies.
    """

    def __init__(self, storage: LocalStorageService):
        self.storage = storage
        self.logger = get_logger(self.__class__.__name__)
        self._records: List[ApplicationRecord] = []

    @property
    def records(self) -> List[ApplicationRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: int) -> Optional[ApplicationRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def load(self) -> List[ApplicationRecord]:
        """Read the last persisted collection into memory."""
        records = []
        for item in self.storage.load_applications_data():
            try:
                records.append(ApplicationRecord.model_validate(item))
            except ValidationError as e:
                self.logger.warning("Skipping unreadable stored record", error=str(e))

        self._records = records
        self.logger.info("Loaded applications from local storage", count=len(records))
        return self.records

    def replace_all(self, records: Sequence[ApplicationRecord]) -> List[ApplicationRecord]:
        """Overwrite the persisted and in-memory collection."""
        new_records = list(records)
        self.storage.save_applications_data([record.to_dict() for record in new_records])
        self._records = new_records

        self.logger.debug("Persisted applications", count=len(new_records))
        return self.records

    def add(self, record: ApplicationRecord) -> List[ApplicationRecord]:
        return self.replace_all(self.with_added(record))

    def update_by_id(self, record_id: int, patch: Patch) -> List[ApplicationRecord]:
        """Apply ``patch`` to the record with ``record_id``; absent ids are a no-op."""
        if self.get(record_id) is None:
            self.logger.debug("Update skipped, no such record", record_id=record_id)
            return self.records
        return self.replace_all(self.with_updated(record_id, patch))

    def remove_by_id(self, record_id: int) -> List[ApplicationRecord]:
        """Remove the record with ``record_id``; absent ids are a no-op."""
        if self.get(record_id) is None:
            self.logger.debug("Removal skipped, no such record", record_id=record_id)
            return self.records
        return self.replace_all(self.without(record_id))

    # Pure helpers computing a target collection without persisting it

    def with_added(self, record: ApplicationRecord) -> List[ApplicationRecord]:
        if self.get(record.id) is not None:
            raise ValueError(f"Record id {record.id} already exists")
        return self.records + [record]

    def with_updated(self, record_id: int, patch: Patch) -> List[ApplicationRecord]:
        changes = _patch_fields(patch)
        updated = []
        for record in self._records:
            if record.id == record_id:
                data = record.to_dict()
                data.update(changes)
                data["id"] = record_id
                record = ApplicationRecord.model_validate(data)
            updated.append(record)
        return updated

    def without(self, record_id: int) -> List[ApplicationRecord]:
        return [record for record in self._records if record.id != record_id]


def _patch_fields(patch: Patch) -> Dict[str, Any]:
    if isinstance(patch, ApplicationUpdate):
        changes = patch.model_dump(exclude_none=True)
    else:
        changes = {key: value for key, value in dict(patch).items() if value is not None}
    changes.pop("id", None)
    if "status" in changes and hasattr(changes["status"], "value"):
        changes["status"] = changes["status"].value
    return changes
