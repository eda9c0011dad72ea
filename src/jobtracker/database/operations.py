"""Database operations and repository classes."""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from .models import KeyValueModel
from ..utils.logging import get_logger


logger = get_logger("database.operations")


class KeyValueRepository:
    """Repository for the local key/value table."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Optional[str]:
        """Return the raw stored value for ``key`` or None."""
        row = self.session.get(KeyValueModel, key)
        return row.value if row else None

    def put(self, key: str, value: str) -> KeyValueModel:
        """Insert or overwrite the value stored under ``key``."""
        row = self.session.get(KeyValueModel, key)
        if row is None:
            row = KeyValueModel(key=key, value=value)
            self.session.add(row)
        else:
            row.value = value
            row.updated_at = datetime.utcnow()

        self.session.flush()

        logger.debug("Stored value", key=key, size=len(value))
        return row


def get_key_value_repository(session: Session) -> KeyValueRepository:
    """Get key/value repository instance."""
    return KeyValueRepository(session)
