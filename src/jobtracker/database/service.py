"""Local storage service: the durable key/value surface."""

import json
from typing import Any, List, Optional
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from .database import DatabaseManager, get_db_manager
from .operations import get_key_value_repository
from ..utils.logging import get_logger


logger = get_logger("database.service")

CONFIG_KEY = "jobTrackerConfig"
APPLICATIONS_KEY = "jobTrackerApps"


class PersistenceError(Exception):
    """Raised when the local store cannot be read or written."""
    pass


class LocalStorageService:
    """JSON values stored under string keys, one transaction per write."""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db_manager = db_manager or get_db_manager()

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        with self.db_manager.session_scope() as session:
            yield session

    def get_json(self, key: str, default: Any = None) -> Any:
        """Read and decode the value under ``key``.

        A missing key yields ``default``. A value that no longer decodes is
        logged and treated as missing.
        """
        try:
            with self.transaction() as session:
                raw = get_key_value_repository(session).get(key)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read '{key}' from local storage: {e}") from e

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Discarding corrupt local value", key=key, error=str(e))
            return default

    def set_json(self, key: str, value: Any) -> None:
        """Serialize ``value`` and overwrite ``key`` atomically."""
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to serialize '{key}': {e}") from e

        try:
            with self.transaction() as session:
                get_key_value_repository(session).put(key, raw)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write '{key}' to local storage: {e}") from e

    # Convenience accessors for the two keys the tracker uses

    def load_config_data(self) -> dict:
        data = self.get_json(CONFIG_KEY, {})
        return data if isinstance(data, dict) else {}

    def save_config_data(self, data: dict) -> None:
        self.set_json(CONFIG_KEY, data)

    def load_applications_data(self) -> List[dict]:
        data = self.get_json(APPLICATIONS_KEY, [])
        if not isinstance(data, list):
            logger.warning("Stored applications are not a list, ignoring", key=APPLICATIONS_KEY)
            return []
        return data

    def save_applications_data(self, data: List[dict]) -> None:
        self.set_json(APPLICATIONS_KEY, data)


def get_local_storage_service(db_manager: Optional[DatabaseManager] = None) -> LocalStorageService:
    """Get local storage service instance."""
    return LocalStorageService(db_manager)
