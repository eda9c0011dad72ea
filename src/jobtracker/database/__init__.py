"""Database package for the job tracker."""

from .database import (
    DatabaseManager,
    get_db_manager,
    init_database,
    close_database
)

from .models import (
    KeyValueModel,
    ApplicationRecord,
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationStatus,
    DEFAULT_STATUS
)

from .operations import (
    KeyValueRepository,
    get_key_value_repository
)

from .service import (
    LocalStorageService,
    PersistenceError,
    get_local_storage_service,
    CONFIG_KEY,
    APPLICATIONS_KEY
)

from .record_store import RecordStore

__all__ = [
    # Database management
    "DatabaseManager",
    "get_db_manager",
    "init_database",
    "close_database",

    # Models
    "KeyValueModel",
    "ApplicationRecord",
    "ApplicationCreate",
    "ApplicationUpdate",
    "ApplicationStatus",
    "DEFAULT_STATUS",

    # Repositories
    "KeyValueRepository",
    "get_key_value_repository",

    # Services
    "LocalStorageService",
    "PersistenceError",
    "get_local_storage_service",
    "CONFIG_KEY",
    "APPLICATIONS_KEY",
    "RecordStore"
]
