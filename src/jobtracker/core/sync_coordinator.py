"""Sync coordinator: local-first orchestration between the record store and the spreadsheet."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from .identifiers import IdGenerator
from .messages import MessageBoard
from .queries import filter_applications
from .transfer import ImportFormatError, export_json, parse_import
from .validation import RecordValidationError, ensure_valid, messages_from_validation_error
from ..api_clients.base import BaseSheetClient, Credentials, RemoteErrorKind, RemoteUnavailableError
from ..api_clients.rows import rows_to_records
from ..auth.token_provider import TokenProvider
from ..config.loader import ConfigurationError
from ..config.schema import SheetConfig
from ..config.settings import get_settings
from ..connectivity.monitor import ConnectivityMonitor
from ..database.models import ApplicationCreate, ApplicationRecord, ApplicationStatus, ApplicationUpdate
from ..database.record_store import RecordStore
from ..database.service import PersistenceError
from ..utils.logging import get_logger


NOT_CONFIGURED_MESSAGE = "Please sign in and configure Spreadsheet ID first"
PULL_OFFLINE_MESSAGE = "You're offline. Using cached data."
PUSH_OFFLINE_MESSAGE = "You're offline. Changes saved locally and will sync when online."
SYNC_OFFLINE_MESSAGE = "You must be online to sync with Google Sheets."
LOCAL_ONLY_MESSAGE = "Changes saved locally. Sign in and configure a spreadsheet to sync."


class SyncError(Exception):
    """Base exception for sync coordinator errors."""
    pass


class NotConfiguredError(SyncError):
    """Raised when no spreadsheet ID or no credentials are available."""
    pass


class OfflineError(SyncError):
    """Raised when an operation needs connectivity and there is none."""
    pass


class SyncOutcome(str, Enum):
    """How an operation left local and remote state."""
    SYNCED = "synced"
    SAVED_LOCALLY = "saved_locally"
    LOCAL_ONLY = "local_only"
    REMOTE_FAILED = "remote_failed"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Result of a coordinator operation."""

    success: bool
    outcome: SyncOutcome
    message: str = ""
    records: List[ApplicationRecord] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def committed_locally(self) -> bool:
        """Whether the record store now holds the operation's target collection."""
        return self.outcome in (
            SyncOutcome.SYNCED,
            SyncOutcome.SAVED_LOCALLY,
            SyncOutcome.LOCAL_ONLY,
            SyncOutcome.REMOTE_FAILED,
        )


@dataclass
class SyncContext:
    """State owned by one coordinator instance."""

    config: SheetConfig = field(default_factory=SheetConfig)
    last_result: Optional[SyncResult] = None
    last_synced_at: Optional[datetime] = None


class SyncCoordinator:
    """Decides between local-only and local+remote writes and runs one operation at a time.

    Push and pull are serialized through a single asyncio lock, so two
    operations never interleave on the record store regardless of how the
    caller schedules them. Waiting operations run in arrival order.
    """

    def __init__(
        self,
        record_store: RecordStore,
        remote_client: BaseSheetClient,
        connectivity: ConnectivityMonitor,
        token_provider: TokenProvider,
        id_generator: Optional[IdGenerator] = None,
        messages: Optional[MessageBoard] = None,
        operation_timeout: Optional[float] = None
    ):
        """Initialize the coordinator.

        Args:
            record_store: Owner of the local collection
            remote_client: Adapter for the spreadsheet backend
            connectivity: Source of the online/offline flag
            token_provider: Source of the signed-in user's token
            id_generator: Client-side id source for new and pulled records
            messages: Board receiving user-facing status messages
            operation_timeout: Upper bound in seconds for one remote call
        """
        self.record_store = record_store
        self.remote_client = remote_client
        self.connectivity = connectivity
        self.token_provider = token_provider
        self.id_generator = id_generator or IdGenerator()
        self.messages = messages or MessageBoard()
        self.operation_timeout = operation_timeout or get_settings().sync.operation_timeout_seconds

        self.context = SyncContext()
        self.logger = get_logger(self.__class__.__name__)
        self._lock = asyncio.Lock()

    # State

    def start(self) -> List[ApplicationRecord]:
        """Load the persisted configuration and collection."""
        self.context.config = SheetConfig.from_storage(self.record_store.storage.load_config_data())
        records = self.record_store.load()
        self.id_generator.observe(record.id for record in records)

        self.logger.info(
            "Sync coordinator started",
            configured=self.context.config.is_configured,
            records=len(records),
            online=self.connectivity.is_online()
        )
        return records

    @property
    def config(self) -> SheetConfig:
        return self.context.config

    @property
    def loading(self) -> bool:
        """True while a push or pull holds the single-flight lock."""
        return self._lock.locked()

    @property
    def records(self) -> List[ApplicationRecord]:
        return self.record_store.records

    def filter(self, search_term: str = "", status: Union[ApplicationStatus, str, None] = "All") -> List[ApplicationRecord]:
        return filter_applications(self.record_store.records, search_term, status)

    # Remote operations

    async def load_from_remote(self) -> SyncResult:
        """Pull: replace the local collection with the spreadsheet contents."""
        async with self._lock:
            return await self._pull()

    async def save_to_remote(self, records: Sequence[ApplicationRecord]) -> SyncResult:
        """Push ``records`` as the complete table, committing locally whatever happens remotely."""
        async with self._lock:
            return await self._push(list(records))

    async def sync(self) -> SyncResult:
        """Push the local collection, then pull the spreadsheet back."""
        if not self.connectivity.is_online():
            return self._finish(self._failure(OfflineError(SYNC_OFFLINE_MESSAGE)))

        async with self._lock:
            pushed = await self._push(self.record_store.records)
            if pushed.outcome != SyncOutcome.SYNCED:
                return pushed
            return await self._pull()

    async def configure(self, config: SheetConfig) -> SyncResult:
        """Persist the sheet configuration, then pull from it."""
        if not config.spreadsheet_id:
            return self._finish(self._failure(ConfigurationError("Please provide Spreadsheet ID")))

        try:
            self.record_store.storage.save_config_data(config.to_storage())
        except PersistenceError as e:
            return self._finish(self._failure(e, f"Failed to save configuration: {e}"))

        self.context.config = config
        self.messages.post_success("Configuration saved!")
        self.logger.info("Configuration saved", spreadsheet_id=config.spreadsheet_id, range=config.range)

        return await self.load_from_remote()

    # Mutate-and-push operations

    async def add_application(self, application: Union[ApplicationCreate, Dict[str, Any]]) -> SyncResult:
        """Validate and add a new record, then push the full collection."""
        try:
            if not isinstance(application, ApplicationCreate):
                application = ApplicationCreate.model_validate(application)
            ensure_valid(application)
        except ValidationError as e:
            return self._finish(self._failure(RecordValidationError(messages_from_validation_error(e))))
        except RecordValidationError as e:
            return self._finish(self._failure(e))

        data = application.model_dump()
        data["company"] = data["company"].strip()
        data["position"] = data["position"].strip()

        def target() -> List[ApplicationRecord]:
            record = ApplicationRecord(id=self.id_generator.next_id(), **data)
            return self.record_store.with_added(record)

        return await self._mutate(target, "add")

    async def update_application(
        self,
        record_id: int,
        patch: Union[ApplicationUpdate, Dict[str, Any]]
    ) -> SyncResult:
        """Replace fields of an existing record in place, then push the full collection."""
        try:
            if not isinstance(patch, ApplicationUpdate):
                patch = ApplicationUpdate.model_validate(patch)
        except ValidationError as e:
            return self._finish(self._failure(RecordValidationError(messages_from_validation_error(e))))

        trimmed = {
            name: getattr(patch, name).strip()
            for name in ("company", "position")
            if getattr(patch, name) is not None
        }
        if trimmed:
            patch = patch.model_copy(update=trimmed)

        def target() -> Optional[List[ApplicationRecord]]:
            if self.record_store.get(record_id) is None:
                return None
            records = self.record_store.with_updated(record_id, patch)
            updated = next(record for record in records if record.id == record_id)
            ensure_valid(ApplicationCreate.model_validate(updated.content()))
            return records

        return await self._mutate(target, "update", record_id=record_id)

    async def update_status(self, record_id: int, status: Union[ApplicationStatus, str]) -> SyncResult:
        return await self.update_application(record_id, {"status": status})

    async def delete_application(self, record_id: int) -> SyncResult:
        """Remove a record, then push the full collection."""

        def target() -> Optional[List[ApplicationRecord]]:
            if self.record_store.get(record_id) is None:
                return None
            return self.record_store.without(record_id)

        return await self._mutate(target, "delete", record_id=record_id)

    # Import / export

    async def import_json(self, payload: str) -> SyncResult:
        """Replace the local collection with an exported one; nothing is pushed."""
        try:
            records = parse_import(payload, self.id_generator.next_id)
        except ImportFormatError as e:
            return self._finish(self._failure(e))

        async with self._lock:
            try:
                committed = self.record_store.replace_all(records)
            except PersistenceError as e:
                return self._finish(self._failure(e, f"Failed to save changes locally: {e}"))

        self.id_generator.observe(record.id for record in committed)
        return self._finish(SyncResult(
            success=True,
            outcome=SyncOutcome.LOCAL_ONLY,
            message="Data imported successfully!",
            records=committed
        ))

    def export_json(self) -> str:
        return export_json(self.record_store.records)

    # Internals

    async def _mutate(
        self,
        target: Callable[[], Optional[List[ApplicationRecord]]],
        action: str,
        **log_context
    ) -> SyncResult:
        async with self._lock:
            try:
                records = target()
            except RecordValidationError as e:
                return self._finish(self._failure(e))

            if records is None:
                self.logger.info("Nothing to change", action=action, **log_context)
                return self._finish(SyncResult(
                    success=True,
                    outcome=SyncOutcome.UNCHANGED,
                    message="No matching application",
                    records=self.record_store.records
                ))

            self.logger.info("Applying change", action=action, records=len(records), **log_context)

            if await self._remote_target() is None:
                return self._commit(records, SyncOutcome.LOCAL_ONLY, LOCAL_ONLY_MESSAGE)

            return await self._push(records)

    async def _pull(self) -> SyncResult:
        try:
            config, credentials = await self._require_remote()
            if not self.connectivity.is_online():
                raise OfflineError(PULL_OFFLINE_MESSAGE)
        except SyncError as e:
            return self._finish(self._failure(e))

        try:
            rows = await self._call_remote(self.remote_client.read_all(config, credentials))
        except RemoteUnavailableError as e:
            return self._finish(self._failure(e, f"Sync failed: {e}"))

        records = rows_to_records(rows, self.id_generator.next_id)
        try:
            committed = self.record_store.replace_all(records)
        except PersistenceError as e:
            return self._finish(self._failure(e, f"Failed to save changes locally: {e}"))

        self.context.last_synced_at = datetime.now(timezone.utc)
        return self._finish(SyncResult(
            success=True,
            outcome=SyncOutcome.SYNCED,
            message="Data synced successfully!",
            records=committed
        ))

    async def _push(self, records: List[ApplicationRecord]) -> SyncResult:
        try:
            config, credentials = await self._require_remote()
        except NotConfiguredError as e:
            return self._finish(self._failure(e))

        if not self.connectivity.is_online():
            return self._commit(records, SyncOutcome.SAVED_LOCALLY, PUSH_OFFLINE_MESSAGE)

        try:
            await self._call_remote(self.remote_client.overwrite_all(config, credentials, records))
        except RemoteUnavailableError as e:
            return self._commit(
                records,
                SyncOutcome.REMOTE_FAILED,
                f"Save failed: {e}. Changes saved locally.",
                error=e
            )

        self.context.last_synced_at = datetime.now(timezone.utc)
        return self._commit(records, SyncOutcome.SYNCED, "Changes saved and synced!")

    def _commit(
        self,
        records: List[ApplicationRecord],
        outcome: SyncOutcome,
        message: str,
        error: Optional[Exception] = None
    ) -> SyncResult:
        try:
            committed = self.record_store.replace_all(records)
        except PersistenceError as e:
            return self._finish(self._failure(e, f"Failed to save changes locally: {e}"))

        return self._finish(SyncResult(
            success=outcome != SyncOutcome.REMOTE_FAILED,
            outcome=outcome,
            message=message,
            records=committed,
            error=error
        ))

    async def _remote_target(self) -> Optional[Tuple[SheetConfig, Credentials]]:
        config = self.context.config
        if not config.is_configured:
            return None

        token = await self.token_provider.get_token()
        credentials = Credentials(bearer_token=token, api_key=config.api_key)
        if not credentials.is_usable:
            return None
        return config, credentials

    async def _require_remote(self) -> Tuple[SheetConfig, Credentials]:
        target = await self._remote_target()
        if target is None:
            raise NotConfiguredError(NOT_CONFIGURED_MESSAGE)
        return target

    async def _call_remote(self, operation: Awaitable):
        try:
            return await asyncio.wait_for(operation, timeout=self.operation_timeout)
        except asyncio.TimeoutError as e:
            raise RemoteUnavailableError(
                f"No response within {self.operation_timeout}s",
                RemoteErrorKind.TIMEOUT
            ) from e

    def _failure(self, error: Exception, message: Optional[str] = None) -> SyncResult:
        return SyncResult(
            success=False,
            outcome=SyncOutcome.FAILED,
            message=message or str(error),
            records=self.record_store.records,
            error=error
        )

    def _finish(self, result: SyncResult) -> SyncResult:
        """Record the result, post its message and log it."""
        self.context.last_result = result

        if result.success and result.outcome != SyncOutcome.SAVED_LOCALLY:
            if result.message:
                self.messages.post_success(result.message)
            self.messages.clear_error()
            self.logger.info(
                "Operation completed",
                outcome=result.outcome.value,
                records=len(result.records)
            )
        else:
            self.messages.post_error(result.message)
            self.logger.warning(
                "Operation did not reach the spreadsheet",
                outcome=result.outcome.value,
                error_type=type(result.error).__name__ if result.error else None,
                remote_kind=getattr(result.error, "kind", None),
                message=result.message
            )

        return result
