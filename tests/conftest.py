"""Shared fixtures for the job tracker tests."""

import asyncio
import copy
from typing import Any, Dict, List, Optional

import pytest

from jobtracker.api_clients import BaseSheetClient, records_to_values
from jobtracker.auth import StaticTokenProvider
from jobtracker.config import SheetConfig
from jobtracker.connectivity import ConnectivityMonitor
from jobtracker.core import IdGenerator, MessageBoard, SyncCoordinator
from jobtracker.database import (
    ApplicationRecord,
    DatabaseManager,
    LocalStorageService,
    RecordStore
)


class FakeSheetClient(BaseSheetClient):
    """In-memory spreadsheet that records every call made against it."""

    def __init__(self, table: Optional[List[List[str]]] = None):
        super().__init__()
        self.table: List[List[str]] = table if table is not None else []
        self.events: List[str] = []
        self.read_calls = 0
        self.overwrite_calls = 0
        self.fail_with: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None

    @property
    def network_calls(self) -> int:
        return self.read_calls + self.overwrite_calls

    async def _wait_for_gate(self):
        if self.gate is not None:
            await self.gate.wait()

    async def read_all(self, config, credentials):
        self.read_calls += 1
        self.events.append("read:start")
        await self._wait_for_gate()
        if self.fail_with:
            self.events.append("read:failed")
            raise self.fail_with
        self.events.append("read:end")
        return copy.deepcopy(self.table)

    async def overwrite_all(self, config, credentials, records):
        self.overwrite_calls += 1
        self.events.append("overwrite:start")
        await self._wait_for_gate()
        if self.fail_with:
            self.events.append("overwrite:failed")
            raise self.fail_with
        self.table = records_to_values(records)
        self.events.append("overwrite:end")


class FakeResponse:
    """Just enough of aiohttp.ClientResponse for the Sheets client."""

    def __init__(self, status: int = 200, body: Any = None, reason: str = "OK",
                 content_type: str = "application/json"):
        self.status = status
        self.reason = reason
        self.content_type = content_type
        self._body = body if body is not None else {}

    async def json(self):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Records requests and replays queued responses or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method, url, params=None, headers=None, json=None):
        self.requests.append({
            "method": method,
            "url": url,
            "params": params or {},
            "headers": headers or {},
            "json": json,
        })
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self):
        self.closed = True


def make_record(record_id: int, company: str = "Acme", position: str = "Engineer", **fields) -> ApplicationRecord:
    data = {"date": "2024-01-15", "status": "Applied", "source": "", "notes": "", "salary": ""}
    data.update(fields)
    return ApplicationRecord(id=record_id, company=company, position=position, **data)


@pytest.fixture
def db_manager():
    manager = DatabaseManager("sqlite:///:memory:")
    manager.create_tables()
    yield manager
    manager.dispose()


@pytest.fixture
def storage(db_manager):
    return LocalStorageService(db_manager)


@pytest.fixture
def record_store(storage):
    return RecordStore(storage)


@pytest.fixture
def fake_client():
    return FakeSheetClient()


@pytest.fixture
def connectivity():
    return ConnectivityMonitor(initial_online=True)


@pytest.fixture
def token_provider():
    return StaticTokenProvider("test-token")


@pytest.fixture
def sheet_config():
    return SheetConfig(spreadsheet_id="sheet-123", range="Applications!A:H")


@pytest.fixture
def coordinator(record_store, fake_client, connectivity, token_provider, sheet_config, storage):
    """Coordinator with a saved configuration, a token and connectivity."""
    storage.save_config_data(sheet_config.to_storage())
    coordinator = SyncCoordinator(
        record_store=record_store,
        remote_client=fake_client,
        connectivity=connectivity,
        token_provider=token_provider,
        id_generator=IdGenerator(),
        messages=MessageBoard(),
        operation_timeout=2.0
    )
    coordinator.start()
    return coordinator
