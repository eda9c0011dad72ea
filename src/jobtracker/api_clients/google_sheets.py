"""Google Sheets values API client."""

import asyncio
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import aiohttp

from .base import BaseSheetClient, Credentials, RemoteErrorKind, RemoteUnavailableError, Row
from .rows import records_to_values
from ..config.schema import SheetConfig
from ..config.settings import get_settings
from ..database.models import ApplicationRecord
from ..utils.logging import log_async_execution_time


class GoogleSheetsClient(BaseSheetClient):
    """Reads and overwrites one values range of a Google spreadsheet."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
        **kwargs
    ):
        """Initialize the Sheets client.

        Args:
            base_url: API root, defaults to the configured Sheets endpoint
            timeout_seconds: Total per-request timeout
            session: Existing aiohttp session to use instead of creating one
            **kwargs: Additional configuration parameters
        """
        super().__init__(**kwargs)

        sheets_settings = get_settings().sheets
        self.base_url = (base_url or sheets_settings.base_url).rstrip('/')
        self.timeout_seconds = timeout_seconds or sheets_settings.request_timeout_seconds
        self.user_agent = sheets_settings.user_agent

        self.session = session
        self._owns_session = session is None

    async def __aenter__(self):
        """Async context manager entry."""
        self._get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"User-Agent": self.user_agent}
            )
            self._owns_session = True
        return self.session

    async def close(self) -> None:
        if self.session is not None and self._owns_session and not self.session.closed:
            await self.session.close()
        self.session = None

    def build_values_url(self, config: SheetConfig) -> str:
        """URL of the configured values range."""
        spreadsheet_id = quote(config.spreadsheet_id, safe='')
        sheet_range = quote(config.range, safe='!:$')
        return f"{self.base_url}/v4/spreadsheets/{spreadsheet_id}/values/{sheet_range}"

    @log_async_execution_time
    async def read_all(self, config: SheetConfig, credentials: Credentials) -> List[Row]:
        """Read every row of the configured range, header included."""
        url = self.build_values_url(config)
        data = await self._request("GET", url, credentials)

        values = []
        if isinstance(data, dict):
            values = data.get("values") or []

        self.logger.info(
            "Read spreadsheet range",
            spreadsheet_id=config.spreadsheet_id,
            range=config.range,
            rows=len(values)
        )
        return [[cell if isinstance(cell, str) else str(cell) for cell in row] for row in values]

    @log_async_execution_time
    async def overwrite_all(
        self,
        config: SheetConfig,
        credentials: Credentials,
        records: Sequence[ApplicationRecord]
    ) -> None:
        """Overwrite the configured range with the header row and all records."""
        url = self.build_values_url(config)
        values = records_to_values(records)

        await self._request(
            "PUT",
            url,
            credentials,
            params={"valueInputOption": "RAW"},
            json={"values": values}
        )

        self.logger.info(
            "Overwrote spreadsheet range",
            spreadsheet_id=config.spreadsheet_id,
            range=config.range,
            rows=len(values)
        )

    async def _request(
        self,
        method: str,
        url: str,
        credentials: Credentials,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make an authenticated request and decode a JSON body."""
        session = self._get_session()

        query = dict(params or {})
        query.update(credentials.params())

        headers = {"Accept": "application/json"}
        headers.update(credentials.headers())
        if json is not None:
            headers["Content-Type"] = "application/json"

        try:
            async with session.request(method, url, params=query, headers=headers, json=json) as response:
                if not 200 <= response.status < 300:
                    self.logger.warning(
                        "Sheets request failed",
                        method=method,
                        status=response.status,
                        reason=response.reason
                    )
                    raise RemoteUnavailableError.from_status(response.status, response.reason or "")

                if response.content_type == "application/json":
                    return await response.json()
                return {}

        except asyncio.TimeoutError as e:
            raise RemoteUnavailableError(
                f"Request timed out after {self.timeout_seconds}s",
                RemoteErrorKind.TIMEOUT
            ) from e
        except aiohttp.ClientError as e:
            raise RemoteUnavailableError(f"Network error: {e}", RemoteErrorKind.NETWORK) from e
