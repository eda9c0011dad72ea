"""Remote adapter interface and common functionality."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Dict, Optional, Sequence

from ..config.schema import SheetConfig
from ..database.models import ApplicationRecord
from ..utils.logging import get_logger


Row = List[str]


@dataclass(frozen=True)
class Credentials:
    """What the remote backend needs to authorize a request.

    Exactly one of the two is normally set: a bearer token from the signed-in
    user, or an API key for the key-based deployment.
    """

    bearer_token: Optional[str] = None
    api_key: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return bool(self.bearer_token or self.api_key)

    def headers(self) -> Dict[str, str]:
        if self.bearer_token:
            return {"Authorization": f"Bearer {self.bearer_token}"}
        return {}

    def params(self) -> Dict[str, str]:
        if self.api_key and not self.bearer_token:
            return {"key": self.api_key}
        return {}


class BaseSheetClient(ABC):
    """Contract for the remote tabular backend: full read and full overwrite."""

    def __init__(self, **kwargs):
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    async def read_all(self, config: SheetConfig, credentials: Credentials) -> List[Row]:
        """Read the whole configured range.

        Returns:
            The raw row matrix, header row included

        Raises:
            RemoteUnavailableError: On any transport or non-2xx failure
        """
        pass

    @abstractmethod
    async def overwrite_all(
        self,
        config: SheetConfig,
        credentials: Credentials,
        records: Sequence[ApplicationRecord]
    ) -> None:
        """Replace the configured range with a header row plus ``records``.

        Raises:
            RemoteUnavailableError: On any transport or non-2xx failure
        """
        pass

    async def close(self) -> None:
        """Release network resources held by the client."""
        return None


class RemoteErrorKind(str, Enum):
    """Why the remote backend could not be used."""
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    HTTP_STATUS = "http_status"
    NETWORK = "network"
    TIMEOUT = "timeout"


class RemoteUnavailableError(Exception):
    """Raised when the remote backend rejects or cannot complete a request."""

    def __init__(
        self,
        message: str,
        kind: RemoteErrorKind = RemoteErrorKind.HTTP_STATUS,
        status: Optional[int] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.status = status

    @classmethod
    def from_status(cls, status: int, reason: str = "") -> "RemoteUnavailableError":
        """Map a non-2xx HTTP status onto an error with the matching kind."""
        if status == 403:
            return cls("API key invalid or quota exceeded", RemoteErrorKind.FORBIDDEN, status)
        if status == 404:
            return cls("Spreadsheet not found or not publicly accessible", RemoteErrorKind.NOT_FOUND, status)
        return cls(f"HTTP {status}: {reason}".rstrip(": "), RemoteErrorKind.HTTP_STATUS, status)
