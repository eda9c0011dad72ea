"""User-facing status messages that expire on their own."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..config.settings import get_settings


@dataclass
class Message:
    text: str
    expires_at: float


class MessageBoard:
    """Latest error and latest success message, each with its own lifetime."""

    def __init__(
        self,
        error_ttl: Optional[float] = None,
        success_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        sync_settings = get_settings().sync
        self.error_ttl = error_ttl if error_ttl is not None else sync_settings.error_message_ttl_seconds
        self.success_ttl = success_ttl if success_ttl is not None else sync_settings.success_message_ttl_seconds
        self._clock = clock
        self._error: Optional[Message] = None
        self._success: Optional[Message] = None

    def post_error(self, text: str) -> None:
        self._error = Message(text, self._clock() + self.error_ttl)

    def post_success(self, text: str) -> None:
        self._success = Message(text, self._clock() + self.success_ttl)

    def clear_error(self) -> None:
        self._error = None

    def clear(self) -> None:
        self._error = None
        self._success = None

    @property
    def error(self) -> Optional[str]:
        self._error = self._live(self._error)
        return self._error.text if self._error else None

    @property
    def success(self) -> Optional[str]:
        self._success = self._live(self._success)
        return self._success.text if self._success else None

    def _live(self, message: Optional[Message]) -> Optional[Message]:
        if message is not None and self._clock() >= message.expires_at:
            return None
        return message
