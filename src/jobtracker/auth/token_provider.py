"""Access to the signed-in user's bearer token.

Token acquisition, expiry and refresh belong to the identity provider. The
sync engine only asks whether a usable token exists right now.
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

from ..utils.logging import get_logger


class TokenProvider(ABC):
    """Narrow interface the sync engine consumes."""

    @abstractmethod
    async def get_token(self) -> Optional[str]:
        """Return the current bearer token, or None when signed out."""
        pass


class StaticTokenProvider(TokenProvider):
    """Holds whatever token the sign-in flow last handed over."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None
        self.logger = get_logger(self.__class__.__name__)

    async def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token or None
        self.logger.info("Token updated", signed_in=self._token is not None)

    def clear(self) -> None:
        self.set_token(None)


class EnvTokenProvider(TokenProvider):
    """Reads the token from an environment variable on every call."""

    def __init__(self, variable: str = "JOBTRACKER_GOOGLE_TOKEN"):
        self.variable = variable

    async def get_token(self) -> Optional[str]:
        return os.getenv(self.variable) or None
