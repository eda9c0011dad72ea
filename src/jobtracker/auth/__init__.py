"""Identity package: token access for the remote backend."""

from .token_provider import TokenProvider, StaticTokenProvider, EnvTokenProvider

__all__ = [
    "TokenProvider",
    "StaticTokenProvider",
    "EnvTokenProvider"
]
