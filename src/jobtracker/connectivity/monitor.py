"""Online/offline state tracking."""

import socket
from typing import Callable, List, Optional

from ..config.settings import get_settings
from ..utils.logging import get_logger


ConnectivityCallback = Callable[[bool], None]


def probe_platform_online(
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None
) -> bool:
    """One-shot reachability check used to seed the initial state."""
    sync_settings = get_settings().sync
    host = host or sync_settings.connectivity_probe_host
    port = port or sync_settings.connectivity_probe_port
    timeout = timeout if timeout is not None else sync_settings.connectivity_probe_timeout_seconds

    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


class ConnectivityMonitor:
    """Holds the current connectivity flag and notifies subscribers on transitions.

    The state only changes through :meth:`set_online`, which the platform
    integration calls when it observes the network going up or down. There
    is no polling.
    """

    def __init__(
        self,
        initial_online: Optional[bool] = None,
        probe: Callable[[], bool] = probe_platform_online
    ):
        self.logger = get_logger(self.__class__.__name__)
        self._online = probe() if initial_online is None else bool(initial_online)
        self._subscribers: List[ConnectivityCallback] = []

        self.logger.info("Connectivity monitor initialized", online=self._online)

    def is_online(self) -> bool:
        return self._online

    def subscribe(self, callback: ConnectivityCallback) -> Callable[[], None]:
        """Register ``callback(online)``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        """Record a platform online/offline signal."""
        online = bool(online)
        if online == self._online:
            return

        self._online = online
        self.logger.info("Connectivity changed", online=online)

        for callback in list(self._subscribers):
            try:
                callback(online)
            except Exception as e:
                self.logger.error(
                    "Connectivity subscriber failed",
                    callback=getattr(callback, "__name__", repr(callback)),
                    error=str(e)
                )

    def mark_online(self) -> None:
        self.set_online(True)

    def mark_offline(self) -> None:
        self.set_online(False)
