"""Connectivity tracking package."""

from .monitor import ConnectivityMonitor, probe_platform_online

__all__ = [
    "ConnectivityMonitor",
    "probe_platform_online"
]
