"""Tests for connectivity tracking and token access."""

import pytest

from jobtracker.auth import EnvTokenProvider, StaticTokenProvider
from jobtracker.connectivity import ConnectivityMonitor, probe_platform_online


class TestConnectivityMonitor:

    def test_initial_state_from_argument(self):
        assert ConnectivityMonitor(initial_online=True).is_online()
        assert not ConnectivityMonitor(initial_online=False).is_online()

    def test_probe_runs_once_when_state_unknown(self):
        calls = []

        def probe():
            calls.append(1)
            return False

        monitor = ConnectivityMonitor(probe=probe)
        monitor.is_online()
        monitor.is_online()

        assert not monitor.is_online()
        assert calls == [1]

    def test_subscribers_notified_on_transitions_only(self):
        monitor = ConnectivityMonitor(initial_online=True)
        seen = []
        monitor.subscribe(seen.append)

        monitor.set_online(True)
        monitor.mark_offline()
        monitor.mark_offline()
        monitor.mark_online()

        assert seen == [False, True]

    def test_unsubscribe(self):
        monitor = ConnectivityMonitor(initial_online=True)
        seen = []
        unsubscribe = monitor.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        monitor.set_online(False)

        assert seen == []

    def test_failing_subscriber_does_not_block_others(self):
        monitor = ConnectivityMonitor(initial_online=False)
        seen = []

        def broken(online):
            raise RuntimeError("boom")

        monitor.subscribe(broken)
        monitor.subscribe(seen.append)
        monitor.set_online(True)

        assert monitor.is_online()
        assert seen == [True]

    def test_probe_reports_unreachable_host(self, monkeypatch):
        def refuse(address, timeout=None):
            raise OSError("unreachable")

        monkeypatch.setattr("jobtracker.connectivity.monitor.socket.create_connection", refuse)

        assert probe_platform_online("sheets.example.test", 443, 0.1) is False


@pytest.mark.asyncio
class TestTokenProviders:

    async def test_static_token(self):
        provider = StaticTokenProvider("abc")
        assert await provider.get_token() == "abc"

        provider.clear()
        assert await provider.get_token() is None

        provider.set_token("")
        assert await provider.get_token() is None

    async def test_env_token(self, monkeypatch):
        provider = EnvTokenProvider("TEST_JOBTRACKER_TOKEN")

        monkeypatch.delenv("TEST_JOBTRACKER_TOKEN", raising=False)
        assert await provider.get_token() is None

        monkeypatch.setenv("TEST_JOBTRACKER_TOKEN", "from-env")
        assert await provider.get_token() == "from-env"
