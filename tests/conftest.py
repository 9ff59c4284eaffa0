"""Shared test fixtures for the jogserver test suite.

Provides common fixtures used across unit tests: machine adapters,
free ports and fast server configurations.
"""

from __future__ import annotations

import socket
from unittest.mock import AsyncMock

import pytest

from jogserver.config.settings import ServerConfig
from jogserver.machine.base import MachineAdapter
from jogserver.machine.simulated import SimulatedMachine


# ---------------------------------------------------------------------------
# Machine Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_machine() -> AsyncMock:
    """A mock MachineAdapter recording move_active_tool calls."""
    machine = AsyncMock(spec=MachineAdapter)
    machine.backend = "mock"
    return machine


@pytest.fixture
def simulated_machine() -> SimulatedMachine:
    """A simulated machine starting at Z=10 with soft limits 0..20."""
    return SimulatedMachine(start_z=10.0, min_z=0.0, max_z=20.0)


# ---------------------------------------------------------------------------
# Network Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def free_port() -> int:
    """A TCP port on localhost that nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def server_config(free_port: int) -> ServerConfig:
    """A loopback ServerConfig with short timings for tests."""
    return ServerConfig(
        host="127.0.0.1",
        port=free_port,
        probe_timeout=0.5,
        grace_interval=0.2,
        bind_attempts=10,
        bind_backoff=0.05,
        bind_backoff_max=0.5,
    )
