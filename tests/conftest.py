"""
ts3query Test Configuration

Shared pytest fixtures and configuration for all test types.
"""

from pathlib import Path
from typing import Callable, Generator

import pytest

from fixtures.mock_server import SSH_PASSWORD, MockServer
from ts3query.core.config import ClientConfig, SSHConfig, reset_settings


# Configure pytest collection
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (local mock ServerQuery server)")


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop the settings singleton around every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Provide a temporary configuration directory for tests."""
    config_dir = tmp_path / ".ts3query"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_server() -> Generator[Callable[..., MockServer], None, None]:
    """
    Factory fixture starting mock ServerQuery servers.

    Accepts the MockServer keyword options; every server started through
    the factory is closed at teardown.
    """
    servers: list[MockServer] = []

    def _start(**options) -> MockServer:
        server = MockServer(**options).start()
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.close()


@pytest.fixture
def client_config() -> Callable[..., ClientConfig]:
    """
    Factory fixture building a ClientConfig pointing at a mock server.

    SSH servers get SSH enabled with the mock's password unless
    ``ssh=`` is passed explicitly.
    """
    def _build(server: MockServer, **overrides) -> ClientConfig:
        values = {
            "host": server.host,
            "port": server.port,
            "connect_timeout": 2.0,
            "command_timeout": 2.0,
        }
        if server.use_ssh:
            values["ssh"] = SSHConfig(enabled=True, password=SSH_PASSWORD)
        values.update(overrides)
        return ClientConfig(**values)

    return _build
