import pytest

from modbot.config.model import SessionConfig
from tests.fixtures.fakes import FakeConnection, QueueConsole, build_config


@pytest.fixture
def config() -> SessionConfig:
    return build_config()


@pytest.fixture
def fake_connection(config: SessionConfig) -> FakeConnection:
    return FakeConnection(config)


@pytest.fixture
def console() -> QueueConsole:
    return QueueConsole()
