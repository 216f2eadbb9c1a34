"""Shared test fixtures for the escape room."""

import pytest

from escaperoom.app import _get_data_path, create_app
from escaperoom.config import Config
from escaperoom.engine.catalog import Catalog
from escaperoom.engine.loader import load_catalog
from escaperoom.session import EscapeSession, SessionOptions


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def catalog() -> Catalog:
    return load_catalog(_get_data_path())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(catalog: Catalog, clock: FakeClock) -> EscapeSession:
    return EscapeSession(catalog, SessionOptions(seed=42), clock=clock, player="tester")


@pytest.fixture
def test_config() -> Config:
    return Config(seed=42)


@pytest.fixture
def app(test_config: Config):
    return create_app(test_config)


@pytest.fixture
def client(app):
    from xitzin.testing import test_app

    with test_app(app) as client:
        yield client


@pytest.fixture
def auth_client(client):
    return client.with_certificate("test-fingerprint-abc123")
