from pathlib import Path

import pytest
from catalogue.product.product import Catalog
from notifications.channel.fake_email import FakeEmailAdapter
from payments.gateway.fake_adapter import FakeGateway
from shared.config import Settings
from shared.store import COLLECTIONS, DocumentStore

# 2024-01-01T00:00:00Z
START_MS = 1_704_067_200_000


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        env="test",
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        workers_enabled=False,
    )


@pytest.fixture()
def store(settings):
    store = DocumentStore(settings.data_dir)
    store.ensure_collections(*COLLECTIONS)
    return store


@pytest.fixture()
def catalog():
    return Catalog.default()


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def mailer():
    return FakeEmailAdapter()


@pytest.fixture()
def services(settings, catalog, gateway, mailer, clock):
    from bootstrap import build_services

    return build_services(settings, catalog=catalog, gateway=gateway, mailer=mailer, clock=clock)


@pytest.fixture()
def client(services):
    from app import create_app
    from fastapi.testclient import TestClient

    with TestClient(create_app(services=services)) as test_client:
        yield test_client


@pytest.fixture()
def user_data():
    return {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane.doe@example.com",
        "password": "s3cret-pass",
        "address1": "1 Main Street",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
    }
