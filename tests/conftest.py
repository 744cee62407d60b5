import pytest
from fastapi.testclient import TestClient

from tests.fakes import build_sqlite_store, ready_session
from tests.fixtures_data import OWNER_ADDRESS


@pytest.fixture
def provider():
    from app.whatsapp.mock_provider import MockWhatsAppProvider

    return MockWhatsAppProvider()


@pytest.fixture
def store():
    return build_sqlite_store()


@pytest.fixture
def client(monkeypatch, store, provider):
    from app import main
    from app.deps import get_order_store, get_whatsapp_session

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)
    monkeypatch.setattr("app.deps.OWNER_NUMBER", OWNER_ADDRESS)
    monkeypatch.setattr("app.deps.ORDER_TIMEOUT_SECONDS", None)
    session = ready_session(provider)
    main.app.dependency_overrides[get_order_store] = lambda: store
    main.app.dependency_overrides[get_whatsapp_session] = lambda: session

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.clear()
