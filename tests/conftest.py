import pytest
from fastapi.testclient import TestClient

from cinema_tickets.config import Settings
from cinema_tickets.main import build_orchestrator, create_app


@pytest.fixture
def settings():
    return Settings(log_level="DEBUG", seat_capacity=10)


@pytest.fixture
def orchestrator(settings):
    return build_orchestrator(settings)


@pytest.fixture
def client(settings, orchestrator):
    return TestClient(create_app(settings=settings, orchestrator=orchestrator))
