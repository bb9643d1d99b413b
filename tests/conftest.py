"""Shared test fixtures."""

import httpx
import pytest
import pytest_asyncio

from connect_platform.config import Settings
from connect_platform.engine.accounts import AccountOrchestrator
from connect_platform.engine.payments import PaymentOrchestrator
from connect_platform.engine.state import StateAggregator
from connect_platform.engine.transfers import TransferGuard
from connect_platform.main import create_app
from connect_platform.providers.mock_provider import MockProcessorGateway
from connect_platform.registry import InMemoryAccountRegistry

ROOT_URL = "https://platform.example.test"
TREASURY_ID = "acct_treasury001"


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        processor="mock",
        stripe_secret_key="",
        stripe_publishable_key="pk_test_123",
        root_url=ROOT_URL + "/",
        mock_failure_rate=0.0,
        mock_latency_ms=0,
    )


@pytest.fixture
def gateway():
    """Deterministic in-memory processor: no latency, no random failures."""
    return MockProcessorGateway(failure_rate=0.0, latency_ms=0)


@pytest.fixture
def registry():
    return InMemoryAccountRegistry()


@pytest.fixture
def accounts(gateway, registry):
    return AccountOrchestrator(gateway, registry, root_url=ROOT_URL)


@pytest.fixture
def payments(gateway):
    return PaymentOrchestrator(gateway)


@pytest.fixture
def guard(gateway, registry):
    return TransferGuard(gateway, registry)


@pytest.fixture
def aggregator(gateway, registry):
    return StateAggregator(gateway, registry, root_url=ROOT_URL)


@pytest.fixture
def active_treasury(gateway, registry):
    """Treasury account that can receive transfers."""
    gateway.add_account(TREASURY_ID, transfers="active")
    registry.set_treasury(TREASURY_ID)
    return TREASURY_ID


@pytest.fixture
def app(test_settings, gateway, registry):
    return create_app(config=test_settings, gateway=gateway, registry=registry)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
