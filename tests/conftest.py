"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from dex.api.main import create_app
from dex.events import EventLog
from dex.pool import Pool
from dex.registry import PoolRegistry
from dex.transfers import AssetBank
from tests.helpers import ALICE, BOB, CAROL, fund, make_pool


@pytest.fixture
def bank() -> AssetBank:
    """An asset bank with ALICE, BOB and CAROL funded in WETH and USDC."""
    bank = AssetBank()
    fund(bank, ALICE, BOB, CAROL)
    return bank


@pytest.fixture
def events() -> EventLog:
    """In-memory notifier recording every committed pool event."""
    return EventLog()


@pytest.fixture
def pool(bank: AssetBank, events: EventLog) -> Pool:
    """An empty WETH/USDC pool reporting to the events fixture."""
    return make_pool(bank, notifier=events)


@pytest.fixture
def seeded_pool(pool: Pool, events: EventLog) -> Pool:
    """WETH/USDC pool after ALICE deposits (100, 200); 141 shares outstanding.

    The seeding event is cleared so tests only see their own events.
    """
    pool.add_liquidity(100, 200, ALICE)
    events.clear()
    return pool


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def api_registry(bank: AssetBank, events: EventLog) -> PoolRegistry:
    """Registry served by the api fixture, backed by the bank fixture."""
    return PoolRegistry(bank.custody_gateway, notifier=events)


@pytest.fixture
def client(bank: AssetBank, api_registry: PoolRegistry) -> Iterator[TestClient]:
    """Test client for an app serving api_registry."""
    app = create_app(registry=api_registry, bank=bank)
    yield TestClient(app)
    app.dependency_overrides.clear()
