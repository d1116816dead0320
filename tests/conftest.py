"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from factoring_gateway.api.main import create_app
from factoring_gateway.api.dependencies import get_payments_client
from factoring_gateway.infrastructure.database.models import Base
from factoring_gateway.infrastructure.database.session import get_db
from factoring_gateway.services.asset_registry import AssetRegistry
from factoring_gateway.services.offers import OfferEngine
from factoring_gateway.services.pricing_table import PricingTable
from helpers import LENDER_POOL, TREASURY, USDC, FakeClock, FakePayments


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db: Session) -> sessionmaker:
    """Independent sessions on the test database, one per simulated worker"""
    return TestingSessionLocal


@pytest.fixture
def payments() -> FakePayments:
    return FakePayments()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def pricing_table(db: Session) -> PricingTable:
    return PricingTable(db)


@pytest.fixture
def asset_registry(db: Session) -> AssetRegistry:
    """Registry with USDC whitelisted against the lender pool"""
    registry = AssetRegistry(db)
    registry.set_lender_pool_address(USDC, LENDER_POOL)
    return registry


@pytest.fixture
def offer_engine(
    db: Session,
    pricing_table: PricingTable,
    asset_registry: AssetRegistry,
    payments: FakePayments,
    clock: FakeClock,
) -> OfferEngine:
    engine = OfferEngine(db, pricing_table, asset_registry, payments, clock=clock)
    engine.set_treasury_address(TREASURY)
    return engine


@pytest.fixture
def graded_tiers(pricing_table: PricingTable) -> PricingTable:
    """Grade A/B/C tiers used by the settlement scenarios"""
    pricing_table.add_pricing_item("0x606A", 20, 60, 90, 65, 12, 5000, 10000)
    pricing_table.add_pricing_item("0x57A2", 60, 90, 9000, 375, 105, 8000000, 10000000)
    pricing_table.add_pricing_item("0x41A2", 60, 89, 9000, 700, 173, 500000, 1000000)
    pricing_table.add_pricing_item("0x643A", 30, 59, 9000, 375, 70, 8000100, 10000000)
    pricing_table.add_pricing_item("0x684B", 90, 119, 9000, 400, 20, 8000100, 10000000)
    pricing_table.add_pricing_item("0x624B", 20, 29, 9000, 400, 50, 8000100, 10000000)
    pricing_table.add_pricing_item("0x647A", 60, 89, 9000, 700, 173, 500000, 1000000)
    pricing_table.add_pricing_item("0x668B", 90, 119, 9000, 750, 200, 500000, 1000000)
    pricing_table.add_pricing_item("0x689C", 120, 180, 9000, 800, 227, 500000, 1000000)
    pricing_table.add_pricing_item("0x629C", 30, 59, 9000, 800, 160, 500000, 1000000)
    return pricing_table


@pytest.fixture
def client(db: Session, payments: FakePayments) -> TestClient:
    """Create FastAPI test client with test database and fake payments"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payments_client] = lambda: payments
    return TestClient(app)
