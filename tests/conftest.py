from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.db import session as db_session_module  # noqa: E402
from app.db.base_class import Base  # noqa: E402
from app.db.session import SessionLocal  # noqa: E402
from app.models import inventory_models  # noqa: E402,F401  registers the tables
from app.models import inventory_schemas as schemas  # noqa: E402
from app.services import cache_service  # noqa: E402
from app.services.cache_service import InMemoryStore, InventoryCache  # noqa: E402
from app.services.inventory import InventoryService  # noqa: E402

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")


test_engine = create_engine(
    TEST_DATABASE_URL,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Ensure application code uses the test engine
settings.DATABASE_URL = TEST_DATABASE_URL  # type: ignore[attr-defined]
settings.ENV = "test"  # type: ignore[attr-defined]
db_session_module.engine = test_engine  # type: ignore[assignment]
SessionLocal.configure(bind=test_engine)


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield


@pytest.fixture(autouse=True)
def cache_store(monkeypatch):
    """Fresh in-process cache store, shared by services and the API."""
    store = InMemoryStore()
    monkeypatch.setattr(cache_service, "_SHARED_STORE", store)
    return store


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def service(db_session, cache_store):
    return InventoryService(db_session, InventoryCache(cache_store))


# FastAPI TestClient fixture
from fastapi.testclient import TestClient  # noqa: E402
from app.api.main import app  # noqa: E402


@pytest.fixture
def client():  # noqa: D401 - simple factory fixture
    """Provide a FastAPI TestClient bound to the application."""
    return TestClient(app)


# --- Builders shared by the service tests ---

@pytest.fixture
def make_category(service):
    def _make(name="Electronics", description=None):
        return service.create_category(schemas.CategoryCreate(name=name, description=description))

    return _make


@pytest.fixture
def make_supplier(service):
    def _make(name="Acme", contact_person="Jane Doe", **fields):
        return service.create_supplier(
            schemas.SupplierCreate(name=name, contact_person=contact_person, **fields)
        )

    return _make


@pytest.fixture
def make_product(service):
    def _make(
        name="Smartphone Pro",
        sku="PHONE-001",
        price="899.99",
        inventory_quantity=50,
        low_stock_threshold=10,
        category_id=None,
        supplier_id=None,
    ):
        return service.create_product(
            schemas.ProductCreate(
                name=name,
                sku=sku,
                price=Decimal(price),
                inventory_quantity=inventory_quantity,
                low_stock_threshold=low_stock_threshold,
                category_id=category_id,
                supplier_id=supplier_id,
            )
        )

    return _make
