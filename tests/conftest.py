import os
from decimal import Decimal

import pytest


def _set_test_env() -> None:
    defaults = {
        "APP_NAME": "Roastery Storefront Test",
        "ENVIRONMENT": "test",
        "SUPABASE_JWT_SECRET": "test-jwt-secret",
        "AUTO_CREATE_TABLES": "false",
        "DATABASE_URL": "sqlite+pysqlite:///:memory:",
        "RATE_LIMIT_ENABLED": "false",
        "EMAIL_PROVIDER": "console",
        "REFUND_ON_CANCEL": "false",
        "CORS_ORIGINS": "http://localhost:5173,http://localhost:3000",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


_set_test_env()

from storefront.core.database import Base, SessionLocal, engine  # noqa: E402
from storefront.core.record_store import RecordStore  # noqa: E402
from storefront.models import Category, Product  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db):
    return RecordStore(db)


@pytest.fixture
def make_product(store):
    def _make(name: str = "House Blend", price: str = "12.50", category: str = "Coffee Beans") -> Product:
        cat = store.find_one(Category, name=category) or store.insert(Category(name=category))
        return store.insert(
            Product(name=name, price=Decimal(price), description=f"{name} beans", category_id=cat.id),
            commit=True,
        )

    return _make
