from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

from datetime import date, datetime  # noqa: E402
from decimal import Decimal  # noqa: E402
from types import SimpleNamespace  # noqa: E402
from zoneinfo import ZoneInfo  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from opsboard.core.config import settings  # noqa: E402
from opsboard.core.security import create_access_token  # noqa: E402
from opsboard.db import session as db_session_module  # noqa: E402
from opsboard.db.base_class import Base  # noqa: E402
from opsboard.db.session import SessionLocal  # noqa: E402
from opsboard.models import pnl_models  # noqa: E402,F401

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

LONDON = ZoneInfo("Europe/London")


@pytest.fixture(autouse=True)
def _reset_database_state():
    """Ensure each test sees a fresh database schema."""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture
def now():
    """Mid-March 2025, London time."""
    return datetime(2025, 3, 17, 10, 30, tzinfo=LONDON)


@pytest.fixture
def deal_factory():
    """Build in-memory deal records with the stored cost lines."""
    def _create(close_date: date, revenue_inc_vat="1000", **overrides):
        data = {
            "id": overrides.pop("id", None),
            "close_date": close_date,
            "revenue_inc_vat": Decimal(str(revenue_inc_vat)),
            "operating_expense": Decimal("0"),
            "setter_cost": Decimal("0"),
            "sales_rep_cost": Decimal("0"),
            "lead_fulfillment_cost": Decimal("0"),
            "leads_sold": 1,
        }
        data.update({k: Decimal(str(v)) if k.endswith(("_expense", "_cost")) else v for k, v in overrides.items()})
        return SimpleNamespace(**data)
    return _create


@pytest.fixture
def cost_factory():
    """Build in-memory business cost records."""
    counter = {"next": 1}

    def _create(amount, cost_type="recurring", frequency="monthly", category="software",
                effective_date=date(2025, 1, 1), end_date=None, is_active=True, **overrides):
        cost_id = overrides.pop("id", None) or counter["next"]
        counter["next"] += 1
        return SimpleNamespace(
            id=cost_id,
            amount=Decimal(str(amount)),
            cost_type=cost_type,
            frequency=frequency if cost_type == "recurring" else None,
            category=category,
            effective_date=effective_date,
            end_date=end_date,
            is_active=is_active,
            **overrides,
        )
    return _create


# FastAPI TestClient fixtures for route tests
from fastapi.testclient import TestClient  # noqa: E402
from opsboard.api.main import app  # noqa: E402


@pytest.fixture
def client():
    """Provide a FastAPI TestClient bound to the application."""
    return TestClient(app)


@pytest.fixture
def admin_headers():
    token = create_access_token("ops-admin", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers():
    token = create_access_token("ops-viewer", role="viewer")
    return {"Authorization": f"Bearer {token}"}
